"""
FastAPI integration for system_proxy.

Exposes ProxyChannel over HTTP: one POST route per request name, lifespan
management and a dependency returning the application-scoped channel.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import Any, AsyncGenerator, Callable, Optional

try:
    from fastapi import APIRouter, Depends, HTTPException, Request
except ImportError:
    raise ImportError("FastAPI is required for this module. Install with: pip install system-proxy[fastapi]")

from ..channel import ProxyChannel, create_proxy_channel
from ..types import ChannelRequest

logger = logging.getLogger(__name__)


def get_proxy_channel(request: Request) -> ProxyChannel:
    """
    FastAPI dependency returning the channel stored by create_lifespan().

    Raises:
        HTTPException: 503 if the lifespan did not register a channel.
    """
    channel: Optional[ProxyChannel] = getattr(request.app.state, "proxy_channel", None)
    if channel is None:
        raise HTTPException(status_code=503, detail="Proxy channel not initialized")
    return channel


def create_lifespan(
    channel_factory: Optional[Callable[[], ProxyChannel]] = None,
) -> Callable[..., Any]:
    """
    Factory to create a FastAPI lifespan context manager.

    Args:
        channel_factory: Builds the channel at startup
            (default: create_proxy_channel()).

    Returns:
        Lifespan context manager for FastAPI app.

    Example:
        from fastapi import FastAPI
        from system_proxy.integrations.fastapi import create_lifespan, create_proxy_router

        app = FastAPI(lifespan=create_lifespan())
        app.include_router(create_proxy_router())
    """

    @asynccontextmanager
    async def lifespan(app: Any) -> AsyncGenerator[None, None]:
        channel = (channel_factory or create_proxy_channel)()
        app.state.proxy_channel = channel
        logger.info(f"Registered proxy channel: {channel.name} (source={channel.resolver.source.name})")

        yield

        app.state.proxy_channel = None

    return lifespan


def create_proxy_router(
    channel: Optional[ProxyChannel] = None,
    prefix: str = "/proxy",
) -> APIRouter:
    """
    Create a router answering channel requests.

    POST {prefix}/{method} returns the snapshot payload, JSON null when the
    configuration is unavailable, or 501 for unknown request names.

    Args:
        channel: Fixed channel to use (default: the one from app.state).
        prefix: Route prefix.

    Returns:
        APIRouter to include in the application.
    """
    router = APIRouter(prefix=prefix, tags=["proxy"])

    def _channel(request: Request) -> ProxyChannel:
        if channel is not None:
            return channel
        return get_proxy_channel(request)

    @router.post("/{method}")
    async def call_method(
        method: str,
        proxy_channel: ProxyChannel = Depends(_channel),
    ) -> Optional[dict[str, Any]]:
        response = await proxy_channel.handle_async(ChannelRequest(method=method))
        if not response.is_implemented:
            raise HTTPException(status_code=501, detail=f"Method '{method}' not implemented")
        return response.result

    return router
