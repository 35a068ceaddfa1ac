"""
Request/response boundary for proxy queries.

Dispatches named requests through the ProxyMethod enum. Unrecognized
names are rejected as not implemented without touching the resolver.
"""
import asyncio
import logging
from typing import Any, Callable, Dict, Optional

from .resolver import ProxySettingsResolver, create_proxy_settings_resolver
from .types import (
    ChannelRequest,
    ChannelResponse,
    ProxyMethod,
    ProxySnapshot,
    ResolveResult,
    ResponseStatus,
)

logger = logging.getLogger("system_proxy.channel")


def _payload(result: ResolveResult) -> Optional[Dict[str, Any]]:
    if isinstance(result, ProxySnapshot):
        return result.to_payload()
    return None


class ProxyChannel:
    """
    Named channel answering proxy requests.

    Example:
        >>> channel = ProxyChannel(resolver, name="system_proxy/proxy")
        >>> response = channel.handle(ChannelRequest(method="getSystemProxy"))
        >>> response.result["httpEnabled"]
        False
    """

    def __init__(
        self,
        resolver: ProxySettingsResolver,
        name: Optional[str] = None,
    ) -> None:
        if name is None:
            from .config import get_channel_name

            name = get_channel_name()
        self._resolver = resolver
        self._name = name
        self._handlers: Dict[ProxyMethod, Callable[[ChannelRequest], ResolveResult]] = {
            ProxyMethod.GET_SYSTEM_PROXY: self._get_system_proxy,
        }

    @property
    def name(self) -> str:
        return self._name

    @property
    def resolver(self) -> ProxySettingsResolver:
        return self._resolver

    def _get_system_proxy(self, request: ChannelRequest) -> ResolveResult:
        return self._resolver.resolve()

    def _not_implemented(self, request: ChannelRequest) -> ChannelResponse:
        logger.warning(f"[{self._name}] method not implemented: {request.method!r}")
        return ChannelResponse(
            status=ResponseStatus.NOT_IMPLEMENTED,
            method=request.method,
        )

    def handle(self, request: ChannelRequest) -> ChannelResponse:
        """
        Answer a request synchronously.

        Args:
            request: Incoming request.

        Returns:
            SUCCESS with the snapshot payload (None when unavailable), or
            NOT_IMPLEMENTED for unknown request names.
        """
        method = ProxyMethod.parse(request.method)
        if method is None:
            return self._not_implemented(request)

        logger.debug(f"[{self._name}] handle: method={method.value}")
        result = self._handlers[method](request)
        return ChannelResponse(
            status=ResponseStatus.SUCCESS,
            method=request.method,
            result=_payload(result),
        )

    async def handle_async(self, request: ChannelRequest) -> ChannelResponse:
        """Answer a request with the platform read dispatched to a thread."""
        method = ProxyMethod.parse(request.method)
        if method is None:
            return self._not_implemented(request)

        logger.debug(f"[{self._name}] handle_async: method={method.value}")
        result = await asyncio.to_thread(self._handlers[method], request)
        return ChannelResponse(
            status=ResponseStatus.SUCCESS,
            method=request.method,
            result=_payload(result),
        )


def create_proxy_channel(
    resolver: Optional[ProxySettingsResolver] = None,
    name: Optional[str] = None,
) -> ProxyChannel:
    """
    Create a channel instance.

    Args:
        resolver: Resolver to answer with (default: platform resolver).
        name: Channel name (default: SYSTEM_PROXY_CHANNEL or system_proxy/proxy).

    Returns:
        Configured ProxyChannel.
    """
    return ProxyChannel(resolver or create_proxy_settings_resolver(), name=name)
