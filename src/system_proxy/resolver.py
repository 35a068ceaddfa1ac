"""
ProxySettingsResolver - reads the platform proxy configuration and
normalizes it into a ProxySnapshot.
"""
import asyncio
import logging
from collections.abc import Mapping
from typing import Optional

from .coercion import coerce_bag
from .sources.base import BaseSettingsSource
from .types import ProxyUnavailable, ResolveResult, SettingsUnavailableError

logger = logging.getLogger("system_proxy.resolver")


class ProxySettingsResolver:
    """
    Resolve the current system proxy configuration.

    Each call reads a fresh bag from the settings source; nothing is cached
    between calls and no state is shared, so concurrent calls are safe.

    Example:
        resolver = ProxySettingsResolver(StaticSettingsSource({
            "HTTPEnable": 1,
            "HTTPProxy": "10.0.0.1",
            "HTTPPort": 8080,
        }))

        result = resolver.resolve()
        if result:
            print(result.http_host, result.http_port)
        else:
            print(f"unavailable: {result.reason}")
    """

    def __init__(self, source: BaseSettingsSource) -> None:
        self._source = source

    @property
    def source(self) -> BaseSettingsSource:
        return self._source

    def resolve(self) -> ResolveResult:
        """
        Read and normalize the platform proxy configuration.

        Never raises. A source that returns nothing or fails yields
        ProxyUnavailable; any bag, even an empty one, yields a snapshot.

        Returns:
            ProxySnapshot with all seven fields, or ProxyUnavailable.
        """
        source_name = self._source.name
        try:
            bag = self._source.read()
        except SettingsUnavailableError as e:
            logger.warning(f"resolve: source={source_name} unavailable: {e}")
            return ProxyUnavailable(reason=str(e))
        except Exception as e:
            logger.exception(f"resolve: source={source_name} failed")
            return ProxyUnavailable(reason=f"{type(e).__name__}: {e}")

        if bag is None:
            logger.debug(f"resolve: source={source_name} returned no settings")
            return ProxyUnavailable(reason=f"{source_name} returned no proxy settings")

        if not isinstance(bag, Mapping):
            logger.warning(
                f"resolve: source={source_name} returned {type(bag).__name__}, expected a mapping"
            )
            return ProxyUnavailable(
                reason=f"{source_name} returned malformed proxy settings ({type(bag).__name__})"
            )

        snapshot = coerce_bag(bag)
        logger.debug(
            f"resolve: source={source_name} http={snapshot.http_enabled}:"
            f"{snapshot.http_host}:{snapshot.http_port} "
            f"https={snapshot.https_enabled}:{snapshot.https_host}:{snapshot.https_port} "
            f"exceptions={len(snapshot.exceptions)}"
        )
        return snapshot

    async def resolve_async(self) -> ResolveResult:
        """
        Run resolve() in a worker thread.

        The platform read may block briefly (scutil subprocess, registry
        access); this keeps it off the event loop.
        """
        return await asyncio.to_thread(self.resolve)


def create_proxy_settings_resolver(
    source: Optional[BaseSettingsSource] = None,
) -> ProxySettingsResolver:
    """
    Create a resolver.

    Args:
        source: Settings source (default: selected from configuration
            and platform by create_default_source()).

    Returns:
        ProxySettingsResolver instance.

    Raises:
        ConfigurationError: If SYSTEM_PROXY_SOURCE names an unknown source.
    """
    if source is None:
        from .config import create_default_source

        source = create_default_source()
    return ProxySettingsResolver(source)
