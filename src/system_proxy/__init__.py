"""
system_proxy - Read the host's configured HTTP/HTTPS proxy settings.

This package queries the operating system's proxy configuration store,
normalizes the loosely-typed settings into a ProxySnapshot with guaranteed
fields, and answers named requests over a small request/response channel.

Example - Simple API (auto-detect platform):
    >>> from system_proxy import get_system_proxy
    >>>
    >>> result = get_system_proxy()
    >>> if result:
    ...     print(result.http_enabled, result.http_host, result.http_port)
    ... else:
    ...     print(f"unavailable: {result.reason}")

Example - Channel API:
    >>> from system_proxy import create_proxy_channel, ChannelRequest
    >>>
    >>> channel = create_proxy_channel()
    >>> response = channel.handle(ChannelRequest(method="getSystemProxy"))
    >>> response.result  # dict with the seven payload fields, or None

Environment Variables:
    SYSTEM_PROXY_SOURCE: Settings source (auto, scutil, registry, env, static)
    SYSTEM_PROXY_SCUTIL_PATH: scutil binary (default: /usr/sbin/scutil)
    SYSTEM_PROXY_SCUTIL_TIMEOUT: scutil timeout in seconds (default: 2.0)
    SYSTEM_PROXY_CHANNEL: Channel name (default: system_proxy/proxy)
    DEBUG: Logging control (set to "false" or "0" to disable, enabled by default)
"""
import logging
import os

__version__ = "1.0.0"


def _is_debug_enabled() -> bool:
    """
    Check if debug logging is enabled.
    Logging is ENABLED by default. Disable with DEBUG=false or DEBUG=0.
    """
    debug = os.environ.get("DEBUG", "").lower()
    if debug in ("false", "0"):
        return False
    return True


def _configure_logging() -> None:
    """Configure package logging based on DEBUG environment variable."""
    package_logger = logging.getLogger("system_proxy")

    if _is_debug_enabled():
        package_logger.setLevel(logging.DEBUG)

        # Add handler once
        if not package_logger.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(logging.Formatter("[%(name)s] %(message)s"))
            package_logger.addHandler(handler)
    else:
        package_logger.setLevel(logging.WARNING)


_configure_logging()

# Types
from .types import (
    SettingsBag,
    SettingsUnavailableError,
    ConfigurationError,
    ProxySnapshot,
    ProxyUnavailable,
    ResolveResult,
    ProxyMethod,
    ResponseStatus,
    ChannelRequest,
    ChannelResponse,
    SystemProxyConfig,
)

# Coercion
from .coercion import (
    coerce_bag,
    coerce_flag,
    coerce_port,
    coerce_host,
    coerce_exceptions,
)

# Config
from .config import (
    get_source_name,
    get_scutil_path,
    get_scutil_timeout,
    get_channel_name,
    load_config,
    platform_source_name,
    create_default_source,
    register_source,
)

# Sources
from .sources import (
    BaseSettingsSource,
    StaticSettingsSource,
    EnvironmentSettingsSource,
    ScutilSettingsSource,
    WindowsRegistrySettingsSource,
)

# Resolver
from .resolver import ProxySettingsResolver, create_proxy_settings_resolver

# Channel
from .channel import ProxyChannel, create_proxy_channel


def get_system_proxy() -> ResolveResult:
    """
    Resolve the current system proxy using the configured platform source.

    Returns:
        ProxySnapshot, or ProxyUnavailable if the configuration cannot be read.
    """
    return create_proxy_settings_resolver().resolve()


__all__ = [
    # Version
    "__version__",
    # Types
    "SettingsBag",
    "SettingsUnavailableError",
    "ConfigurationError",
    "ProxySnapshot",
    "ProxyUnavailable",
    "ResolveResult",
    "ProxyMethod",
    "ResponseStatus",
    "ChannelRequest",
    "ChannelResponse",
    "SystemProxyConfig",
    # Coercion
    "coerce_bag",
    "coerce_flag",
    "coerce_port",
    "coerce_host",
    "coerce_exceptions",
    # Config
    "get_source_name",
    "get_scutil_path",
    "get_scutil_timeout",
    "get_channel_name",
    "load_config",
    "platform_source_name",
    "create_default_source",
    "register_source",
    # Sources
    "BaseSettingsSource",
    "StaticSettingsSource",
    "EnvironmentSettingsSource",
    "ScutilSettingsSource",
    "WindowsRegistrySettingsSource",
    # Resolver
    "ProxySettingsResolver",
    "create_proxy_settings_resolver",
    # Channel
    "ProxyChannel",
    "create_proxy_channel",
    "get_system_proxy",
]
