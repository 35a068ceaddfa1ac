"""
Environment-driven configuration and source selection.

Reads SYSTEM_PROXY_* environment variables and picks the settings source
for the current platform.
"""
import logging
import os
import sys
from typing import Callable, Dict, Optional

from .sources.base import BaseSettingsSource
from .sources.environment import EnvironmentSettingsSource
from .sources.macos import DEFAULT_SCUTIL_PATH, DEFAULT_SCUTIL_TIMEOUT, ScutilSettingsSource
from .sources.static import StaticSettingsSource
from .sources.windows import WindowsRegistrySettingsSource
from .types import ConfigurationError, SystemProxyConfig

logger = logging.getLogger("system_proxy.config")

DEFAULT_CHANNEL_NAME = "system_proxy/proxy"

SOURCE_AUTO = "auto"


def get_source_name(default: str = SOURCE_AUTO) -> str:
    """
    Get the configured settings source from SYSTEM_PROXY_SOURCE.

    Returns the lowercased value, or default if not set.
    """
    raw = os.environ.get("SYSTEM_PROXY_SOURCE", "").strip()
    result = raw.lower() if raw else default
    logger.debug(f"get_source_name: SYSTEM_PROXY_SOURCE={raw!r}, result={result!r}")
    return result


def get_scutil_path() -> str:
    return os.environ.get("SYSTEM_PROXY_SCUTIL_PATH") or DEFAULT_SCUTIL_PATH


def get_scutil_timeout() -> float:
    """
    Get the scutil timeout in seconds from SYSTEM_PROXY_SCUTIL_TIMEOUT.

    Non-numeric or non-positive values fall back to the default.
    """
    raw = os.environ.get("SYSTEM_PROXY_SCUTIL_TIMEOUT", "")
    if not raw:
        return DEFAULT_SCUTIL_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"get_scutil_timeout: invalid SYSTEM_PROXY_SCUTIL_TIMEOUT={raw!r}")
        return DEFAULT_SCUTIL_TIMEOUT
    if value <= 0:
        logger.warning(f"get_scutil_timeout: non-positive SYSTEM_PROXY_SCUTIL_TIMEOUT={raw!r}")
        return DEFAULT_SCUTIL_TIMEOUT
    return value


def get_channel_name() -> str:
    return os.environ.get("SYSTEM_PROXY_CHANNEL") or DEFAULT_CHANNEL_NAME


def load_config() -> SystemProxyConfig:
    """Build SystemProxyConfig from the environment."""
    config = SystemProxyConfig(
        source=get_source_name(),
        scutil_path=get_scutil_path(),
        scutil_timeout_seconds=get_scutil_timeout(),
        channel_name=get_channel_name(),
    )
    logger.debug(f"load_config: {config!r}")
    return config


def platform_source_name(platform: Optional[str] = None) -> str:
    """Map sys.platform to the native source name."""
    platform = platform or sys.platform
    if platform == "darwin":
        return "scutil"
    if platform.startswith("win"):
        return "registry"
    return "env"


# Source registry
_SOURCES: Dict[str, Callable[[SystemProxyConfig], BaseSettingsSource]] = {
    "scutil": lambda config: ScutilSettingsSource(
        scutil_path=config.scutil_path,
        timeout=config.scutil_timeout_seconds,
    ),
    "registry": lambda config: WindowsRegistrySettingsSource(),
    "env": lambda config: EnvironmentSettingsSource(),
    "static": lambda config: StaticSettingsSource(),
}


def create_default_source(
    config: Optional[SystemProxyConfig] = None,
    platform: Optional[str] = None,
) -> BaseSettingsSource:
    """
    Create the settings source named by configuration.

    Args:
        config: Configuration (default: load_config()).
        platform: Platform override for "auto" (default: sys.platform).

    Returns:
        Settings source instance.

    Raises:
        ConfigurationError: If the source name is not registered.
    """
    config = config or load_config()
    name = config.source
    if name == SOURCE_AUTO:
        name = platform_source_name(platform)

    factory = _SOURCES.get(name)
    if factory is None:
        raise ConfigurationError(
            f"Unknown settings source {config.source!r}; "
            f"expected one of {[SOURCE_AUTO, *_SOURCES]}"
        )
    source = factory(config)
    logger.debug(f"create_default_source: source={source.name}")
    return source


def register_source(
    name: str,
    factory: Callable[[SystemProxyConfig], BaseSettingsSource],
) -> None:
    """
    Register a new settings source.

    Args:
        name: Source name for SYSTEM_PROXY_SOURCE lookup.
        factory: Callable building the source from configuration.
    """
    _SOURCES[name] = factory
