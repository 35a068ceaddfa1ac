"""
Windows settings source backed by the WinINet registry values.

Reads HKCU\\Software\\Microsoft\\Windows\\CurrentVersion\\Internet Settings:
- ProxyEnable   (DWORD)  0/1
- ProxyServer   (SZ)     "host:port" or "http=host:port;https=host:port"
- ProxyOverride (SZ)     "localhost;*.internal;<local>"
"""
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from .base import BaseSettingsSource
from .environment import parse_proxy_url
from ..coercion import (
    EXCEPTIONS_LIST,
    HTTP_ENABLE,
    HTTP_PORT,
    HTTP_PROXY,
    HTTPS_ENABLE,
    HTTPS_PORT,
    HTTPS_PROXY,
)
from ..types import SettingsBag, SettingsUnavailableError

logger = logging.getLogger("system_proxy.sources.windows")

INTERNET_SETTINGS = r"Software\Microsoft\Windows\CurrentVersion\Internet Settings"
REGISTRY_VALUES = ("ProxyEnable", "ProxyServer", "ProxyOverride")

RegistryReader = Callable[[], Mapping[str, Any]]


def read_internet_settings() -> Dict[str, Any]:
    """
    Read the proxy values from the current user's Internet Settings key.

    Values that are not set are left out of the result.

    Raises:
        SettingsUnavailableError: If the key cannot be opened.
    """
    try:
        import winreg
    except ImportError as e:
        raise SettingsUnavailableError("winreg is only available on Windows") from e

    try:
        key = winreg.OpenKey(winreg.HKEY_CURRENT_USER, INTERNET_SETTINGS, 0, winreg.KEY_READ)
    except OSError as e:
        raise SettingsUnavailableError(f"cannot open registry key: {e}") from e

    values: Dict[str, Any] = {}
    with key:
        for name in REGISTRY_VALUES:
            try:
                values[name], _ = winreg.QueryValueEx(key, name)
            except FileNotFoundError:
                continue
    return values


def parse_proxy_server(value: str) -> Dict[str, Tuple[str, int]]:
    """
    Split a ProxyServer string into per-scheme (host, port) pairs.

    "host:port" applies to both http and https. The per-protocol form
    "http=a:1;https=b:2" sets each scheme separately; other schemes
    (ftp, socks) are ignored.
    """
    servers: Dict[str, Tuple[str, int]] = {}
    for part in value.split(";"):
        part = part.strip()
        if not part:
            continue
        if "=" in part:
            scheme, _, address = part.partition("=")
            scheme = scheme.strip().lower()
            if scheme not in ("http", "https"):
                continue
            targets = [scheme]
        else:
            address = part
            targets = ["http", "https"]
        parsed = parse_proxy_url(address.strip())
        if parsed is None:
            logger.debug(f"parse_proxy_server: skipping {part!r}")
            continue
        for scheme in targets:
            servers.setdefault(scheme, parsed)
    return servers


def settings_from_registry(values: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Translate raw registry values into the platform dictionary shape.

    Enabled flags follow ProxyEnable for each scheme that has a server.
    """
    bag: Dict[str, Any] = {}
    enabled = values.get("ProxyEnable")
    server = values.get("ProxyServer")
    servers = parse_proxy_server(server) if isinstance(server, str) else {}

    for scheme, enable_key, host_key, port_key in (
        ("http", HTTP_ENABLE, HTTP_PROXY, HTTP_PORT),
        ("https", HTTPS_ENABLE, HTTPS_PROXY, HTTPS_PORT),
    ):
        if scheme not in servers:
            if enabled is not None:
                bag[enable_key] = 0
            continue
        host, port = servers[scheme]
        if enabled is not None:
            bag[enable_key] = enabled
        bag[host_key] = host
        bag[port_key] = port

    override = values.get("ProxyOverride")
    if isinstance(override, str):
        bag[EXCEPTIONS_LIST] = [entry.strip() for entry in override.split(";") if entry.strip()]

    return bag


class WindowsRegistrySettingsSource(BaseSettingsSource):
    """
    Reads the Windows per-user proxy configuration.

    Example:
        >>> source = WindowsRegistrySettingsSource(
        ...     reader=lambda: {"ProxyEnable": 1, "ProxyServer": "10.0.0.1:8080"},
        ... )
        >>> source.read()["HTTPSProxy"]
        '10.0.0.1'
    """

    def __init__(self, reader: Optional[RegistryReader] = None) -> None:
        self._reader = reader or read_internet_settings

    @property
    def name(self) -> str:
        return "registry"

    def read(self) -> Optional[SettingsBag]:
        values = self._reader()
        if values is None:
            return None
        logger.debug(f"read: registry values present={sorted(values)}")
        return settings_from_registry(values)
