"""
Environment variable settings source.

Translates HTTP_PROXY / HTTPS_PROXY / NO_PROXY into the platform dictionary
shape. Used on hosts without a native proxy configuration store.
"""
import logging
import os
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlparse

from .base import BaseSettingsSource
from ..coercion import (
    EXCEPTIONS_LIST,
    HTTP_ENABLE,
    HTTP_PORT,
    HTTP_PROXY,
    HTTPS_ENABLE,
    HTTPS_PORT,
    HTTPS_PROXY,
)
from ..types import SettingsBag

logger = logging.getLogger("system_proxy.sources.environment")

_DEFAULT_PORTS = {"http": 80, "https": 443}


def _mask_proxy_url(url: str | None) -> str:
    """Hide userinfo in a proxy URL before it is logged."""
    if not url:
        return "None"
    scheme, sep, rest = url.rpartition("://")
    _, at, hostport = rest.rpartition("@")
    if not at:
        return url
    return f"{scheme}{sep}***@{hostport}"


def _lookup(environ: Mapping[str, str], name: str) -> Optional[str]:
    """Uppercase wins over lowercase; blank values count as unset."""
    for key in (name.upper(), name.lower()):
        value = environ.get(key, "").strip()
        if value:
            return value
    return None


def parse_proxy_url(url: str) -> Optional[Tuple[str, int]]:
    """
    Split a proxy URL into (host, port).

    A bare "host:port" is treated as http. A missing port falls back to the
    scheme default.

    Returns:
        (host, port) tuple, or None if no host can be extracted.
    """
    if "://" not in url:
        url = f"http://{url}"
    try:
        parsed = urlparse(url)
        host = parsed.hostname
        port = parsed.port
    except ValueError:
        return None
    if not host:
        return None
    if port is None:
        port = _DEFAULT_PORTS.get(parsed.scheme.lower(), 80)
    return host, port


def split_no_proxy(value: str) -> List[str]:
    return [entry.strip() for entry in value.split(",") if entry.strip()]


class EnvironmentSettingsSource(BaseSettingsSource):
    """
    Settings source backed by proxy environment variables.

    Always returns a bag: an environment with no proxy variables is an
    empty (not unavailable) configuration.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        self._environ = environ

    @property
    def name(self) -> str:
        return "env"

    def read(self) -> Optional[SettingsBag]:
        environ = self._environ if self._environ is not None else os.environ
        bag: Dict[str, Any] = {}

        for var, enable_key, host_key, port_key in (
            ("http_proxy", HTTP_ENABLE, HTTP_PROXY, HTTP_PORT),
            ("https_proxy", HTTPS_ENABLE, HTTPS_PROXY, HTTPS_PORT),
        ):
            raw = _lookup(environ, var)
            logger.debug(f"read: {var}={_mask_proxy_url(raw)}")
            if not raw:
                bag[enable_key] = 0
                continue
            parsed = parse_proxy_url(raw)
            if parsed is None:
                logger.warning(f"read: ignoring unparseable {var}={_mask_proxy_url(raw)}")
                bag[enable_key] = 0
                continue
            host, port = parsed
            bag[enable_key] = 1
            bag[host_key] = host
            bag[port_key] = port

        no_proxy = _lookup(environ, "no_proxy")
        if no_proxy:
            bag[EXCEPTIONS_LIST] = split_no_proxy(no_proxy)

        return bag
