"""
Type definitions for system_proxy
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


# Raw key/value bag as returned by a settings source
SettingsBag = Mapping[str, Any]


class SettingsUnavailableError(Exception):
    """Raised by a settings source when the proxy configuration cannot be read."""
    pass


class ConfigurationError(ValueError):
    """Raised when system_proxy configuration names an unknown option."""
    pass


class ProxySnapshot(BaseModel):
    """
    Normalized HTTP/HTTPS proxy configuration.

    Every field is always present. Attribute names are snake_case; the
    payload handed across the channel uses the camelCase aliases.

    Example:
        >>> snapshot = ProxySnapshot(http_enabled=True, http_host="10.0.0.1", http_port=8080)
        >>> snapshot.to_payload()["httpHost"]
        '10.0.0.1'
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    http_enabled: bool = Field(default=False, alias="httpEnabled")
    http_host: str = Field(default="", alias="httpHost")
    http_port: int = Field(default=0, ge=0, alias="httpPort")
    https_enabled: bool = Field(default=False, alias="httpsEnabled")
    https_host: str = Field(default="", alias="httpsHost")
    https_port: int = Field(default=0, ge=0, alias="httpsPort")
    exceptions: Tuple[str, ...] = Field(default=(), alias="exceptions")

    def to_payload(self) -> Dict[str, Any]:
        """Wire representation with the seven camelCase field names."""
        return self.model_dump(by_alias=True, mode="json")


@dataclass(frozen=True)
class ProxyUnavailable:
    """
    Outcome when the platform proxy configuration could not be determined.

    This is not the same as "no proxy configured", which is a ProxySnapshot
    with both enabled flags False.
    """
    reason: str = "proxy configuration unavailable"

    def __bool__(self) -> bool:
        return False


ResolveResult = Union[ProxySnapshot, ProxyUnavailable]


class ProxyMethod(str, Enum):
    """Request kinds recognized by ProxyChannel"""
    GET_SYSTEM_PROXY = "getSystemProxy"

    @classmethod
    def parse(cls, name: str) -> Optional["ProxyMethod"]:
        """Map a request name to a member, or None if unrecognized."""
        try:
            return cls(name)
        except ValueError:
            return None


class ResponseStatus(str, Enum):
    """Channel response status"""
    SUCCESS = "success"
    NOT_IMPLEMENTED = "not_implemented"


@dataclass
class ChannelRequest:
    """A named request arriving at the channel"""

    method: str
    """Request name, e.g. getSystemProxy"""

    arguments: Optional[Dict[str, Any]] = None
    """Request arguments (unused by current request kinds)"""


@dataclass
class ChannelResponse:
    """Response returned by ProxyChannel.handle"""

    status: ResponseStatus
    """Whether the request was answered or rejected"""

    method: str
    """Echo of the request name"""

    result: Optional[Dict[str, Any]] = None
    """Snapshot payload, or None when unavailable / not implemented"""

    @property
    def is_implemented(self) -> bool:
        return self.status is not ResponseStatus.NOT_IMPLEMENTED


class SystemProxyConfig(BaseModel):
    """
    Runtime configuration for system_proxy.

    Normally built from environment variables by config.load_config().
    """
    source: str = "auto"
    scutil_path: str = "/usr/sbin/scutil"
    scutil_timeout_seconds: float = Field(default=2.0, gt=0)
    channel_name: str = "system_proxy/proxy"
