"""
Per-field coercion of a raw settings bag into ProxySnapshot fields.

Each coercer is a pure function taking the raw value (None when the key
is absent) and returning either the coerced value or the field default.
A malformed value for one key never affects any other field.
"""
import logging
import math
from typing import Any, Callable, Dict, Tuple

from .types import ProxySnapshot, SettingsBag

logger = logging.getLogger("system_proxy.coercion")

# Platform dictionary keys (CFNetwork / scutil names)
HTTP_ENABLE = "HTTPEnable"
HTTP_PROXY = "HTTPProxy"
HTTP_PORT = "HTTPPort"
HTTPS_ENABLE = "HTTPSEnable"
HTTPS_PROXY = "HTTPSProxy"
HTTPS_PORT = "HTTPSPort"
EXCEPTIONS_LIST = "ExceptionsList"


def coerce_flag(value: Any, default: bool = False) -> bool:
    """Booleans pass through; numbers are true when nonzero."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, float) and not math.isnan(value):
        return value != 0.0
    return default


def coerce_port(value: Any, default: int = 0) -> int:
    """Integers (and finite floats, truncated) that are non-negative."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        port = value
    elif isinstance(value, float) and math.isfinite(value):
        port = int(value)
    else:
        return default
    if port < 0:
        return default
    return port


def coerce_host(value: Any, default: str = "") -> str:
    if isinstance(value, str):
        return value
    return default


def coerce_exceptions(value: Any, default: Tuple[str, ...] = ()) -> Tuple[str, ...]:
    """
    Sequence of strings, platform order kept.

    The whole field falls back to the default when the value is not a
    list/tuple or any entry is not a string. Empty entries are dropped.
    """
    if not isinstance(value, (list, tuple)):
        return default
    if not all(isinstance(entry, str) for entry in value):
        return default
    return tuple(entry for entry in value if entry)


# snapshot attribute -> (bag key, coercer)
FIELD_COERCERS: Dict[str, Tuple[str, Callable[[Any], Any]]] = {
    "http_enabled": (HTTP_ENABLE, coerce_flag),
    "http_host": (HTTP_PROXY, coerce_host),
    "http_port": (HTTP_PORT, coerce_port),
    "https_enabled": (HTTPS_ENABLE, coerce_flag),
    "https_host": (HTTPS_PROXY, coerce_host),
    "https_port": (HTTPS_PORT, coerce_port),
    "exceptions": (EXCEPTIONS_LIST, coerce_exceptions),
}


def coerce_bag(bag: SettingsBag) -> ProxySnapshot:
    """
    Build a fully-populated ProxySnapshot from a raw settings bag.

    Unknown keys are ignored. Missing or wrong-typed keys get the field
    default independently of every other field.

    Args:
        bag: Raw key/value mapping from a settings source.

    Returns:
        ProxySnapshot with all seven fields set.
    """
    values: Dict[str, Any] = {}
    for attr, (key, coercer) in FIELD_COERCERS.items():
        if key not in bag:
            values[attr] = coercer(None)
            continue
        raw = bag[key]
        values[attr] = coercer(raw)
        logger.debug(f"coerce_bag: {key}={raw!r} -> {attr}={values[attr]!r}")
    return ProxySnapshot(**values)
