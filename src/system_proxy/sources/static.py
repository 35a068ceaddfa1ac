"""
Fixed settings source.
"""
from typing import Any, Dict, Mapping, Optional

from .base import BaseSettingsSource
from ..types import SettingsBag


class StaticSettingsSource(BaseSettingsSource):
    """
    Returns a fixed bag on every read, or None when constructed without one.

    Useful in tests and when the embedding application already holds the
    raw settings.

    Example:
        >>> source = StaticSettingsSource({"HTTPEnable": 1, "HTTPProxy": "10.0.0.1"})
        >>> source.read()["HTTPProxy"]
        '10.0.0.1'
    """

    def __init__(self, bag: Optional[Mapping[str, Any]] = None) -> None:
        self._bag: Optional[Dict[str, Any]] = dict(bag) if bag is not None else None
        self.read_count = 0

    @property
    def name(self) -> str:
        return "static"

    def read(self) -> Optional[SettingsBag]:
        self.read_count += 1
        if self._bag is None:
            return None
        return dict(self._bag)
