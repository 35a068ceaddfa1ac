"""
Abstract base class for settings sources.

Defines the interface that every platform source must implement.
"""
from abc import ABC, abstractmethod
from typing import Optional

from ..types import SettingsBag


class BaseSettingsSource(ABC):
    """
    Abstract reader of the platform proxy configuration.

    Subclasses return the raw key/value bag using the platform dictionary
    key names (HTTPEnable, HTTPProxy, ...). They signal an unreachable
    proxy subsystem by raising SettingsUnavailableError, and "nothing
    configured" by returning an empty bag.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Source name (e.g., 'scutil', 'registry', 'env').

        Returns:
            String identifier for this source.
        """
        ...

    @abstractmethod
    def read(self) -> Optional[SettingsBag]:
        """
        Read the current proxy configuration.

        Returns:
            Raw settings bag, or None if the platform returned nothing.

        Raises:
            SettingsUnavailableError: If the configuration cannot be read.
        """
        ...
