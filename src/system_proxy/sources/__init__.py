"""
Settings sources for system_proxy.

Provides the abstract base class and platform implementations.
"""
from .base import BaseSettingsSource
from .static import StaticSettingsSource
from .environment import EnvironmentSettingsSource
from .macos import ScutilSettingsSource, parse_scutil_output
from .windows import WindowsRegistrySettingsSource, settings_from_registry

__all__ = [
    "BaseSettingsSource",
    "StaticSettingsSource",
    "EnvironmentSettingsSource",
    "ScutilSettingsSource",
    "parse_scutil_output",
    "WindowsRegistrySettingsSource",
    "settings_from_registry",
]
