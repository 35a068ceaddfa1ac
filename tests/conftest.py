"""
Shared fixtures for system_proxy tests.
"""
import os
import subprocess
from typing import Callable
from unittest import mock

import pytest

from system_proxy.resolver import ProxySettingsResolver
from system_proxy.sources.static import StaticSettingsSource


SCUTIL_FULL_OUTPUT = """<dictionary> {
  ExceptionsList : <array> {
    0 : localhost
    1 : *.internal
  }
  FTPPassive : 1
  HTTPEnable : 1
  HTTPPort : 8080
  HTTPProxy : 10.0.0.1
  HTTPSEnable : 0
}
"""


@pytest.fixture
def clean_env():
    """Run with an empty environment."""
    with mock.patch.dict(os.environ, {}, clear=True):
        yield


@pytest.fixture
def full_bag():
    """Platform bag with every recognized key set."""
    return {
        "HTTPEnable": 1,
        "HTTPProxy": "10.0.0.1",
        "HTTPPort": 8080,
        "HTTPSEnable": 1,
        "HTTPSProxy": "secure.example.com",
        "HTTPSPort": 8443,
        "ExceptionsList": ["localhost", "*.internal"],
    }


@pytest.fixture
def make_resolver() -> Callable[..., ProxySettingsResolver]:
    """Build a resolver over a fixed bag (None means no bag)."""

    def _make(bag=None) -> ProxySettingsResolver:
        return ProxySettingsResolver(StaticSettingsSource(bag))

    return _make


@pytest.fixture
def scutil_runner():
    """Fake subprocess.run returning canned scutil output."""

    def _make(stdout: str = SCUTIL_FULL_OUTPUT, returncode: int = 0, stderr: str = ""):
        calls = []

        def _run(args, **kwargs):
            calls.append((args, kwargs))
            return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr=stderr)

        _run.calls = calls
        return _run

    return _make


@pytest.fixture
def scutil_output() -> str:
    """scutil --proxy output with HTTP enabled and two exceptions."""
    return SCUTIL_FULL_OUTPUT
