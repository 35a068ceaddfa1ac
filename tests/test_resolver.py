"""
Tests for ProxySettingsResolver

Coverage includes:
- Full / empty / partial bags
- Unavailable outcomes (no bag, source errors)
- Idempotence and fresh reads per call
- Async dispatch
"""
import pytest

from system_proxy.resolver import ProxySettingsResolver, create_proxy_settings_resolver
from system_proxy.sources.base import BaseSettingsSource
from system_proxy.sources.static import StaticSettingsSource
from system_proxy.types import (
    ProxySnapshot,
    ProxyUnavailable,
    SettingsUnavailableError,
)


class _RaisingSource(BaseSettingsSource):
    def __init__(self, error: Exception) -> None:
        self._error = error

    @property
    def name(self) -> str:
        return "raising"

    def read(self):
        raise self._error


class _SequenceSource(BaseSettingsSource):
    def __init__(self, *bags) -> None:
        self._bags = list(bags)

    @property
    def name(self) -> str:
        return "sequence"

    def read(self):
        return self._bags.pop(0)


class TestResolve:
    """Tests for ProxySettingsResolver.resolve"""

    def test_full_config(self, make_resolver):
        """HTTP proxy configured, HTTPS disabled, other fields defaulted"""
        resolver = make_resolver({
            "HTTPEnable": True,
            "HTTPProxy": "10.0.0.1",
            "HTTPPort": 8080,
            "HTTPSEnable": False,
        })

        result = resolver.resolve()

        assert isinstance(result, ProxySnapshot)
        assert result.to_payload() == {
            "httpEnabled": True,
            "httpHost": "10.0.0.1",
            "httpPort": 8080,
            "httpsEnabled": False,
            "httpsHost": "",
            "httpsPort": 0,
            "exceptions": [],
        }

    def test_empty_bag_returns_defaults(self, make_resolver):
        """An empty bag is a valid, all-default snapshot"""
        result = make_resolver({}).resolve()

        assert isinstance(result, ProxySnapshot)
        assert result == ProxySnapshot()

    def test_no_bag_is_unavailable(self, make_resolver):
        """No bag at all yields Unavailable, not a default snapshot"""
        result = make_resolver(None).resolve()

        assert isinstance(result, ProxyUnavailable)
        assert not result
        assert result != ProxySnapshot()

    def test_exceptions_order_preserved(self, make_resolver):
        result = make_resolver({"ExceptionsList": ["localhost", "*.internal"]}).resolve()

        assert result.exceptions == ("localhost", "*.internal")
        assert result.to_payload()["exceptions"] == ["localhost", "*.internal"]

    def test_payload_has_exactly_seven_fields(self, make_resolver, full_bag):
        payload = make_resolver(full_bag).resolve().to_payload()

        assert set(payload) == {
            "httpEnabled",
            "httpHost",
            "httpPort",
            "httpsEnabled",
            "httpsHost",
            "httpsPort",
            "exceptions",
        }
        assert isinstance(payload["httpEnabled"], bool)
        assert isinstance(payload["httpHost"], str)
        assert isinstance(payload["httpPort"], int)
        assert isinstance(payload["httpsEnabled"], bool)
        assert isinstance(payload["httpsHost"], str)
        assert isinstance(payload["httpsPort"], int)
        assert isinstance(payload["exceptions"], list)

    def test_missing_keys_default_independently(self, make_resolver):
        result = make_resolver({"HTTPSProxy": "secure.example.com", "HTTPSPort": 443}).resolve()

        assert result.http_enabled is False
        assert result.http_host == ""
        assert result.http_port == 0
        assert result.https_enabled is False
        assert result.https_host == "secure.example.com"
        assert result.https_port == 443

    def test_malformed_port_isolated(self, make_resolver, full_bag):
        full_bag["HTTPPort"] = {"port": 8080}

        result = make_resolver(full_bag).resolve()

        assert result.http_port == 0
        assert result.https_host == "secure.example.com"
        assert result.exceptions == ("localhost", "*.internal")

    def test_idempotent(self, make_resolver, full_bag):
        resolver = make_resolver(full_bag)

        assert resolver.resolve() == resolver.resolve()

    def test_reads_fresh_each_call(self):
        """Nothing is cached between calls"""
        source = _SequenceSource({"HTTPEnable": 1}, {"HTTPEnable": 0})
        resolver = ProxySettingsResolver(source)

        assert resolver.resolve().http_enabled is True
        assert resolver.resolve().http_enabled is False

    def test_source_read_once_per_call(self, full_bag):
        source = StaticSettingsSource(full_bag)
        resolver = ProxySettingsResolver(source)

        resolver.resolve()
        resolver.resolve()

        assert source.read_count == 2

    def test_snapshot_is_immutable(self, make_resolver, full_bag):
        snapshot = make_resolver(full_bag).resolve()

        with pytest.raises(Exception):
            snapshot.http_port = 1


class TestResolveUnavailable:
    """Tests for source failures"""

    def test_settings_unavailable_error(self):
        resolver = ProxySettingsResolver(_RaisingSource(SettingsUnavailableError("scutil missing")))

        result = resolver.resolve()

        assert isinstance(result, ProxyUnavailable)
        assert result.reason == "scutil missing"

    def test_unexpected_error_never_raises(self):
        resolver = ProxySettingsResolver(_RaisingSource(RuntimeError("boom")))

        result = resolver.resolve()

        assert isinstance(result, ProxyUnavailable)
        assert "RuntimeError" in result.reason

    @pytest.mark.parametrize("bag", ["HTTPEnable", ["HTTPEnable", 1], 42])
    def test_non_mapping_bag_is_unavailable(self, bag):
        resolver = ProxySettingsResolver(_SequenceSource(bag))

        result = resolver.resolve()

        assert isinstance(result, ProxyUnavailable)
        assert "malformed" in result.reason


class TestResolveAsync:
    """Tests for ProxySettingsResolver.resolve_async"""

    @pytest.mark.asyncio
    async def test_resolve_async_snapshot(self, make_resolver, full_bag):
        result = await make_resolver(full_bag).resolve_async()

        assert result.http_host == "10.0.0.1"

    @pytest.mark.asyncio
    async def test_resolve_async_unavailable(self, make_resolver):
        result = await make_resolver(None).resolve_async()

        assert isinstance(result, ProxyUnavailable)


class TestCreateResolver:
    """Tests for create_proxy_settings_resolver"""

    def test_explicit_source(self):
        source = StaticSettingsSource({})
        resolver = create_proxy_settings_resolver(source)

        assert resolver.source is source

    def test_default_source_from_env(self, clean_env, monkeypatch):
        monkeypatch.setenv("SYSTEM_PROXY_SOURCE", "env")
        resolver = create_proxy_settings_resolver()

        assert resolver.source.name == "env"
