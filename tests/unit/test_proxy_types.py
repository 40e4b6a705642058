"""Unit tests for proxy endpoint parsing."""

import dataclasses

import pytest

from proxybench.errors import ConfigError
from proxybench.proxy.types import ProxyEndpoint, ProxyProtocol, parse_proxy


class TestParseProxy:
    """Test parse_proxy()."""

    def test_parses_all_fields(self):
        proxy = parse_proxy("http:proxy1.example.com:8080:alice:s3cret:enabled")
        assert proxy.protocol is ProxyProtocol.HTTP
        assert proxy.host == "proxy1.example.com"
        assert proxy.port == 8080
        assert proxy.username == "alice"
        assert proxy.password == "s3cret"
        assert proxy.enabled is True

    def test_parses_https_and_socks(self):
        assert parse_proxy("https:p:443:u:p:enabled").protocol is ProxyProtocol.HTTPS
        assert parse_proxy("socks:p:1080:u:p:enabled").protocol is ProxyProtocol.SOCKS

    def test_protocol_is_case_insensitive(self):
        assert parse_proxy("HTTP:p:8080:u:p:enabled").protocol is ProxyProtocol.HTTP

    def test_non_enabled_status_is_disabled(self):
        assert parse_proxy("http:p:8080:u:p:disabled").enabled is False
        assert parse_proxy("http:p:8080:u:p:paused").enabled is False

    def test_empty_credentials_allowed(self):
        proxy = parse_proxy("http:p:8080:::enabled")
        assert proxy.username == ""
        assert proxy.password == ""

    @pytest.mark.parametrize(
        "raw",
        [
            "http:p:8080:u:p",
            "http:p:8080:u:p:enabled:extra",
            "",
        ],
    )
    def test_wrong_field_count_raises(self, raw):
        with pytest.raises(ConfigError):
            parse_proxy(raw)

    def test_unsupported_protocol_raises(self):
        with pytest.raises(ConfigError, match="unsupported proxy protocol"):
            parse_proxy("socks4:p:1080:u:p:enabled")

    @pytest.mark.parametrize("port", ["abc", "0", "70000", "-1"])
    def test_invalid_port_raises(self, port):
        with pytest.raises(ConfigError):
            parse_proxy(f"http:p:{port}:u:p:enabled")

    def test_empty_host_raises(self):
        with pytest.raises(ConfigError):
            parse_proxy("http::8080:u:p:enabled")

    def test_host_with_overlong_label_raises(self):
        with pytest.raises(ConfigError, match="invalid proxy host"):
            parse_proxy("http:" + "a" * 64 + ".example:8080:u:p:enabled")

    def test_ip_address_host_accepted(self):
        assert parse_proxy("http:127.0.0.1:8080:u:p:enabled").host == "127.0.0.1"

    def test_error_message_does_not_leak_password(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_proxy("ftp:p:21:u:topsecret:enabled")
        assert "topsecret" not in str(exc_info.value)


class TestProxyEndpoint:
    """Test ProxyEndpoint identity and URL helpers."""

    def test_identity_round_trips_enabled_string(self):
        raw = "socks:10.0.0.1:1080:bob:pw:enabled"
        assert parse_proxy(raw).identity == raw

    def test_same_string_same_identity(self):
        a = parse_proxy("http:p:8080:u:p:enabled")
        b = parse_proxy("http:p:8080:u:p:enabled")
        assert a == b
        assert a.identity == b.identity

    def test_different_credentials_different_identity(self):
        a = parse_proxy("http:p:8080:u:p1:enabled")
        b = parse_proxy("http:p:8080:u:p2:enabled")
        assert a.identity != b.identity

    def test_address(self):
        assert parse_proxy("http:p:8080:u:p:enabled").address == "p:8080"

    def test_is_immutable(self):
        proxy = parse_proxy("http:p:8080:u:p:enabled")
        with pytest.raises(dataclasses.FrozenInstanceError):
            proxy.host = "other"  # type: ignore[misc]

    def test_proxy_url_embeds_credentials(self):
        proxy = parse_proxy("http:p:8080:alice:s3cret:enabled")
        assert proxy.proxy_url("http") == "http://alice:s3cret@p:8080"
        assert proxy.proxy_url("socks5") == "socks5://alice:s3cret@p:8080"

    def test_proxy_url_quotes_special_characters(self):
        proxy = ProxyEndpoint(
            protocol=ProxyProtocol.HTTP,
            host="p",
            port=8080,
            username="a@b",
            password="p/w",
        )
        assert proxy.proxy_url("http") == "http://a%40b:p%2Fw@p:8080"

    def test_proxy_url_without_credentials(self):
        proxy = ProxyEndpoint(protocol=ProxyProtocol.HTTP, host="p", port=8080)
        assert proxy.proxy_url("http") == "http://p:8080"
