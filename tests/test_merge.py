"""Tests for merging client configuration with per-call options."""

import base64

import pytest

from wreq_client import (
    ClientConfig,
    ConfigurationError,
    ConflictingAuth,
    ConflictingBody,
    RequestOptions,
    UnknownProfile,
)
from wreq_client.config import ProxyConfig, Timeout
from wreq_client.emulation import PROFILES
from wreq_client.merge import merge, merge_headers, normalize_pairs


def header_values(effective, name):
    return [value for key, value in effective.headers if key.lower() == name.lower()]


class TestHeaderMerge:
    """Tests for header precedence."""

    def test_request_header_overrides_client_header(self):
        """Test case-insensitive override of client headers."""
        config = ClientConfig(headers={"X-Custom": "client"}, emulation=False)
        effective = merge(config, RequestOptions(headers={"x-custom": "request"}))

        assert header_values(effective, "X-Custom") == ["request"]

    def test_client_headers_kept(self):
        config = ClientConfig(headers={"X-Client": "1"}, emulation=False)
        effective = merge(config, RequestOptions(headers={"X-Request": "2"}))

        assert ("X-Client", "1") in effective.headers
        assert ("X-Request", "2") in effective.headers

    def test_override_drops_all_client_duplicates(self):
        """Test that every client entry of an overridden name is dropped."""
        merged = merge_headers(
            [("X-Dup", "a"), ("X-Keep", "k"), ("x-dup", "b")],
            [("X-DUP", "c"), ("X-Dup", "d")],
        )
        assert merged == [("X-Keep", "k"), ("X-DUP", "c"), ("X-Dup", "d")]

    def test_no_options(self):
        effective = merge(ClientConfig(emulation=False))
        assert effective.headers == ()
        assert effective.body is None


class TestUserAgentPrecedence:
    """Tests for User-Agent resolution."""

    def test_profile_user_agent_by_default(self):
        effective = merge(ClientConfig(emulation="firefox_146"))

        assert effective.user_agent == PROFILES["firefox_146"].user_agent
        assert header_values(effective, "User-Agent") == [effective.user_agent]

    def test_client_user_agent_overrides_profile(self):
        """Test explicit UA wins while emulation stays active."""
        effective = merge(ClientConfig(emulation="chrome_143", user_agent="my-bot/2.0"))

        assert effective.user_agent == "my-bot/2.0"
        assert effective.emulation is PROFILES["chrome_143"]
        assert header_values(effective, "User-Agent") == ["my-bot/2.0"]

    def test_client_header_user_agent_overrides_profile(self):
        config = ClientConfig(headers={"User-Agent": "header-bot/1.0"})
        effective = merge(config)

        assert effective.user_agent == "header-bot/1.0"
        assert header_values(effective, "user-agent") == ["header-bot/1.0"]

    def test_client_user_agent_beats_client_header(self):
        config = ClientConfig(headers={"User-Agent": "header-bot"}, user_agent="option-bot")
        assert merge(config).user_agent == "option-bot"

    def test_request_header_user_agent_wins(self):
        config = ClientConfig(user_agent="client-bot")
        effective = merge(config, RequestOptions(headers={"user-agent": "request-bot"}))

        assert effective.user_agent == "request-bot"
        assert header_values(effective, "User-Agent") == ["request-bot"]

    def test_no_user_agent_without_emulation(self):
        """Test that engine default UA applies when nothing sets one."""
        effective = merge(ClientConfig(emulation=False))

        assert effective.user_agent is None
        assert header_values(effective, "User-Agent") == []

    def test_explicit_user_agent_without_emulation(self):
        effective = merge(ClientConfig(emulation=False, user_agent="plain/1.0"))

        assert effective.user_agent == "plain/1.0"
        assert effective.emulation is None


class TestBody:
    """Tests for body selection."""

    def test_json_body(self):
        effective = merge(ClientConfig(), RequestOptions(json={"a": 1}))
        assert effective.body.kind == "json"
        assert effective.body.value == {"a": 1}

    def test_form_body_normalized(self):
        effective = merge(ClientConfig(), RequestOptions(form={"a": 1, "b": True}))
        assert effective.body.kind == "form"
        assert effective.body.value == (("a", "1"), ("b", "true"))

    def test_raw_body(self):
        effective = merge(ClientConfig(), RequestOptions(body=b"\x00raw"))
        assert effective.body.kind == "raw"
        assert effective.body.value == b"\x00raw"

    def test_body_and_json_conflict(self):
        with pytest.raises(ConflictingBody) as exc_info:
            merge(ClientConfig(), RequestOptions(body="x", json={"a": 1}))
        assert exc_info.value.fields == ("body", "json")

    def test_empty_values_still_conflict(self):
        """Test that presence, not emptiness, decides conflicts."""
        with pytest.raises(ConflictingBody):
            merge(ClientConfig(), RequestOptions(json={}, form={}))

    def test_json_false_is_a_body(self):
        effective = merge(ClientConfig(), RequestOptions(json=False))
        assert effective.body.kind == "json"
        assert effective.body.value is False


class TestAuth:
    """Tests for auth expansion."""

    def test_bearer(self):
        effective = merge(ClientConfig(), RequestOptions(bearer="tok"))
        assert header_values(effective, "Authorization") == ["Bearer tok"]

    def test_basic(self):
        effective = merge(ClientConfig(), RequestOptions(basic=("user", "pass")))
        expected = "Basic " + base64.b64encode(b"user:pass").decode()
        assert header_values(effective, "Authorization") == [expected]

    def test_raw_auth_verbatim(self):
        effective = merge(ClientConfig(), RequestOptions(auth="Token xyz"))
        assert header_values(effective, "Authorization") == ["Token xyz"]

    def test_auth_replaces_existing_authorization(self):
        config = ClientConfig(headers={"Authorization": "old"})
        effective = merge(
            config,
            RequestOptions(headers={"authorization": "older"}, bearer="new"),
        )
        assert header_values(effective, "Authorization") == ["Bearer new"]

    def test_conflicting_auth(self):
        with pytest.raises(ConflictingAuth):
            merge(ClientConfig(), RequestOptions(bearer="a", basic=("u", "p")))

    def test_invalid_basic(self):
        with pytest.raises(ConfigurationError):
            merge(ClientConfig(), RequestOptions(basic="user:pass"))


class TestOverrides:
    """Tests for per-call overrides of client settings."""

    def test_timeout_override_replaces_total_only(self):
        config = ClientConfig(timeout=30, connect_timeout=5, read_timeout=10)
        effective = merge(config, RequestOptions(timeout=2))

        assert effective.timeout == Timeout(total=2, connect=5, read=10)

    def test_invalid_timeout_override(self):
        with pytest.raises(ConfigurationError):
            merge(ClientConfig(), RequestOptions(timeout=0))

    def test_proxy_override(self):
        config = ClientConfig(proxy="http://a:1", proxy_user="u", proxy_pass="p")
        effective = merge(config, RequestOptions(proxy="http://b:2"))

        assert effective.proxy == ProxyConfig("http://b:2")

    def test_client_proxy_used_by_default(self):
        config = ClientConfig(proxy="http://a:1", proxy_user="u", proxy_pass="p")
        assert merge(config).proxy == ProxyConfig("http://a:1", "u", "p")

    def test_emulation_override(self):
        effective = merge(ClientConfig(), RequestOptions(emulation="safari_18_5"))
        assert effective.emulation is PROFILES["safari_18_5"]
        assert effective.user_agent == PROFILES["safari_18_5"].user_agent

    def test_emulation_disabled_per_request(self):
        effective = merge(ClientConfig(), RequestOptions(emulation=False))

        assert effective.emulation is None
        assert effective.user_agent is None

    def test_unknown_emulation_override(self):
        with pytest.raises(UnknownProfile):
            merge(ClientConfig(), RequestOptions(emulation="mosaic_1"))

    def test_transport_flags_copied(self):
        config = ClientConfig(redirect=False, https_only=True, verify_cert=False, http1_only=True)
        effective = merge(config)

        assert effective.redirect_limit is None
        assert effective.https_only is True
        assert effective.verify_cert is False
        assert effective.protocol == "http1"


class TestQuery:
    """Tests for query normalization."""

    def test_mapping_order_preserved(self):
        assert normalize_pairs({"b": 2, "a": 1}) == (("b", "2"), ("a", "1"))

    def test_booleans(self):
        assert normalize_pairs([("x", True), ("y", False)]) == (("x", "true"), ("y", "false"))

    def test_query_in_effective_request(self):
        effective = merge(ClientConfig(), RequestOptions(query=[("q", "a b"), ("q", "c")]))
        assert effective.query == (("q", "a b"), ("q", "c"))
