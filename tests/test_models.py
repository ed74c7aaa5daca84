"""Tests for Response and request option models."""

import pytest

from wreq_client import (
    ConfigurationError,
    DecodeError,
    EncodingError,
    HTTPError,
    ParseError,
    RequestOptions,
    Response,
)
from wreq_client.models import TransportResponse


def make_response(status=200, body=b'{"success": true}', headers=None, **kwargs):
    return Response.from_transport(
        TransportResponse(
            status=status,
            headers=headers if headers is not None else [("Content-Type", "application/json")],
            body=body,
            url="https://example.com/api/test",
            **kwargs,
        )
    )


class TestRequestOptions:
    """Tests for RequestOptions."""

    def test_defaults(self):
        options = RequestOptions()

        assert options.headers is None
        assert options.json is None
        assert options.cancel is None

    def test_from_options(self):
        options = RequestOptions.from_options(json={"a": 1}, timeout=3)

        assert options.json == {"a": 1}
        assert options.timeout == 3

    def test_from_options_rejects_unknown(self):
        with pytest.raises(ConfigurationError, match="params"):
            RequestOptions.from_options(params={"a": 1})


class TestResponse:
    """Tests for Response."""

    def test_status_aliases(self):
        response = make_response(status=201)

        assert response.status_code == 201
        assert response.status == 201
        assert response.code == 201

    def test_body_aliases(self):
        response = make_response(body=b"hello")

        assert response.content == b"hello"
        assert response.body_bytes == b"hello"
        assert response.text == "hello"
        assert response.body == "hello"

    def test_text_strict_utf8(self):
        """Test that invalid UTF-8 fails on access, not construction."""
        response = make_response(body=b"\xff\xfe\xfa")

        with pytest.raises(EncodingError):
            response.text
        assert response.content == b"\xff\xfe\xfa"

    def test_json(self):
        assert make_response().json() == {"success": True}

    def test_json_parsed_once(self):
        response = make_response(body=b'{"items": [1, 2]}')

        first = response.json()
        assert response.json() is first
        assert first == {"items": [1, 2]}

    def test_json_cache_not_compared(self):
        parsed = make_response()
        parsed.json()
        assert parsed == make_response()

    def test_json_parse_error(self):
        response = make_response(body=b"<html>not json</html>")

        with pytest.raises(ParseError):
            response.json()
        with pytest.raises(ParseError):
            response.json()

    def test_redirect_count(self):
        assert make_response().redirect_count == 0
        assert make_response(redirect_count=3).redirect_count == 3

    def test_decode_errors_share_base(self):
        with pytest.raises(DecodeError):
            make_response(body=b"").json()

    def test_headers_case_insensitive(self):
        response = make_response(headers=[("Content-Type", "text/html"), ("X-Id", "7")])

        assert response.headers["content-type"] == "text/html"
        assert response.header("x-id") == "7"
        assert response.header("missing") is None
        assert response.header("missing", "default") == "default"

    def test_repeated_headers_preserved(self):
        response = make_response(headers=[("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")])
        assert response.headers.get_list("set-cookie") == ["a=1", "b=2"]

    def test_metadata(self):
        response = make_response(body=b"x" * 100, version="HTTP/2", transfer_size=40, elapsed=0.5)

        assert response.url == "https://example.com/api/test"
        assert response.version == "HTTP/2"
        assert response.content_length == 100
        assert response.transfer_size == 40
        assert response.elapsed == 0.5

    @pytest.mark.parametrize(
        "status, success, redirect, client_error, server_error",
        [
            (200, True, False, False, False),
            (204, True, False, False, False),
            (301, False, True, False, False),
            (404, False, False, True, False),
            (503, False, False, False, True),
        ],
    )
    def test_status_predicates(self, status, success, redirect, client_error, server_error):
        response = make_response(status=status)

        assert response.is_success is success
        assert response.ok is success
        assert response.is_redirect is redirect
        assert response.is_client_error is client_error
        assert response.is_server_error is server_error

    def test_raise_for_status(self):
        response = make_response(status=500)

        with pytest.raises(HTTPError) as exc_info:
            response.raise_for_status()
        assert exc_info.value.response is response

    def test_raise_for_status_success(self):
        make_response(status=200).raise_for_status()
        make_response(status=302).raise_for_status()

    def test_repr(self):
        assert repr(make_response()) == "<Response status=200 url='https://example.com/api/test'>"
