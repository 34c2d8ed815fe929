"""Unit tests for transport selection."""

import logging

import pytest

from todoist_mcp.config import (
    DirectTransport,
    GatedTransport,
    TransportMode,
    parse_mode,
    select_transport,
)
from todoist_mcp.constants import DEFAULT_PORT
from todoist_mcp.exceptions import InvalidConfiguration, MissingCredential


class TestParseMode:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("stdio", TransportMode.STDIO),
            ("sse", TransportMode.SSE),
            ("httpStream", TransportMode.HTTP_STREAM),
            (TransportMode.SSE, TransportMode.SSE),
        ],
    )
    def test_known_modes(self, value: str, expected: TransportMode) -> None:
        assert parse_mode(value) is expected

    @pytest.mark.parametrize("value", ["websocket", "", "HTTPSTREAM", "http"])
    def test_invalid_mode(self, value: str) -> None:
        with pytest.raises(InvalidConfiguration, match="Invalid mode"):
            parse_mode(value)


class TestSelectTransport:
    def test_stdio_with_token(self) -> None:
        config = select_transport("stdio", api_token="abc123")
        assert isinstance(config, DirectTransport)
        assert config.api_token == "abc123"
        assert config.mode is TransportMode.STDIO

    def test_stdio_without_token_refuses_to_start(self) -> None:
        with pytest.raises(MissingCredential, match="Token required for stdio mode"):
            select_transport("stdio")

    def test_stdio_with_empty_token_refuses_to_start(self) -> None:
        with pytest.raises(MissingCredential):
            select_transport("stdio", api_token="")

    def test_stdio_warns_about_access_token(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="todoist_mcp.config"):
            config = select_transport("stdio", api_token="abc123", access_secret="s3cret")
        assert isinstance(config, DirectTransport)
        assert "not supported for stdio mode" in caplog.text

    @pytest.mark.parametrize(
        ("mode", "endpoint"),
        [("sse", "/sse"), ("httpStream", "/mcp")],
    )
    def test_networked_modes_are_gated(self, mode: str, endpoint: str) -> None:
        config = select_transport(mode, port=8080, access_secret="s3cret")
        assert isinstance(config, GatedTransport)
        assert config.mode is TransportMode(mode)
        assert config.port == 8080
        assert config.access_secret == "s3cret"
        assert config.endpoint == endpoint

    def test_networked_mode_defaults(self) -> None:
        config = select_transport("sse")
        assert isinstance(config, GatedTransport)
        assert config.port == DEFAULT_PORT
        assert config.access_secret is None

    def test_empty_access_secret_disables_gate(self) -> None:
        config = select_transport("httpStream", access_secret="")
        assert isinstance(config, GatedTransport)
        assert config.access_secret is None

    def test_networked_mode_warns_about_startup_token(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="todoist_mcp.config"):
            config = select_transport("httpStream", api_token="abc123")
        assert isinstance(config, GatedTransport)
        assert "Authorization: Bearer TOKEN header" in caplog.text

    def test_invalid_mode_fails_before_token_checks(self) -> None:
        with pytest.raises(InvalidConfiguration):
            select_transport("carrier-pigeon", api_token="abc123")

    def test_config_is_immutable(self) -> None:
        config = select_transport("sse", access_secret="s3cret")
        with pytest.raises(AttributeError):
            config.access_secret = None  # type: ignore[misc]

    def test_repr_hides_secrets(self) -> None:
        assert "abc123" not in repr(select_transport("stdio", api_token="abc123"))
        assert "s3cret" not in repr(select_transport("sse", access_secret="s3cret"))
