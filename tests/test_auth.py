"""Unit tests for the access gate and session credential extraction."""

import pytest

from todoist_mcp.auth import (
    Session,
    create_auth_resolver,
    extract_bearer_token,
    get_header,
    headers_from_scope,
)
from todoist_mcp.exceptions import InvalidAccessSecret, MissingCredential, Unauthorized


class TestSession:
    def test_holds_token(self) -> None:
        session = Session(api_token="abc123")
        assert session.api_token == "abc123"

    def test_rejects_empty_token(self) -> None:
        with pytest.raises(ValueError):
            Session(api_token="")

    def test_is_immutable(self) -> None:
        session = Session(api_token="abc123")
        with pytest.raises(AttributeError):
            session.api_token = "other"  # type: ignore[misc]

    def test_repr_hides_token(self) -> None:
        assert "abc123" not in repr(Session(api_token="abc123"))

    def test_equality_by_token(self) -> None:
        assert Session(api_token="abc123") == Session(api_token="abc123")


class TestGetHeader:
    def test_case_insensitive_lookup(self) -> None:
        assert get_header({"x-mcp-token": "s3cret"}, "X-Mcp-Token") == "s3cret"
        assert get_header({"X-Mcp-Token": "s3cret"}, "x-mcp-token") == "s3cret"
        assert get_header({"X-MCP-TOKEN": "s3cret"}, "x-Mcp-token") == "s3cret"

    def test_sequence_value_uses_first(self) -> None:
        assert get_header({"x-mcp-token": ["first", "second"]}, "X-Mcp-Token") == "first"

    def test_empty_sequence_is_missing(self) -> None:
        assert get_header({"x-mcp-token": []}, "X-Mcp-Token") is None

    def test_missing_header(self) -> None:
        assert get_header({"authorization": "Bearer x"}, "X-Mcp-Token") is None


class TestHeadersFromScope:
    def test_groups_repeated_headers_in_order(self) -> None:
        headers = headers_from_scope(
            [(b"X-Mcp-Token", b"one"), (b"host", b"example.com"), (b"x-mcp-token", b"two")]
        )
        assert headers == {"x-mcp-token": ["one", "two"], "host": ["example.com"]}

    def test_empty(self) -> None:
        assert headers_from_scope([]) == {}


class TestExtractBearerToken:
    @pytest.mark.parametrize(
        "value",
        [
            "Bearer abc123",
            "bearer abc123",
            "BEARER   abc123",
            "  Bearer abc123  ",
            "Bearer\tabc123",
        ],
    )
    def test_strips_scheme(self, value: str) -> None:
        assert extract_bearer_token(value) == "abc123"

    def test_value_without_scheme_is_kept(self) -> None:
        assert extract_bearer_token("abc123") == "abc123"

    @pytest.mark.parametrize(
        "value", [None, "", "   ", "Bearer", "bearer", "Bearer ", "Bearer    ", "  Bearer"]
    )
    def test_empty_after_stripping(self, value: str | None) -> None:
        assert extract_bearer_token(value) is None


class TestCreateAuthResolver:
    def test_valid_secret_and_token(self) -> None:
        authenticate = create_auth_resolver("s3cret")
        session = authenticate({"X-Mcp-Token": "s3cret", "Authorization": "Bearer abc123"})
        assert session == Session(api_token="abc123")

    def test_invalid_secret(self) -> None:
        authenticate = create_auth_resolver("s3cret")
        with pytest.raises(InvalidAccessSecret) as exc_info:
            authenticate({"X-Mcp-Token": "wrong", "Authorization": "Bearer abc123"})
        assert exc_info.value.status_code == 401
        assert exc_info.value.status_text == "Unauthorized - Invalid MCP token"

    def test_missing_secret_header_is_rejected(self) -> None:
        authenticate = create_auth_resolver("s3cret")
        with pytest.raises(InvalidAccessSecret):
            authenticate({"Authorization": "Bearer abc123"})

    def test_secret_checked_before_credential(self) -> None:
        """A bad secret is reported even when the credential is also missing."""
        authenticate = create_auth_resolver("s3cret")
        with pytest.raises(InvalidAccessSecret):
            authenticate({"X-Mcp-Token": "wrong"})

    def test_missing_todoist_token(self) -> None:
        authenticate = create_auth_resolver("s3cret")
        with pytest.raises(MissingCredential) as exc_info:
            authenticate({"X-Mcp-Token": "s3cret"})
        assert exc_info.value.status_code == 401
        assert exc_info.value.status_text == "Unauthorized - Missing Todoist API token"

    def test_empty_bearer_is_missing(self) -> None:
        authenticate = create_auth_resolver()
        with pytest.raises(MissingCredential):
            authenticate({"Authorization": "Bearer   "})

    def test_gate_disabled_without_secret(self) -> None:
        authenticate = create_auth_resolver()
        assert authenticate({"Authorization": "Bearer abc123"}) == Session(api_token="abc123")

    def test_gate_disabled_ignores_presented_secret(self) -> None:
        authenticate = create_auth_resolver(None)
        session = authenticate({"X-Mcp-Token": "anything", "Authorization": "Bearer abc123"})
        assert session.api_token == "abc123"

    def test_header_name_casing_does_not_matter(self) -> None:
        authenticate = create_auth_resolver("s3cret")
        lower = authenticate({"x-mcp-token": "s3cret", "authorization": "Bearer abc123"})
        mixed = authenticate({"X-Mcp-Token": "s3cret", "AUTHORIZATION": "Bearer abc123"})
        assert lower == mixed == Session(api_token="abc123")

    def test_multi_value_headers(self) -> None:
        authenticate = create_auth_resolver("s3cret")
        session = authenticate(
            {"x-mcp-token": ["s3cret", "wrong"], "authorization": ["Bearer abc123", "Bearer zzz"]}
        )
        assert session.api_token == "abc123"

    def test_multi_value_secret_only_first_counts(self) -> None:
        authenticate = create_auth_resolver("s3cret")
        with pytest.raises(InvalidAccessSecret):
            authenticate({"x-mcp-token": ["wrong", "s3cret"], "authorization": "Bearer abc123"})

    def test_dedicated_credential_header(self) -> None:
        authenticate = create_auth_resolver(
            "s3cret", access_header="X-Access-Key", credential_header="X-Todoist-Token"
        )
        session = authenticate({"x-access-key": "s3cret", "x-todoist-token": "abc123"})
        assert session.api_token == "abc123"

    def test_failures_are_unauthorized(self) -> None:
        authenticate = create_auth_resolver("s3cret")
        with pytest.raises(Unauthorized):
            authenticate({})

    @pytest.mark.parametrize("value", ["Bearer", "Bearer ", "bearer\t"])
    def test_scheme_without_token_is_missing(self, value: str) -> None:
        """Test a bare scheme never becomes the Todoist token."""
        authenticate = create_auth_resolver()
        with pytest.raises(MissingCredential):
            authenticate({"Authorization": value})
