"""
Tests for Basic-auth parsing and credential comparison.
"""

import base64

import pytest

from gateway.config import Settings
from gateway.core.errors import UnauthorizedError
from gateway.core.security import (
    credentials_match,
    encode_basic_authorization,
    parse_basic_authorization,
)


def _basic(raw: str) -> str:
    return "Basic " + base64.b64encode(raw.encode("utf-8")).decode("ascii")


class TestParseBasicAuthorization:
    """Tests for parse_basic_authorization."""

    def test_valid_header_returns_pair(self):
        assert parse_basic_authorization(_basic("baker:flour")) == ("baker", "flour")

    def test_scheme_is_case_insensitive(self):
        header = _basic("baker:flour").replace("Basic", "basic")
        assert parse_basic_authorization(header) == ("baker", "flour")

    def test_password_may_contain_colons(self):
        assert parse_basic_authorization(_basic("baker:a:b:c")) == ("baker", "a:b:c")

    def test_encode_round_trips(self):
        header = encode_basic_authorization("baker", "flour")
        assert parse_basic_authorization(header) == ("baker", "flour")

    @pytest.mark.parametrize(
        "header",
        [
            None,
            "",
            "Bearer abc.def.ghi",
            "Basic",
            "Basic !!!not-base64!!!",
            _basic("no-separator"),
            "Basic " + base64.b64encode(b"\xff\xfe:\xff").decode("ascii"),
        ],
    )
    def test_malformed_headers_raise_unauthorized(self, header):
        with pytest.raises(UnauthorizedError):
            parse_basic_authorization(header)


class TestCredentialsMatch:
    """Tests for credentials_match."""

    @pytest.fixture
    def creds(self) -> Settings:
        return Settings(basic_auth_username="baker", basic_auth_password="flour")

    def test_exact_match(self, creds):
        assert credentials_match("baker", "flour", creds)

    @pytest.mark.parametrize(
        "username,password",
        [("baker", "Flour"), ("Baker", "flour"), ("baker", ""), ("", "flour"), ("baker", "flour ")],
    )
    def test_any_difference_fails(self, creds, username, password):
        assert not credentials_match(username, password, creds)

    def test_non_ascii_credentials(self):
        settings = Settings(basic_auth_username="pâtissier", basic_auth_password="crème")
        assert credentials_match("pâtissier", "crème", settings)
