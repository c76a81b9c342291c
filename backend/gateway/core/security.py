"""
Basic-auth credential utilities.
"""
import base64
import binascii
import secrets

from gateway.config import Settings
from gateway.core.errors import UnauthorizedError


BASIC_SCHEME = "basic"


def parse_basic_authorization(header: str | None) -> tuple[str, str]:
    """
    Extract the username/password pair from an Authorization header.

    Args:
        header: Raw header value, expected as `Basic <base64(user:pass)>`

    Returns:
        (username, password)

    Raises:
        UnauthorizedError: On a missing header, a different scheme,
            undecodable base64 or a payload without a `:` separator
    """
    if not header:
        raise UnauthorizedError("Missing authorization header")

    scheme, _, encoded = header.strip().partition(" ")
    if scheme.lower() != BASIC_SCHEME or not encoded.strip():
        raise UnauthorizedError("Unsupported authorization scheme")

    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        raise UnauthorizedError("Malformed basic credentials")

    username, separator, password = decoded.partition(":")
    if not separator:
        raise UnauthorizedError("Malformed basic credentials")

    return username, password


def credentials_match(username: str, password: str, settings: Settings) -> bool:
    """Compare both fields against the configured credential in constant time."""
    user_ok = secrets.compare_digest(
        username.encode("utf-8"), settings.basic_auth_username.encode("utf-8")
    )
    password_ok = secrets.compare_digest(
        password.encode("utf-8"), settings.basic_auth_password.encode("utf-8")
    )
    return user_ok and password_ok


def encode_basic_authorization(username: str, password: str) -> str:
    """Build an Authorization header value for the given pair."""
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"
