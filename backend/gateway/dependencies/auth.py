"""
Authentication dependencies for route protection.
"""
import json
import logging
from typing import Annotated, Any, Optional

from fastapi import Depends, Request, Security
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from gateway.config import Settings
from gateway.core.errors import UnauthorizedError, ValidationError
from gateway.core.security import credentials_match, parse_basic_authorization
from gateway.dependencies.store import get_app_settings

logger = logging.getLogger(__name__)


class BasicCredentialScheme(HTTPBasic):
    """
    HTTP Basic scheme that decodes credentials as UTF-8.

    Documented in OpenAPI like `HTTPBasic`, but a missing or malformed header
    resolves to None instead of raising, so `require_basic_auth` answers every
    failure the same way.
    """

    async def __call__(self, request: Request) -> Optional[HTTPBasicCredentials]:  # type: ignore[override]
        try:
            username, password = parse_basic_authorization(request.headers.get("Authorization"))
        except UnauthorizedError as e:
            logger.debug("Rejected request: %s", e.message)
            return None
        return HTTPBasicCredentials(username=username, password=password)


basic_scheme = BasicCredentialScheme(scheme_name="BasicAuth", auto_error=False)


async def require_basic_auth(
    settings: Annotated[Settings, Depends(get_app_settings)],
    credentials: Annotated[Optional[HTTPBasicCredentials], Security(basic_scheme)],
) -> str:
    """
    Dependency that admits a request only with the configured Basic credential.

    Every failure cause maps to the same 401 so callers cannot tell a bad
    username from a bad password.

    Returns:
        The authenticated username
    """
    if credentials is None:
        raise UnauthorizedError()

    if not credentials_match(credentials.username, credentials.password, settings):
        logger.debug("Rejected request: credentials mismatch")
        raise UnauthorizedError()

    return credentials.username


# Type alias for cleaner route signatures
AuthenticatedUser = Annotated[str, Depends(require_basic_auth)]


async def read_json_body(request: Request, _user: AuthenticatedUser) -> Any:
    """
    Decode the request body as JSON once the caller is authenticated.

    Declaring bodies through this dependency instead of `Body()` keeps the
    credential check ahead of body parsing. An empty body decodes to None.

    Raises:
        ValidationError: If the body is not valid JSON
    """
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        raise ValidationError(f"Malformed JSON body: {e}")


JSONBody = Annotated[Any, Depends(read_json_body)]
