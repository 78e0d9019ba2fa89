"""FastAPI dependencies resolving the caller of a request."""

import hmac
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from veripass_api.auth.tokens import decode_access_token
from veripass_api.exceptions import AuthError
from veripass_api.settings import get_settings
from veripass_api.utils.metrics import auth_failures

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

ORACLE_KEY_HEADER = "X-Oracle-Key"
ORACLE_ADDRESS_HEADER = "X-Oracle-Address"


@dataclass(frozen=True)
class AuthUser:
    """Authenticated caller."""

    address: str
    is_oracle: bool = False


def _check_oracle_key(api_key: Optional[str]) -> None:
    expected = get_settings().oracle_api_key
    if not api_key or not hmac.compare_digest(api_key.encode(), expected.encode()):
        auth_failures.labels(scheme="oracle").inc()
        raise AuthError("Invalid oracle credentials")


async def require_oracle(
    request: Request,
    x_oracle_key: Optional[str] = Header(default=None, alias=ORACLE_KEY_HEADER),
    x_oracle_address: Optional[str] = Header(default=None, alias=ORACLE_ADDRESS_HEADER),
) -> AuthUser:
    """Accept only the oracle's shared secret."""
    _check_oracle_key(x_oracle_key)
    user = AuthUser(address=(x_oracle_address or "oracle").lower(), is_oracle=True)
    request.state.user = user
    return user


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthUser:
    """Accept only a wallet bearer token."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        auth_failures.labels(scheme="bearer").inc()
        raise AuthError("Missing bearer token")
    try:
        address = decode_access_token(credentials.credentials)
    except AuthError:
        auth_failures.labels(scheme="bearer").inc()
        raise

    user = AuthUser(address=address)
    request.state.user = user
    return user


async def get_flexible_user(
    request: Request,
    x_oracle_key: Optional[str] = Header(default=None, alias=ORACLE_KEY_HEADER),
    x_oracle_address: Optional[str] = Header(default=None, alias=ORACLE_ADDRESS_HEADER),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthUser:
    """Accept the oracle's shared secret when present, a wallet token otherwise."""
    if x_oracle_key is not None:
        return await require_oracle(request, x_oracle_key, x_oracle_address)
    return await get_current_user(request, credentials)
