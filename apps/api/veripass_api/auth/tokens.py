"""Wallet session tokens.

The login layer verifies a wallet signature over a nonce and then issues a
token whose ``sub`` is the wallet address. This module only encodes and
decodes those tokens.
"""

from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from veripass_api.exceptions import AuthError
from veripass_api.settings import get_settings


def create_access_token(address: str, expires_in: Optional[timedelta] = None) -> str:
    """Issue a bearer token for ``address``."""
    settings = get_settings()
    expires_in = expires_in or timedelta(hours=settings.jwt_expiration_hours)
    claims = {
        "sub": address.lower(),
        "iat": datetime.utcnow(),
        "exp": datetime.utcnow() + expires_in,
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> str:
    """Return the wallet address a valid token was issued for."""
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise AuthError("Invalid or expired token") from e

    address = claims.get("sub")
    if not address:
        raise AuthError("Token has no subject")
    return address.lower()
