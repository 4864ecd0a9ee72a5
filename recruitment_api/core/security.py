"""
Password hashing and JWT handling.

Two token types are issued, both HS256-signed with JWT_SECRET_KEY:
  - access:  sub (user id), tenant_id, role, email
  - refresh: sub, tenant_id
The ``type`` claim tells them apart so a refresh token can never be used
as a bearer token and vice versa.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from recruitment_api.core.settings import AppSettings, get_app_settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# PUBLIC_INTERFACE
def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    return _pwd_context.hash(password)


# PUBLIC_INTERFACE
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a stored bcrypt hash."""
    return _pwd_context.verify(plain_password, hashed_password)


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified token."""

    user_id: str
    tenant_id: str
    token_type: str
    role: Optional[str] = None
    email: Optional[str] = None


def _encode(
    claims: Dict[str, Any],
    token_type: str,
    minutes: int,
    settings: AppSettings,
) -> str:
    issued = datetime.now(tz=timezone.utc)
    body = {**claims, "type": token_type, "iat": issued, "exp": issued + timedelta(minutes=minutes)}
    return jwt.encode(body, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


# PUBLIC_INTERFACE
def create_access_token(
    subject: str,
    tenant_id: str,
    role: Optional[str] = None,
    email: Optional[str] = None,
    expires_minutes: Optional[int] = None,
) -> str:
    """Signed access token for a user of an organization."""
    settings = get_app_settings()
    return _encode(
        {"sub": subject, "tenant_id": tenant_id, "role": role, "email": email},
        ACCESS_TOKEN_TYPE,
        expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        settings,
    )


# PUBLIC_INTERFACE
def create_refresh_token(subject: str, tenant_id: str, expires_minutes: Optional[int] = None) -> str:
    settings = get_app_settings()
    return _encode(
        {"sub": subject, "tenant_id": tenant_id},
        REFRESH_TOKEN_TYPE,
        expires_minutes or settings.REFRESH_TOKEN_EXPIRE_MINUTES,
        settings,
    )


# PUBLIC_INTERFACE
def issue_token_pair(
    user_id: str,
    tenant_id: str,
    role: Optional[str] = None,
    email: Optional[str] = None,
) -> Dict[str, str]:
    """Access and refresh tokens for one user, keyed as in the TokenPair schema."""
    return {
        "access_token": create_access_token(user_id, tenant_id, role=role, email=email),
        "refresh_token": create_refresh_token(user_id, tenant_id),
    }


# PUBLIC_INTERFACE
def decode_token(token: str, expected_type: Optional[str] = None) -> Dict[str, Any]:
    """
    Verify signature and expiry and return the raw claims.

    Raises:
        JWTError: invalid, expired, or not of ``expected_type``.
    """
    settings = get_app_settings()
    claims = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    if expected_type is not None and claims.get("type") != expected_type:
        raise JWTError(f"Expected a {expected_type} token")
    return claims


# PUBLIC_INTERFACE
def read_claims(token: str, expected_type: str) -> TokenClaims:
    """decode_token plus a check that the subject and organization are present."""
    claims = decode_token(token, expected_type=expected_type)
    user_id, tenant_id = claims.get("sub"), claims.get("tenant_id")
    if not user_id or not tenant_id:
        raise JWTError("Token is missing its subject or organization")
    return TokenClaims(
        user_id=str(user_id),
        tenant_id=str(tenant_id),
        token_type=expected_type,
        role=claims.get("role"),
        email=claims.get("email"),
    )
