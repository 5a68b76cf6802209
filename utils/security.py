"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT
- JTI generation for token identifiers

Secrets and lifetimes are passed in by the caller; nothing here reads configuration.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, VerificationError, InvalidHashError

ph = PasswordHasher()


class TokenError(Exception):
    """Raised when a token cannot be decoded or has the wrong type."""


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_token(
    subject: str,
    token_type: str,
    secret: str,
    expires: timedelta,
    algorithm: str = "HS256",
    claims: Dict[str, Any] | None = None,
) -> str:
    """
    Sign a JWT for `subject`. Every token gets its own jti, so two tokens
    minted in the same second for the same user never compare equal.
    """
    now = _now()
    payload = dict(claims or {})
    payload.update(
        {
            "sub": str(subject),
            "iat": int(now.timestamp()),
            "exp": int((now + expires).timestamp()),
            "type": token_type,
            "jti": generate_jti(),
        }
    )
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_token(token: str, secret: str, algorithm: str = "HS256", expected_type: str = "access") -> Dict[str, Any]:
    """
    Decode and validate a JWT. Raises TokenError on invalid signature/expired jwt
    expected type must be "access" or "refresh".
    """
    try:
        decoded = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError:
        raise TokenError("Token expired")
    except jwt.InvalidTokenError as exc:
        raise TokenError(f"Invalid token: {exc}")

    if decoded.get("type") != expected_type:
        raise TokenError("Wrong token type")
    if not decoded.get("sub"):
        raise TokenError("Token has no subject")
    return decoded
