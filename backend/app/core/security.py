"""
Security utilities for authentication and authorization.

Provides password hashing (bcrypt), random token generation and
JWT access/refresh token management.
"""

import secrets
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

import jwt
from jwt.exceptions import InvalidTokenError
from passlib.context import CryptContext

from app.core.config import Settings, settings
from app.core.exceptions import CryptoFailure

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"

# Password hashing context using bcrypt
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_SALT_ROUNDS,
)


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: The plain text password to hash
        rounds: Optional cost factor overriding the configured default

    Returns:
        The hashed password string

    Raises:
        CryptoFailure: If the underlying hash primitive fails
    """
    context = pwd_context if rounds is None else pwd_context.copy(bcrypt__rounds=rounds)
    try:
        return context.hash(password)
    except (TypeError, ValueError) as exc:
        raise CryptoFailure("Failed to hash password") from exc


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Returns False on mismatch and for hashes that can't be identified.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (TypeError, ValueError):
        return False


@lru_cache(maxsize=None)
def dummy_password_hash(rounds: int) -> str:
    """A hash of a random secret, for running a full verify when no user matched."""
    return hash_password(generate_random_token(16), rounds)


def generate_random_token(byte_length: int = 32) -> str:
    """Generate a cryptographically secure hex token of ``2 * byte_length`` characters."""
    return secrets.token_hex(byte_length)


def _encode(claims: dict, secret: str, algorithm: str, expires_delta: timedelta) -> str:
    issued_at = datetime.now(timezone.utc)
    to_encode = claims.copy()
    to_encode.update(
        {
            "iat": issued_at,
            "exp": issued_at + expires_delta,
            "jti": generate_random_token(16),
        }
    )
    return jwt.encode(to_encode, secret, algorithm=algorithm)


def create_access_token(
    user_id: int,
    role: str,
    email: str,
    config: Settings = settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a short-lived JWT access token.

    Embeds ``sub`` (user id), ``role`` and ``email``.
    """
    return _encode(
        {"sub": str(user_id), "role": role, "email": email, "type": ACCESS_TOKEN},
        config.JWT_ACCESS_SECRET,
        config.JWT_ALGORITHM,
        expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(
    user_id: int,
    email: str,
    config: Settings = settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a long-lived JWT refresh token embedding ``sub`` and ``email``."""
    return _encode(
        {"sub": str(user_id), "email": email, "type": REFRESH_TOKEN},
        config.JWT_REFRESH_SECRET,
        config.JWT_ALGORITHM,
        expires_delta or timedelta(days=config.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def decode_token(token: str, token_type: str, config: Settings = settings) -> Optional[dict]:
    """
    Decode and validate a JWT token of the given type.

    Args:
        token: The JWT token string to decode
        token_type: ``"access"`` or ``"refresh"``; selects the signing secret

    Returns:
        The decoded token payload, or None if the signature, expiry or type is invalid
    """
    secret = config.JWT_ACCESS_SECRET if token_type == ACCESS_TOKEN else config.JWT_REFRESH_SECRET
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[config.JWT_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except InvalidTokenError:
        return None

    if payload.get("type") != token_type:
        return None
    return payload
