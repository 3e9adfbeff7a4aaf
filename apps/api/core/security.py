"""
Security utilities for authentication.

Provides:
- Password hashing (bcrypt, work factor from BCRYPT_ROUNDS)
- JWT token issuance and verification

SESSION_SECRET should be set via environment variable. When it is missing
the insecure built-in default from core.config is used and a warning is
logged at startup.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import bcrypt
from jose import JWTError, jwt

from core.config import settings

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_DAYS * 24 * 60  # 7 days


@dataclass(frozen=True)
class TokenClaims:
    """Decoded token payload. Trusted as-is; no database lookup."""
    id: UUID
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"


def hash_password(password: str) -> str:
    """Hash a password."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    try:
        return bcrypt.checkpw(
            plain_password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except ValueError:
        # Not a bcrypt hash
        return False


def create_access_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token carrying the user's id, email and role."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(to_encode, settings.signing_secret, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and validate a JWT token."""
    try:
        return jwt.decode(token, settings.signing_secret, algorithms=[ALGORITHM])
    except JWTError:
        return None


def verify_token(token: str) -> Optional[TokenClaims]:
    """
    Return the token's claims, or None if it is expired, malformed,
    wrongly signed or missing a claim.
    """
    payload = decode_access_token(token)
    if not payload:
        return None

    sub = payload.get("sub")
    email = payload.get("email")
    role = payload.get("role")
    if not sub or not email or not role:
        return None

    try:
        user_id = UUID(sub)
    except (ValueError, TypeError):
        return None

    return TokenClaims(id=user_id, email=email, role=role)
