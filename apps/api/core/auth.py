"""
Authentication and authorization dependencies.

Provides FastAPI dependencies for:
- Requiring a valid bearer token (401 otherwise)
- Requiring the ADMIN role (403 otherwise)
- Optionally reading a token without ever rejecting
- Owner-or-admin checks on individual resources
"""
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
from uuid import UUID

from core.exceptions import ForbiddenError, UnauthorizedError
from core.security import TokenClaims, verify_token

# Use auto_error=False to handle missing credentials manually and return 401 (not 403)
security = HTTPBearer(auto_error=False)


def require_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenClaims:
    """Claims of the caller. Rejects missing or invalid bearer tokens."""
    if not credentials or credentials.scheme.lower() != "bearer":
        raise UnauthorizedError("Authentication required")

    claims = verify_token(credentials.credentials)
    if claims is None:
        raise UnauthorizedError("Invalid or expired token")

    return claims


def require_admin(
    current_user: TokenClaims = Depends(require_auth),
) -> TokenClaims:
    """Require the ADMIN role."""
    if current_user.role != "ADMIN":
        raise ForbiddenError("Admin access required")
    return current_user


def optional_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[TokenClaims]:
    """
    Get the caller's claims if a valid token is provided.
    Returns None if no token or invalid token.
    """
    if not credentials:
        return None
    return verify_token(credentials.credentials)


def ensure_owner_or_admin(owner_id: UUID, current_user: TokenClaims) -> None:
    """Raise 403 unless the caller owns the resource or is an admin."""
    if owner_id != current_user.id and current_user.role != "ADMIN":
        raise ForbiddenError("Access denied")
