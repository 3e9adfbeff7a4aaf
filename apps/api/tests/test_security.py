"""
Tests for password hashing, token issuance/verification and the auth
dependencies that gate routes.
"""
import time
from datetime import timedelta
from types import SimpleNamespace
from uuid import uuid4

import pytest
from jose import jwt

from core.auth import ensure_owner_or_admin
from core.config import DEFAULT_SESSION_SECRET, settings
from core.exceptions import ForbiddenError
from core.security import (
    ALGORITHM,
    TokenClaims,
    create_access_token,
    hash_password,
    verify_password,
    verify_token,
)


def _user(role="USER"):
    return SimpleNamespace(id=uuid4(), email="claims@example.com", role=role)


class TestPasswordHashing:

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("correct horse")
        assert hashed != "correct horse"
        assert hashed.startswith("$2")

    def test_hashes_are_salted(self):
        assert hash_password("same-password") != hash_password("same-password")

    def test_verify_roundtrip(self):
        hashed = hash_password("s3cret-pass")
        assert verify_password("s3cret-pass", hashed) is True
        assert verify_password("wrong-pass", hashed) is False

    def test_verify_against_garbage_hash(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False


class TestTokens:

    def test_token_decodes_to_same_claims(self):
        user = _user(role="COACH")
        claims = verify_token(create_access_token(user))

        assert claims == TokenClaims(id=user.id, email=user.email, role="COACH")

    def test_default_expiry_is_seven_days(self):
        token = create_access_token(_user())
        exp = jwt.get_unverified_claims(token)["exp"]
        assert 7 * 86400 - 60 < exp - time.time() <= 7 * 86400 + 1

    def test_expired_token_rejected(self):
        token = create_access_token(_user(), expires_delta=timedelta(seconds=-10))
        assert verify_token(token) is None

    def test_tampered_token_rejected(self):
        token = create_access_token(_user())
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])
        assert verify_token(tampered) is None

    def test_token_signed_with_other_secret_rejected(self):
        user = _user()
        forged = jwt.encode(
            {"sub": str(user.id), "email": user.email, "role": "ADMIN"},
            "not-the-server-secret",
            algorithm=ALGORITHM,
        )
        assert verify_token(forged) is None

    def test_malformed_token_rejected(self):
        assert verify_token("not.a.token") is None
        assert verify_token("") is None

    def test_token_missing_claims_rejected(self):
        token = jwt.encode({"sub": str(uuid4())}, settings.signing_secret, algorithm=ALGORITHM)
        assert verify_token(token) is None

    def test_default_secret_used_when_unset(self, monkeypatch):
        monkeypatch.setattr(settings, "SESSION_SECRET", None)
        assert settings.signing_secret == DEFAULT_SESSION_SECRET
        assert settings.using_default_secret is True

        token = create_access_token(_user())
        assert jwt.decode(token, DEFAULT_SESSION_SECRET, algorithms=[ALGORITHM])["role"] == "USER"


class TestOwnership:

    def test_owner_allowed(self):
        owner = uuid4()
        ensure_owner_or_admin(owner, TokenClaims(id=owner, email="a@example.com", role="USER"))

    def test_admin_allowed(self):
        ensure_owner_or_admin(uuid4(), TokenClaims(id=uuid4(), email="a@example.com", role="ADMIN"))

    def test_other_user_forbidden(self):
        with pytest.raises(ForbiddenError):
            ensure_owner_or_admin(uuid4(), TokenClaims(id=uuid4(), email="a@example.com", role="COACH"))


class TestAuthDependencies:
    """Route gating through require_auth / require_admin / optional_auth."""

    def test_missing_token_is_401(self, client):
        response = client.get("/api/users/me")
        assert response.status_code == 401
        assert response.json()["detail"] == "Authentication required"

    def test_non_bearer_scheme_is_401(self, client):
        response = client.get("/api/users/me", headers={"Authorization": "Basic abc"})
        assert response.status_code == 401

    def test_invalid_token_is_401(self, client):
        response = client.get("/api/users/me", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid or expired token"

    def test_expired_token_is_401(self, client, test_user):
        token = create_access_token(test_user, expires_delta=timedelta(minutes=-1))
        response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_valid_token_passes(self, client, test_user, user_headers):
        response = client.get("/api/users/me", headers=user_headers)
        assert response.status_code == 200
        assert response.json()["id"] == str(test_user.id)

    def test_admin_route_rejects_user(self, client, user_headers):
        response = client.get("/api/admin/stats", headers=user_headers)
        assert response.status_code == 403
        assert response.json()["detail"] == "Admin access required"

    def test_admin_route_requires_auth_first(self, client):
        assert client.get("/api/admin/stats").status_code == 401

    def test_optional_auth_never_rejects(self, client):
        response = client.get("/api/exercises", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 200
