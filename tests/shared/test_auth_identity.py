# -*- coding: utf-8 -*-
"""
backend/tests/shared/test_auth_identity.py

Tests de tokens JWT (python-jose) y de la identidad explícita derivada de
sus claims.

Autor: Arena
Fecha: 2026-10-19
"""

from datetime import timedelta

import pytest
from fastapi import HTTPException
from jose import jwt

from app.shared.auth_context import Identity, identity_from_claims
from app.shared.config import settings
from app.shared.utils.jwt_utils import create_access_token, decode_token
from app.modules.tienda.enums import UserRole


class TestJwt:
    def test_round_trip_keeps_claims(self):
        token = create_access_token({"sub": "user-1", "role": "admin"})
        claims = decode_token(token)
        assert claims["sub"] == "user-1"
        assert claims["role"] == "admin"
        assert claims["token_type"] == "access"

    def test_expired_token_is_rejected(self):
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-1))
        assert decode_token(token) is None

    def test_foreign_signature_is_rejected(self):
        forged = jwt.encode({"sub": "user-1"}, "another-secret", algorithm=settings.jwt_algorithm)
        assert decode_token(forged) is None

    def test_garbage_is_rejected(self):
        assert decode_token("not-a-jwt") is None


class TestIdentityFromClaims:
    def test_user_by_default(self):
        identity = identity_from_claims({"sub": "user-1"})
        assert identity == Identity(user_id="user-1", role=UserRole.USER)
        assert identity.is_admin is False

    def test_admin_role_is_case_insensitive(self):
        assert identity_from_claims({"sub": "a", "role": "ADMIN"}).is_admin is True

    def test_legacy_user_id_claim(self):
        assert identity_from_claims({"user_id": 42}).user_id == "42"

    @pytest.mark.parametrize("claims", [{}, {"sub": ""}, {"sub": "u", "role": "superuser"}])
    def test_invalid_claims_are_unauthorized(self, claims):
        with pytest.raises(HTTPException) as exc:
            identity_from_claims(claims)
        assert exc.value.status_code == 401

# Fin del archivo backend/tests/shared/test_auth_identity.py
