# -*- coding: utf-8 -*-
"""
backend/tests/conftest.py

Config global de tests del backend de la tienda.

- Variables de entorno de prueba ANTES de importar la app (PYTHON_ENV=test,
  pasarela stub, JWT fijo).
- App FastAPI y cliente httpx con ciclo de vida (asgi-lifespan).
- Emisión de tokens de prueba.

Autor: Arena
Fecha: 2026-10-19
"""

import os
from collections.abc import AsyncIterator

import pytest

# -----------------------------------------------------------------------------
# 0) Entorno de prueba
# -----------------------------------------------------------------------------
os.environ["PYTHON_ENV"] = "test"
os.environ.setdefault("USE_PAYMENT_STUBS", "true")
os.environ.setdefault("ALLOW_INSECURE_WEBHOOKS", "false")
os.environ.setdefault("GATEWAY_BASE_DELAY_SECONDS", "0.001")
os.environ.setdefault("GATEWAY_MAX_DELAY_SECONDS", "0.01")
os.environ.setdefault("HTTP_METRICS_ENABLED", "false")

from httpx import AsyncClient, ASGITransport
from asgi_lifespan import LifespanManager


@pytest.fixture(scope="session")
def app():
    """Carga la app FastAPI **después** de fijar las variables de entorno."""
    from app.main import app as fastapi_app
    return fastapi_app


@pytest.fixture
async def async_client(app) -> AsyncIterator[AsyncClient]:
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client


@pytest.fixture
def make_token():
    """Emite un JWT firmado con la clave de pruebas."""
    from app.shared.utils.jwt_utils import create_access_token

    def _make(user_id: str, role: str = "user") -> str:
        return create_access_token({"sub": user_id, "role": role})

    return _make


@pytest.fixture
def auth_headers(make_token):
    def _headers(user_id: str, role: str = "user") -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(user_id, role)}"}

    return _headers

# Fin del archivo backend/tests/conftest.py
