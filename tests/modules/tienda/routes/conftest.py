# -*- coding: utf-8 -*-
"""
backend/tests/modules/tienda/routes/conftest.py

Cliente HTTP de la tienda con dependencias sustituidas:
- get_async_session → sesión del motor SQLite del test
- get_gateway → pasarela stub del test

Autor: Arena
Fecha: 2026-10-19
"""

import pytest

from app.shared.database.database import get_async_session
from app.modules.tienda.routes.dependencies import get_gateway


@pytest.fixture
async def client(app, async_client, session_factory, gateway, seed):
    async def _session_override():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = _session_override
    app.dependency_overrides[get_gateway] = lambda: gateway
    try:
        yield async_client
    finally:
        app.dependency_overrides.clear()

# Fin del archivo backend/tests/modules/tienda/routes/conftest.py
