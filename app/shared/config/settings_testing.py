# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_testing.py

Overrides para la suite de pruebas: logging moderado, base de datos
aislada y clave JWT fija. La pasarela stub la activa tests/conftest.py
(USE_PAYMENT_STUBS=true).

Autor: Arena
Fecha: 2026-10-19
"""

from pydantic import SecretStr
from .settings_base import BaseAppSettings
from pydantic_settings import SettingsConfigDict


class EnvTestingSettings(BaseAppSettings):
    # --- Identidad de entorno ---
    python_env: str = "test"

    # --- Logging en test: menos ruido ---
    log_level: str = "WARNING"
    log_format: str = "pretty"

    # --- Base de datos: usar DB separada para pruebas ---
    db_name: str = "arena_test"

    # --- Auth: clave fija para firmar tokens en pruebas ---
    jwt_secret_key: SecretStr = SecretStr("test-secret-for-tienda-suite-please-change")

    model_config = SettingsConfigDict(
        env_file=".env.test",
        env_file_encoding="utf-8",
        extra="ignore",
    )


__all__ = ["EnvTestingSettings"]
# Fin del archivo backend/app/shared/config/settings_testing.py
