# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_dev.py

Entorno local de la tienda: esquema creado al arrancar (sin migraciones),
logs legibles en DEBUG y CORS abierto solo al frontend de Vite.

La pasarela stub y los webhooks sin firma se controlan en TiendaSettings
(USE_PAYMENT_STUBS / ALLOW_INSECURE_WEBHOOKS).

Autor: Arena
Fecha: 2026-10-19
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from .settings_base import BaseAppSettings


class DevSettings(BaseAppSettings):
    python_env: str = "development"

    log_level: str = "DEBUG"
    log_format: str = "plain"

    db_auto_create: bool = True
    db_pool_size: int = 2
    db_max_overflow: int = 2

    allowed_origins: str = Field(
        default="http://localhost:5173,http://127.0.0.1:5173", validation_alias="CORS_ORIGINS"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


__all__ = ["DevSettings"]

# Fin del archivo backend/app/shared/config/settings_dev.py
