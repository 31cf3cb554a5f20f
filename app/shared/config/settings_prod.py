# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_prod.py

Producción: solo variables de entorno (sin .env), logs JSON en INFO y
esquema gestionado por scripts SQL (nunca create_all).

Las exigencias sobre PayPal (modo live, credenciales, webhook_id, firmas
obligatorias) se validan al cargar, en
BaseAppSettings._security_and_payments_checks().

Autor: Arena
Fecha: 2026-10-19
"""

from typing import Literal

from pydantic_settings import SettingsConfigDict

from .settings_base import BaseAppSettings


class ProdSettings(BaseAppSettings):
    python_env: Literal["development", "test", "production"] = "production"

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "pretty", "plain"] = "json"

    db_auto_create: bool = False
    db_pool_size: int = 10
    db_max_overflow: int = 10

    model_config = SettingsConfigDict(
        env_file=None,
        extra="ignore",
    )


__all__ = ["ProdSettings"]

# Fin del archivo backend/app/shared/config/settings_prod.py
