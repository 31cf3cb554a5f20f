# -*- coding: utf-8 -*-
"""
backend/app/shared/config/config_loader.py

Carga dinámica de configuración según PYTHON_ENV.
Ejecuta validaciones de seguridad y cachea la instancia (singleton).

Autor: Arena
Fecha: 2026-10-19
"""

from functools import lru_cache
import os
from .settings_base import BaseAppSettings
from .settings_dev import DevSettings
from .settings_testing import EnvTestingSettings
from .settings_prod import ProdSettings
from .settings_tienda import get_tienda_settings

_SETTINGS_BY_ENV: dict[str, type[BaseAppSettings]] = {
    "production": ProdSettings,
    "test": EnvTestingSettings,
    "development": DevSettings,
}


@lru_cache(maxsize=1)
def get_settings() -> BaseAppSettings:
    """
    Devuelve la configuración apropiada según PYTHON_ENV.

    Entornos desconocidos caen a DevSettings. Tras instanciar se ejecutan
    las validaciones de seguridad y el resultado queda cacheado.

    Raises:
        ValueError: Si las validaciones de seguridad fallan
    """
    env = os.getenv("PYTHON_ENV", "development").strip().lower()
    settings_cls = _SETTINGS_BY_ENV.get(env, DevSettings)
    settings = settings_cls()
    settings._security_and_payments_checks(get_tienda_settings())
    return settings


def reset_settings_cache() -> None:
    """Invalida el singleton (útil en tests que cambian PYTHON_ENV)."""
    get_settings.cache_clear()


__all__ = ["get_settings", "reset_settings_cache"]
# Fin del archivo backend/app/shared/config/config_loader.py
