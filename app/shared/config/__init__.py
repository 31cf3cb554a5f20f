# -*- coding: utf-8 -*-
"""
backend/app/shared/config/__init__.py

Punto único de acceso a la configuración:
    from app.shared.config import settings

`settings` es un proxy perezoso sobre config_loader.get_settings(): no
instancia nada al importar, así los tests pueden fijar PYTHON_ENV y
variables de entorno antes del primer acceso.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

from typing import Any

from .config_loader import get_settings, reset_settings_cache
from .settings_tienda import TiendaSettings, get_tienda_settings


class _SettingsProxy:
    __slots__ = ()

    def __getattr__(self, name: str) -> Any:
        return getattr(get_settings(), name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("settings es de solo lectura; usa variables de entorno")

    def __repr__(self) -> str:
        return f"<SettingsProxy env={get_settings().python_env!r}>"


settings = _SettingsProxy()

__all__ = [
    "settings",
    "get_settings",
    "reset_settings_cache",
    "TiendaSettings",
    "get_tienda_settings",
]
# Fin del archivo backend/app/shared/config/__init__.py
