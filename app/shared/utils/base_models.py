# -*- coding: utf-8 -*-
"""
backend/app/shared/utils/base_models.py

Modelo base para los esquemas Pydantic v2 de la API.

- Recorta espacios en strings (`str_strip_whitespace=True`).
- Lee atributos de objetos ORM (`from_attributes=True`).
- Acepta nombre de campo o alias al poblar (`populate_by_name=True`), lo
  que permite aceptar las claves en español que envía el frontend.

Autor: Arena
Fecha: 2026-10-19
"""

from pydantic import BaseModel, ConfigDict


class UTF8SafeModel(BaseModel):
    """Base de todos los esquemas de entrada/salida."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


__all__ = ["UTF8SafeModel"]
# Fin del archivo backend/app/shared/utils/base_models.py
