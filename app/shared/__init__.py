# -*- coding: utf-8 -*-
"""
backend/app/shared/__init__.py

Infraestructura compartida: configuración, base de datos, middlewares,
utilidades HTTP y de autenticación.

Autor: Arena
Fecha: 2026-10-19
"""

# Fin del archivo backend/app/shared/__init__.py
