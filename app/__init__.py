# -*- coding: utf-8 -*-
"""
backend/app/__init__.py

Paquete principal 'app' del backend de la tienda.

Autor: Arena
Fecha: 2026-10-19
"""

# Fin del archivo backend/app/__init__.py
