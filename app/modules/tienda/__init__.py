# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/__init__.py

Módulo Tienda: órdenes, pagos (PayPal o saldo), entrega de artículos,
nicknames y cola de soporte.

Autor: Arena
Fecha: 2026-10-19
"""

# Fin del archivo backend/app/modules/tienda/__init__.py
