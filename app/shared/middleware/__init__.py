# -*- coding: utf-8 -*-
"""
backend/app/shared/middleware/__init__.py

Módulo de middlewares compartidos.
"""

from .exception_handler import (
    JSONExceptionMiddleware,
    error_response,
    get_request_id,
    register_domain_exception_handler,
)
from .request_logging import RequestLoggingMiddleware

__all__ = [
    "JSONExceptionMiddleware",
    "error_response",
    "get_request_id",
    "register_domain_exception_handler",
    "RequestLoggingMiddleware",
]

# Fin del archivo backend/app/shared/middleware/__init__.py
