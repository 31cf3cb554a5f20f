# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_tienda.py

Configuración de la tienda: pasarela PayPal, URLs de retorno, política de
reintentos hacia el proveedor, reclamo de nicknames y paginación.

Las variables se leen por nombre de campo (case-insensitive), p. ej.
USE_PAYMENT_STUBS, GATEWAY_MAX_RETRIES, NICKNAME_RECLAIM_INACTIVE_DAYS.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

import os
from typing import Literal, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TiendaSettings(BaseSettings):
    """Configuración del motor de órdenes y pagos de la tienda."""

    # =========================================================================
    # PAYPAL
    # =========================================================================

    paypal_client_id: Optional[str] = Field(
        default=None,
        description="PayPal client ID"
    )

    paypal_client_secret: Optional[str] = Field(
        default=None,
        description="PayPal client secret"
    )

    paypal_mode: Literal["sandbox", "live"] = Field(
        default=None,
        validate_default=True,
        description="Modo de PayPal: 'sandbox' o 'live'"
    )

    paypal_webhook_id: Optional[str] = Field(
        default=None,
        description="PayPal webhook ID para validación de firmas"
    )

    paypal_brand_name: str = Field(
        default="Arena eSports",
        description="Nombre comercial mostrado en la página de aprobación"
    )

    paypal_timeout_seconds: float = Field(
        default=15.0,
        description="Timeout por llamada HTTP a la API de PayPal"
    )

    @field_validator("paypal_mode", mode="before")
    @classmethod
    def _load_paypal_mode(cls, v: Optional[str]) -> str:
        """Fallback a PAYPAL_ENV (nombre usado por settings_base)."""
        return v or os.getenv("PAYPAL_ENV") or "sandbox"

    # =========================================================================
    # FRONTEND (URLs de retorno de la aprobación)
    # =========================================================================

    frontend_url: Optional[str] = Field(
        default=None,
        validate_default=True,
        description="URL base del frontend para return/cancel de PayPal"
    )

    return_path: str = Field(default="/tienda/pago-exitoso")
    cancel_path: str = Field(default="/tienda/pago-cancelado")

    @field_validator("frontend_url", mode="before")
    @classmethod
    def _load_frontend_url(cls, v: Optional[str]) -> str:
        return v or os.getenv("FRONTEND_URL") or "http://localhost:5173"

    @property
    def return_url(self) -> str:
        return f"{self.frontend_url.rstrip('/')}{self.return_path}"

    @property
    def cancel_url(self) -> str:
        return f"{self.frontend_url.rstrip('/')}{self.cancel_path}"

    # =========================================================================
    # MONEDA
    # =========================================================================

    default_currency: str = Field(
        default="USD",
        description="Única divisa de liquidación con el proveedor"
    )

    # =========================================================================
    # REINTENTOS HACIA EL PROVEEDOR
    # =========================================================================

    gateway_max_retries: int = Field(
        default=3,
        ge=0,
        description="Reintentos ante errores transitorios (429/5xx/red)"
    )

    gateway_base_delay_seconds: float = Field(
        default=0.5,
        gt=0,
        description="Delay inicial del backoff exponencial"
    )

    gateway_max_delay_seconds: float = Field(
        default=8.0,
        gt=0,
        description="Tope del delay entre reintentos"
    )

    # =========================================================================
    # NICKNAMES
    # =========================================================================

    nickname_reclaim_inactive_days: int = Field(
        default=180,
        description="Días sin actividad para que un nickname sea reclamable vía soporte"
    )

    # =========================================================================
    # PAGINACIÓN
    # =========================================================================

    page_size_default: int = Field(default=20)
    page_size_max: int = Field(default=100)

    # =========================================================================
    # SEGURIDAD / MODO
    # =========================================================================

    allow_insecure_webhooks: bool = Field(
        default=False,
        description="Permite webhooks sin validación de firma (SOLO DESARROLLO)"
    )

    use_payment_stubs: bool = Field(
        default=True,
        description="Usa el gateway stub en memoria (False = PayPal real)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Singleton global
_tienda_settings: Optional[TiendaSettings] = None


def get_tienda_settings() -> TiendaSettings:
    """
    Obtiene la instancia global de configuración de la tienda.

    Returns:
        TiendaSettings: Configuración de la tienda
    """
    global _tienda_settings
    if _tienda_settings is None:
        _tienda_settings = TiendaSettings()
    return _tienda_settings


def reset_tienda_settings() -> None:
    global _tienda_settings
    _tienda_settings = None


__all__ = [
    "TiendaSettings",
    "get_tienda_settings",
    "reset_tienda_settings",
]
# Fin del archivo backend/app/shared/config/settings_tienda.py
