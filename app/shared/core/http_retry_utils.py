# -*- coding: utf-8 -*-
"""
backend/app/shared/core/http_retry_utils.py

Reintentos con backoff exponencial + jitter para llamadas HTTP a
proveedores externos (PayPal).

Se reintenta ante:
- errores de transporte / timeouts de httpx
- códigos en `retry_on_status` (por defecto 429 y 5xx)

Cualquier otra respuesta se devuelve tal cual para que el llamador la
interprete (p. ej. un 422 de negocio del proveedor).

Uso:
    response = await retry_with_backoff(
        client.post,
        url,
        json=payload,
        max_retries=3,
        base_delay=0.5,
    )

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations
import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_RETRY_STATUS: frozenset[int] = frozenset({429, 500, 502, 503, 504})

RetryHook = Callable[[int, str], None]


def _next_delay(delay: float, backoff_factor: float, max_delay: float) -> float:
    return min(delay * backoff_factor, max_delay)


def _jittered(delay: float) -> float:
    # jitter de hasta 20% para no sincronizar reintentos entre procesos
    return delay + random.uniform(0, 0.2 * delay)


async def retry_with_backoff(
    func: Callable[..., Awaitable[httpx.Response]],
    *args,
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    backoff_factor: float = 2.0,
    retry_on_status: Optional[frozenset[int] | set[int]] = None,
    on_retry: Optional[RetryHook] = None,
    **kwargs,
) -> httpx.Response:
    """
    Ejecuta una función HTTP async con reintentos acotados.

    Args:
        func: Función async a ejecutar (ej: client.get, client.post)
        max_retries: Reintentos adicionales al primer intento
        base_delay: Delay inicial en segundos
        max_delay: Delay máximo en segundos
        backoff_factor: Factor de multiplicación del delay
        retry_on_status: Códigos HTTP que deben reintentarse
        on_retry: callback(attempt, reason) antes de cada espera

    Returns:
        La última respuesta (no reintetable o exitosa)

    Raises:
        httpx.HTTPStatusError: si se agotan reintentos con un código reintentable
        httpx.TransportError / httpx.TimeoutException: si se agotan por red
    """
    if max_retries < 0:
        raise ValueError(f"max_retries debe ser >= 0, recibido: {max_retries}")
    if base_delay <= 0:
        raise ValueError(f"base_delay debe ser > 0, recibido: {base_delay}")

    retry_on_status = DEFAULT_RETRY_STATUS if retry_on_status is None else retry_on_status
    delay = base_delay
    attempts = max_retries + 1

    for attempt in range(1, attempts + 1):
        try:
            response = await func(*args, **kwargs)
        except (httpx.TransportError, httpx.TimeoutException) as e:
            if attempt >= attempts:
                logger.error("Error de transporte tras %d intentos: %s", attempts, e)
                raise
            reason = type(e).__name__
        else:
            if response.status_code not in retry_on_status:
                if attempt > 1:
                    logger.info("Éxito tras %d intentos", attempt)
                return response
            if attempt >= attempts:
                logger.error("HTTP %s tras %d intentos", response.status_code, attempts)
                response.raise_for_status()
                return response  # pragma: no cover - raise_for_status siempre lanza aquí
            reason = f"http_{response.status_code}"

        logger.warning(
            "%s en intento %d/%d, reintentando en %.2fs",
            reason, attempt, attempts, delay,
        )
        if on_retry is not None:
            on_retry(attempt, reason)
        await asyncio.sleep(_jittered(delay))
        delay = _next_delay(delay, backoff_factor, max_delay)

    raise RuntimeError("Reintentos agotados sin respuesta")  # pragma: no cover


__all__ = ["retry_with_backoff", "DEFAULT_RETRY_STATUS"]

# Fin del archivo backend/app/shared/core/http_retry_utils.py
