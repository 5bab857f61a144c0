"""
Rate limiter de deploys (ventana deslizante).

Cada cliente (identificado por su IP de conexion) puede hacer como maximo
`max_requests` deploys dentro de los ultimos `window_seconds` segundos.

Ventana deslizante vs. ventana fija
-----------------------------------
Con ventana fija ("5 por cada bloque de 5 minutos del reloj") un cliente
podria hacer 1 subida a las 12:04:59 y otra a las 12:05:00. Con ventana
deslizante la ventana se recalcula respecto a "ahora" en cada llamada:
el cliente vuelve a ser elegible cuando su timestamp mas viejo sale de la
ventana.

Usamos la libreria `limits` (el motor que hay debajo de SlowAPI) con la
estrategia "moving window", que es exactamente esta ventana deslizante.
El storage se elige por URI:

    memory://              en memoria del proceso (una sola instancia)
    redis://redis:6379     compartido entre instancias

Las rutas solo dependen del protocolo `RateLimiter` (admit -> bool), asi
que el backend se puede cambiar sin tocar los handlers.
"""

import logging
from typing import Protocol

from limits import RateLimitItemPerSecond
from limits.storage import storage_from_string
from limits.strategies import MovingWindowRateLimiter

logger = logging.getLogger(__name__)

IN_PROCESS_STORAGE_URI = "memory://"


class RateLimiter(Protocol):
    def admit(self, client_id: str) -> bool: ...


class LimitsRateLimiter:
    """
    Limitador de deploys respaldado por `limits` (moving window).

    Cada `admit()` admitido registra un timestamp para el cliente; los
    rechazados no registran nada, asi que no alargan la espera. El storage
    en memoria serializa las admisiones de un mismo cliente con un lock por
    key, de modo que dos peticiones concurrentes no pueden colarse ambas.

    Parametros:
        max_requests: Admisiones permitidas dentro de la ventana.
        window_seconds: Tamano de la ventana en segundos.
        storage_uri: URI de storage de `limits` ("memory://", "redis://...").
    """

    def __init__(self, max_requests: int, window_seconds: int, storage_uri: str = IN_PROCESS_STORAGE_URI):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.item = RateLimitItemPerSecond(max_requests, window_seconds)
        self.storage = storage_from_string(storage_uri)
        self.strategy = MovingWindowRateLimiter(self.storage)

    def admit(self, client_id: str) -> bool:
        return self.strategy.hit(self.item, "deploy", client_id)

    def reset(self) -> None:
        self.storage.reset()


def build_rate_limiter(settings) -> RateLimiter:
    """Crea el limitador de deploys; RATE_LIMIT_STORAGE_URI vacio = en memoria."""
    storage_uri = settings.RATE_LIMIT_STORAGE_URI or IN_PROCESS_STORAGE_URI
    # Solo el esquema: la URI puede llevar credenciales.
    logger.info("Deploy rate limiter using '%s' storage", storage_uri.split("://", 1)[0])
    return LimitsRateLimiter(
        settings.RATE_LIMIT_MAX,
        settings.RATE_LIMIT_WINDOW_SECONDS,
        storage_uri,
    )
