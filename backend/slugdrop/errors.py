"""
Taxonomia de errores del servicio.

Cada error conoce su codigo HTTP y un mensaje PUBLICO (seguro para el
cliente). Los detalles internos (trazas, mensajes de botocore) solo se
loguean en el servidor; nunca viajan en la respuesta.

    ClientInputError        -> 400  (falta el archivo, tipo invalido, muy grande)
    ResourceNotFound        -> 404  (slug desconocido o con formato invalido)
    RateLimitExceededError  -> 429  (cliente supero su cuota de deploys)
    StorageFailure          -> 500  (backend S3 caido o error interno)

main.py registra un handler que convierte cualquier ServiceError en
`{"error": mensaje}` con el codigo correspondiente, y otro que da el mismo
formato al 429 de SlowAPI en GET /{slug}.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded


class ServiceError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ClientInputError(ServiceError):
    status_code = 400
    message = "Invalid upload"


class ResourceNotFound(ServiceError):
    status_code = 404
    message = "Not found"


class RateLimitExceededError(ServiceError):
    status_code = 429
    message = "Too many requests"


class StorageFailure(ServiceError):
    status_code = 500
    message = "Storage failure"


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 de SlowAPI (GET /{slug}) con el mismo formato `{"error": ...}`."""
    response = JSONResponse(status_code=429, content={"error": f"Rate limit exceeded: {exc.detail}"})
    # Agrega Retry-After / X-RateLimit-* si headers_enabled esta activo.
    return request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)
