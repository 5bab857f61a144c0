"""
Middleware ASGI que limita el tamano del body de POST /api/deploy.

Acota el body en dos niveles:

1. Si el request declara Content-Length y supera el limite, responde 400
   sin leer ni un byte del body (ni siquiera llega a la ruta).
2. Si no lo declara (Transfer-Encoding: chunked), envuelve `receive` y va
   contando los bytes a medida que llegan; al pasar el limite lanza
   `UploadTooLarge`. Quien este leyendo el body (la ruta de deploy, al
   parsear el multipart) captura la excepcion y responde 400.

El limite es MAX_FILE_SIZE + MULTIPART_OVERHEAD porque el body incluye
los boundaries y headers de cada parte, no solo el archivo. La ruta sigue
verificando el tamano exacto del archivo.
"""

import logging

from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)


class UploadTooLarge(Exception):
    """El body recibido supero el limite configurado."""


class UploadSizeLimitMiddleware:
    def __init__(self, app: ASGIApp, max_body_size: int, path: str = "/api/deploy", error_message: str = "File too large"):
        self.app = app
        self.max_body_size = max_body_size
        self.path = path
        self.error_message = error_message

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] != "POST" or scope["path"] != self.path:
            await self.app(scope, receive, send)
            return

        declared = self._content_length(scope)
        if declared is not None and declared > self.max_body_size:
            logger.info("Rejected upload with Content-Length %d", declared)
            response = JSONResponse(status_code=400, content={"error": self.error_message})
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_size:
                    logger.info("Aborted streamed upload after %d bytes", received)
                    raise UploadTooLarge()
            return message

        await self.app(scope, limited_receive, send)

    @staticmethod
    def _content_length(scope: Scope) -> int | None:
        for name, value in scope.get("headers", []):
            if name == b"content-length":
                try:
                    return int(value)
                except ValueError:
                    return None
        return None
