"""
Ruta publica de lectura: GET /{slug}.

Sirve el HTML publicado bajo un slug:

    GET /happy-cat-0042  ->  objeto "happy-cat-0042.html" del bucket

Seguridad
---------
No hay concepto de dueno ni de login: conocer el slug es suficiente para
ver el documento. La UNICA barrera es el formato del slug. Cualquier cosa
que no sea exactamente <letras>-<letras>-<4 digitos> responde 404 sin
tocar S3 (incluye "../etc/passwd", mayusculas, segmentos extra...).

Esta ruta debe registrarse DESPUES de /health, porque "/{slug}" tambien
matchearia "/health".
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from slugdrop.config import settings
from slugdrop.dependencies import get_storage
from slugdrop.errors import ResourceNotFound, StorageFailure
from slugdrop.limiter import limiter
from slugdrop.models.schemas import ErrorResponse
from slugdrop.services.s3 import HtmlStorage, ObjectNotFound, StorageError
from slugdrop.services.slugs import is_valid_slug, slug_to_key

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/{slug}",
    response_class=Response,
    responses={
        200: {"content": {"text/html": {}}},
        404: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
# Lambda: el limite se lee en cada request, asi se puede cambiar en caliente.
@limiter.limit(lambda: settings.FETCH_RATE_LIMIT)
async def view_page(request: Request, slug: str, storage: HtmlStorage = Depends(get_storage)):
    """
    Devuelve los bytes del documento tal como se subieron.

    Headers de la respuesta:
        Content-Type: text/html; charset=utf-8
        Cache-Control: public, max-age=3600 (un deploy nunca cambia, asi
            que navegadores y proxies pueden cachearlo una hora)

    Raises:
        ResourceNotFound (404): Formato invalido o slug inexistente.
        StorageFailure (500): Error del backend.

    Ademas SlowAPI responde 429 `{"error": ...}` si una IP supera
    FETCH_RATE_LIMIT.
    """
    if not is_valid_slug(slug):
        raise ResourceNotFound()

    try:
        stored = await run_in_threadpool(storage.get, slug_to_key(slug))
    except ObjectNotFound:
        raise ResourceNotFound()
    except StorageError:
        logger.exception("Failed to fetch %s", slug)
        raise StorageFailure("Error retrieving file")

    return Response(
        content=stored.body,
        media_type=settings.HTML_CONTENT_TYPE,
        headers={"Cache-Control": f"public, max-age={settings.CACHE_MAX_AGE}"},
    )
