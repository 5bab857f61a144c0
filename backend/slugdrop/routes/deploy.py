"""
Ruta de deploy: POST /api/deploy.

Recibe un archivo HTML (multipart/form-data, campo `file`), lo guarda en el
bucket bajo un slug nuevo y devuelve la URL publica.

Estados del request:

    Recibido -> Cuota verificada -> Body leido -> Validado -> Slug asignado -> Guardado -> Respondido

Cada paso puede cortar el flujo con un error tipado (ver errors.py):
    429 si el cliente ya agoto su cuota
    400 si falta el archivo, el multipart esta roto, no es HTML o excede el tamano
    500 si S3 falla (el detalle solo va al log)

Orden importante: la cuota se consume al ADMITIR el intento, antes de
leer el body. Un cliente sin cuota recibe 429 sin que parseemos nada, y un
intento con archivo invalido tambien cuenta.

Por eso el formulario NO se declara como parametro `File(...)`: FastAPI
lo parsearia antes de entrar al handler (y antes de la cuota), y sus
errores de parseo saldrian como 422/400 con `{"detail": ...}` en vez de
nuestro `{"error": ...}`.
"""

import logging
from datetime import datetime, timezone
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request
from slowapi.util import get_remote_address
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from slugdrop.config import settings
from slugdrop.dependencies import get_deploy_limiter, get_storage
from slugdrop.errors import ClientInputError, RateLimitExceededError, StorageFailure
from slugdrop.middleware import UploadTooLarge
from slugdrop.models.schemas import DeployResponse, ErrorResponse
from slugdrop.services.rate_limiter import RateLimiter
from slugdrop.services.s3 import HtmlStorage, StorageError
from slugdrop.services.slugs import generate_slug, slug_to_key
from slugdrop.services.validator import size_limit_message, validate_upload

logger = logging.getLogger(__name__)

router = APIRouter()

# Como el formulario se lee a mano, documentamos el body en OpenAPI.
UPLOAD_REQUEST_BODY = {
    "required": True,
    "content": {
        "multipart/form-data": {
            "schema": {
                "type": "object",
                "properties": {"file": {"type": "string", "format": "binary"}},
                "required": ["file"],
            }
        }
    },
}


def rate_limit_message() -> str:
    minutes = max(1, settings.RATE_LIMIT_WINDOW_SECONDS // 60)
    return f"Too many requests. Try again in {minutes} minutes."


def build_deployment_url(slug: str) -> str:
    return f"{settings.BASE_URL.rstrip('/')}/{slug}"


def build_qr_code_url(target_url: str) -> str:
    """
    URL de una imagen QR generada por un servicio externo.

    No renderizamos el QR localmente; el frontend solo muestra esta imagen.
    """
    # safe="" para codificar tambien "/" y ":" dentro del parametro data.
    return f"{settings.QR_CODE_ENDPOINT}?size={settings.QR_CODE_SIZE}&data={quote(target_url, safe='')}"


def pick_free_slug(storage: HtmlStorage) -> str:
    """
    Genera slugs hasta encontrar uno libre en el bucket.

    Con 640,000 slugs posibles las colisiones son raras pero no imposibles;
    sin esta verificacion, un deploy nuevo pisaria silenciosamente a otro.
    El chequeo no es atomico con el put posterior: dos deploys simultaneos
    que saquen el mismo slug libre todavia podrian pisarse.

    Raises:
        StorageError: Si S3 falla o si los SLUG_MAX_ATTEMPTS candidatos
            estaban ocupados.
    """
    for _ in range(settings.SLUG_MAX_ATTEMPTS):
        slug = generate_slug()
        if not storage.exists(slug_to_key(slug)):
            return slug
        logger.warning("Slug collision on %s, generating another", slug)
    raise StorageError(f"no free slug after {settings.SLUG_MAX_ATTEMPTS} attempts")


async def read_upload_form(request: Request) -> FormData:
    """
    Parsea el body multipart del request.

    Traduce los fallos de lectura a ClientInputError (400):
        UploadTooLarge        el middleware corto un body enviado por chunks
        MultiPartException    multipart mal formado (Starlette la envuelve en
                              HTTPException(400) cuando corre dentro de la app)
    """
    try:
        return await request.form(max_files=1)
    except UploadTooLarge:
        raise ClientInputError(size_limit_message(settings.MAX_FILE_SIZE))
    except (MultiPartException, StarletteHTTPException):
        logger.info("Malformed multipart body from %s", get_remote_address(request))
        raise ClientInputError("Invalid multipart body")


@router.post(
    "/api/deploy",
    response_model=DeployResponse,
    responses={
        400: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    openapi_extra={"requestBody": UPLOAD_REQUEST_BODY},
)
async def deploy(
    request: Request,
    storage: HtmlStorage = Depends(get_storage),
    deploy_limiter: RateLimiter = Depends(get_deploy_limiter),
):
    """
    Publica un documento HTML.

    Parametros:
        request (Request): Request HTTP; de aqui sale la IP del cliente y
            el body multipart (campo `file`).
        storage: Adaptador de S3 (inyectado).
        deploy_limiter: Limitador de deploys (inyectado).

    Retorna:
        DeployResponse: {"slug", "url", "qrCode"}
    """
    # --- Paso 1: identificar al cliente por la IP de la conexion ---
    client_id = get_remote_address(request)

    # --- Paso 2: cuota de deploys (antes de tocar el body) ---
    if not deploy_limiter.admit(client_id):
        logger.warning("Deploy rate limit exceeded for %s", client_id)
        raise RateLimitExceededError(rate_limit_message())

    # --- Paso 3: leer y validar el archivo ---
    # El middleware de tamano acota el body; de la parte leemos a lo sumo
    # MAX_FILE_SIZE + 1 bytes para detectar el exceso exacto.
    form = await read_upload_form(request)
    try:
        upload = form.get("file")
        # Un campo `file` de texto (sin filename) llega como str.
        if not isinstance(upload, UploadFile):
            raise ClientInputError("No file uploaded")

        data = await upload.read(settings.MAX_FILE_SIZE + 1)
        filename, content_type = upload.filename, upload.content_type
    finally:
        await form.close()

    result = validate_upload(data, filename, content_type, settings.MAX_FILE_SIZE)
    if not result.is_valid:
        logger.info("Rejected upload %r from %s: %s", result.filename, client_id, result.error)
        raise ClientInputError(result.error)

    # --- Paso 4 y 5: asignar slug y guardar ---
    # boto3 es bloqueante: lo corremos en el threadpool para no frenar el
    # event loop mientras esperamos a S3.
    metadata = {
        # S3 guarda la metadata como headers HTTP: solo ASCII.
        "original-filename": quote(result.filename, safe=" ._-()"),
        "upload-timestamp": datetime.now(timezone.utc).isoformat(),
    }
    try:
        slug = await run_in_threadpool(pick_free_slug, storage)
        await run_in_threadpool(
            storage.put, slug_to_key(slug), data, settings.HTML_CONTENT_TYPE, metadata
        )
    except StorageError:
        logger.exception("Deploy failed for upload from %s", client_id)
        raise StorageFailure("Deployment failed")

    # --- Paso 6: responder ---
    url = build_deployment_url(slug)
    logger.info("Deployed %s (%d bytes) from %s", slug, len(data), client_id)
    return DeployResponse(slug=slug, url=url, qr_code=build_qr_code_url(url))
