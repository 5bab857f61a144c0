"""
Punto de entrada de la aplicacion FastAPI.

Aqui se:
1. Configura el logging.
2. Crea la instancia de FastAPI.
3. Registran los middlewares (CORS, limite de tamano de subida) y los
   handlers de error (errores tipados del servicio y 429 de SlowAPI).
4. Define el health check y se registran las rutas.

Estructura:
---------------------------------------------------------
    main.py
        |
        +-- routes/          (Controladores HTTP)
        |    +-- deploy.py   POST /api/deploy
        |    +-- pages.py    GET  /{slug}
        |
        +-- services/        (Logica)
        |    +-- slugs.py         generador y formato de slugs
        |    +-- rate_limiter.py  cuota de deploys (ventana deslizante)
        |    +-- validator.py     validacion de la subida
        |    +-- s3.py            adaptador de almacenamiento
        |
        +-- models/schemas.py
        +-- errors.py, dependencies.py, middleware.py, limiter.py
        +-- config.py, logging_config.py

Flujo de una peticion:
    Cliente -> CORS -> limite de tamano -> Router -> Endpoint -> Respuesta
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from slugdrop.config import settings
from slugdrop.errors import ServiceError, rate_limit_exceeded_handler, service_error_handler
from slugdrop.limiter import limiter
from slugdrop.logging_config import setup_logging
from slugdrop.middleware import UploadSizeLimitMiddleware
from slugdrop.models.schemas import HealthResponse
from slugdrop.routes.deploy import router as deploy_router
from slugdrop.routes.pages import router as pages_router
from slugdrop.services.validator import size_limit_message

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="slugdrop")

# ---------- Rate limiting (SlowAPI) ----------

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# ---------- Errores tipados ----------

# Cualquier ServiceError lanzado por una ruta se convierte en
# {"error": mensaje} con su codigo HTTP.
app.add_exception_handler(ServiceError, service_error_handler)

# ---------- Middlewares ----------

# Corta subidas gigantes antes de que FastAPI parsee el multipart.
app.add_middleware(
    UploadSizeLimitMiddleware,
    max_body_size=settings.MAX_FILE_SIZE + settings.MULTIPART_OVERHEAD,
    error_message=size_limit_message(settings.MAX_FILE_SIZE),
)

# Nunca allow_origins=["*"] en produccion; los origenes van por entorno.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# ---------- Health Check ----------

# Sin chequeo de dependencias (S3): solo confirma que el proceso responde.
@app.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(status="ok")


# ---------- Registro de rutas ----------

# El orden SI importa aqui: pages_router tiene el catch-all "/{slug}" y
# debe ir despues de /health y /api/deploy.
app.include_router(deploy_router)
app.include_router(pages_router)

logger.info("slugdrop ready (bucket=%s, base_url=%s)", settings.S3_BUCKET, settings.BASE_URL)
