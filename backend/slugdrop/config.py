"""
Modulo de configuracion centralizada del servicio.

Todas las constantes que el servicio necesita viven aqui y se leen de
variables de entorno, de forma que el mismo codigo corra contra MinIO en
desarrollo y contra cualquier endpoint S3 compatible en produccion sin
tocar el codigo fuente.

La instancia `settings` se crea una sola vez al importar el modulo; todos
los archivos que hagan `from slugdrop.config import settings` reciben la
misma instancia.
"""

import os


class Settings:
    """
    Configuracion del servicio leida del entorno.

    Se mantiene como una clase simple (sin pydantic-settings) para que en
    los tests se pueda crear una instancia y sobreescribir atributos.
    """

    # ---------- Almacenamiento de objetos (S3 / MinIO) ----------

    # Endpoint del servicio S3 compatible. Por defecto apunta al contenedor
    # de MinIO del docker-compose de desarrollo.
    S3_ENDPOINT_URL: str = os.getenv("S3_ENDPOINT_URL", "http://minio:9000")

    # Credenciales de acceso. Los valores por defecto son los de MinIO;
    # en produccion SIEMPRE se inyectan por entorno.
    S3_ACCESS_KEY_ID: str = os.getenv("S3_ACCESS_KEY_ID", "minioadmin")
    S3_SECRET_ACCESS_KEY: str = os.getenv("S3_SECRET_ACCESS_KEY", "minioadmin")

    S3_BUCKET: str = os.getenv("S3_BUCKET", "kids-html")

    # MinIO ignora la region, pero boto3 la necesita para firmar (SigV4).
    AWS_REGION: str = os.getenv("AWS_REGION", "us-east-1")

    # Timeouts explicitos (segundos) para put/get. Sin ellos, una llamada a
    # un backend caido podria dejar la peticion colgada indefinidamente.
    S3_CONNECT_TIMEOUT: float = float(os.getenv("S3_CONNECT_TIMEOUT", "5"))
    S3_READ_TIMEOUT: float = float(os.getenv("S3_READ_TIMEOUT", "10"))

    # Intentos totales (incluye el primero) del modo de reintentos
    # "standard" de botocore. Los errores 4xx (NoSuchKey) nunca se reintentan.
    S3_MAX_ATTEMPTS: int = int(os.getenv("S3_MAX_ATTEMPTS", "3"))

    # ---------- Servidor HTTP ----------

    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))

    # URL publica usada para componer el link de cada deploy.
    # Ejemplo: BASE_URL="https://sites.example.com" -> https://sites.example.com/happy-cat-0042
    BASE_URL: str = os.getenv("BASE_URL", f"http://localhost:{PORT}")

    CORS_ORIGINS: list[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
        if origin.strip()
    ]

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # ---------- Limites de subida ----------

    # 10 MB = 10 * 1024 * 1024 bytes
    MAX_FILE_SIZE: int = int(os.getenv("MAX_FILE_SIZE", str(10 * 1024 * 1024)))

    # Margen para los boundaries y headers del multipart. El Content-Length
    # del request incluye todo el sobre, no solo el archivo.
    MULTIPART_OVERHEAD: int = 64 * 1024

    # ---------- Rate limiting ----------

    # Cuota de deploys por cliente: RATE_LIMIT_MAX subidas cada
    # RATE_LIMIT_WINDOW_SECONDS (ventana deslizante).
    RATE_LIMIT_MAX: int = int(os.getenv("RATE_LIMIT_MAX", "1"))
    RATE_LIMIT_WINDOW_SECONDS: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "300"))

    # Vacio = contador en memoria del proceso (una sola instancia).
    # Con varias instancias detras de un balanceador, usar un storage
    # compartido de la libreria `limits`, p. ej. "redis://redis:6379".
    RATE_LIMIT_STORAGE_URI: str = os.getenv("RATE_LIMIT_STORAGE_URI", "")

    # Limite de SlowAPI para GET /{slug} (freno a la enumeracion de slugs).
    FETCH_RATE_LIMIT: str = os.getenv("FETCH_RATE_LIMIT", "120/minute")

    # ---------- Slugs y respuesta ----------

    # Cuantos slugs candidatos se prueban contra el bucket antes de rendirse.
    SLUG_MAX_ATTEMPTS: int = int(os.getenv("SLUG_MAX_ATTEMPTS", "5"))

    # El QR no se genera localmente: devolvemos la URL de un servicio externo.
    QR_CODE_ENDPOINT: str = os.getenv(
        "QR_CODE_ENDPOINT", "https://api.qrserver.com/v1/create-qr-code/"
    )
    QR_CODE_SIZE: str = os.getenv("QR_CODE_SIZE", "120x120")

    # ---------- Objetos almacenados ----------

    HTML_CONTENT_TYPE: str = "text/html; charset=utf-8"
    CACHE_MAX_AGE: int = 3600  # 1 hora


settings = Settings()
