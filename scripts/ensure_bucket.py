"""
Script para preparar el bucket de deploys en un entorno nuevo.

Crea el bucket configurado (S3_BUCKET, por defecto "kids-html") en el
endpoint configurado (S3_ENDPOINT_URL) si todavia no existe. Es seguro
ejecutarlo varias veces: si el bucket ya existe no hace nada.

La app nunca crea buckets por su cuenta; tampoco borra deploys viejos.
La expiracion (p. ej. borrar despues de N dias) se configura como regla
de lifecycle en el propio backend (MinIO `mc ilm`, reglas de S3).

Uso:
    S3_ENDPOINT_URL=http://localhost:9000 python scripts/ensure_bucket.py
"""

import logging
import sys

from slugdrop.logging_config import setup_logging
from slugdrop.services.s3 import HtmlStorage, StorageError

logger = logging.getLogger("slugdrop.scripts.ensure_bucket")


def main() -> int:
    setup_logging()
    storage = HtmlStorage()
    try:
        created = storage.ensure_bucket()
    except StorageError:
        logger.exception("Could not prepare bucket %s", storage.bucket)
        return 1

    if created:
        logger.info("Bucket %s created", storage.bucket)
    else:
        logger.info("Bucket %s already exists", storage.bucket)
    return 0


if __name__ == "__main__":
    sys.exit(main())
