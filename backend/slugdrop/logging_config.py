"""
Configuracion de logging del servicio.

Usamos el modulo `logging` de la biblioteca estandar. Cada modulo pide su
propio logger con `logging.getLogger(__name__)` y esta funcion configura
una sola vez el handler de consola del logger raiz del paquete.
"""

import logging
import sys

from slugdrop.config import settings

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"


def setup_logging(level: str | None = None) -> logging.Logger:
    """
    Configura el logger "slugdrop" con salida a stdout.

    Es idempotente: si ya tiene handler (p. ej. al recargar con uvicorn
    --reload o al importar la app varias veces en tests) no agrega otro.
    """
    logger = logging.getLogger("slugdrop")
    logger.setLevel((level or settings.LOG_LEVEL).upper())

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
