"""
Arranque con `python -m slugdrop` (equivale a `uvicorn slugdrop.main:app`).

Escucha en HOST:PORT de la configuracion.
"""

import uvicorn

from slugdrop.config import settings


def main() -> None:
    uvicorn.run("slugdrop.main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
