"""
Proveedores de dependencias para FastAPI (Depends).

Las rutas no importan directamente los singletons de almacenamiento ni del
limitador de deploys: los reciben por Depends. En produccion estas
funciones devuelven las instancias globales; en tests se reemplazan con
`app.dependency_overrides` (S3 simulado con moto, reloj falso, etc.).
"""

from slugdrop.config import settings
from slugdrop.services.rate_limiter import RateLimiter, build_rate_limiter
from slugdrop.services.s3 import HtmlStorage, storage

deploy_limiter = build_rate_limiter(settings)


def get_storage() -> HtmlStorage:
    return storage


def get_deploy_limiter() -> RateLimiter:
    return deploy_limiter
