"""
Rate limiting con SlowAPI para las rutas publicas de lectura.

Hay DOS limitadores en el servicio y cumplen funciones distintas:

1. Este `limiter` de SlowAPI: decorador por ruta (@limiter.limit) sobre
   GET /{slug}. Frena a quien intente enumerar slugs a fuerza bruta.
   Si se excede, SlowAPI responde 429 antes de ejecutar el endpoint.

2. El limitador de deploys (services/rate_limiter.py): cuota estricta de
   subidas por cliente con ventana deslizante, inyectado en la ruta de
   deploy con Depends para poder cambiar su backend o simular el reloj
   en tests.

Ambos identifican al cliente con get_remote_address, que devuelve la IP
de la conexion (request.client.host), no un header como X-Forwarded-For
que el cliente podria falsificar.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from slugdrop.config import settings

# Si RATE_LIMIT_STORAGE_URI apunta a Redis, SlowAPI tambien comparte sus
# contadores entre instancias; si no, quedan en memoria.
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI or "memory://",
)
