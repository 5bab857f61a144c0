"""
Generador de slugs.

Un slug es el identificador publico y "memorable" de cada deploy:

    <adjetivo>-<animal>-<numero de 4 digitos>
    Ejemplo: "zippy-otter-0007"

Hay 8 adjetivos x 8 animales x 10000 numeros = 640,000 slugs posibles.
No son unicos por construccion; la ruta de deploy verifica contra el
bucket y reintenta si el candidato ya existe.

El mismo patron sirve como UNICA barrera de acceso en GET /{slug}: si el
path no tiene exactamente esta forma, ni siquiera consultamos S3. Como el
key de S3 se deriva solo de caracteres de estas listas y digitos, no hay
forma de inyectar "../" ni rutas arbitrarias.
"""

import re
import secrets
from random import Random

ADJECTIVES = ("happy", "silly", "bouncy", "swift", "clever", "bright", "zippy", "quirky")
ANIMALS = ("cat", "dog", "fox", "panda", "penguin", "dolphin", "otter", "eagle")

# [0-9] en vez de \d: en Python \d tambien acepta digitos Unicode ("٠١٢٣").
# fullmatch() evita que "happy-cat-0001\n" pase (con $ si pasaria).
SLUG_PATTERN = re.compile(r"[a-z]+-[a-z]+-[0-9]{4}")

_system_random = secrets.SystemRandom()


def generate_slug(rng: Random | None = None) -> str:
    """
    Genera un slug aleatorio.

    Parametros:
        rng: Generador opcional. En produccion se usa SystemRandom (CSPRNG)
            para que los slugs no sean predecibles; en tests se puede pasar
            un `random.Random(seed)` para obtener resultados deterministas.
    """
    rng = rng or _system_random
    adjective = rng.choice(ADJECTIVES)
    animal = rng.choice(ANIMALS)
    number = rng.randrange(10000)
    return f"{adjective}-{animal}-{number:04d}"


def is_valid_slug(value: str) -> bool:
    return SLUG_PATTERN.fullmatch(value) is not None


def slug_to_key(slug: str) -> str:
    """Key del objeto en el bucket: siempre `<slug>.html`."""
    return f"{slug}.html"
