"""
Adaptador de almacenamiento sobre S3 (o cualquier servicio compatible,
como MinIO).

Este modulo es el unico lugar del proyecto que habla con boto3. Las rutas
solo ven tres operaciones (put, get, exists) y dos excepciones propias:

    StorageError     -> cualquier fallo del backend (red, permisos, 5xx...)
    ObjectNotFound   -> el key no existe (subclase de StorageError)

Distinguir ObjectNotFound del resto es lo que permite a la ruta de lectura
responder 404 en un caso y 500 en el otro, sin inspeccionar mensajes.

Estructura del bucket: plana, un objeto por deploy.
    happy-cat-0042.html
    zippy-otter-0007.html

Timeouts y reintentos
---------------------
El cliente se crea con un botocore.Config que fija timeouts de conexion y
lectura y el modo de reintentos "standard" con un numero acotado de
intentos. Ese modo reintenta errores transitorios (5xx, throttling,
timeouts) pero NUNCA un 404, asi que un slug inexistente responde de
inmediato.

Inyeccion de dependencias
-------------------------
El constructor acepta un `client` opcional: en tests pasamos el cliente de
moto (S3 simulado en memoria) en vez del real.
"""

import logging
from dataclasses import dataclass, field

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from slugdrop.config import settings

logger = logging.getLogger(__name__)

# head_object responde "404" (sin body no hay codigo S3); get_object
# responde "NoSuchKey". MinIO a veces usa "NotFound".
NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


class StorageError(Exception):
    """Fallo del backend de almacenamiento."""


class ObjectNotFound(StorageError):
    """El key pedido no existe en el bucket."""


@dataclass
class StoredObject:
    body: bytes
    content_type: str
    metadata: dict[str, str] = field(default_factory=dict)


def _is_not_found(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") in NOT_FOUND_CODES


def create_s3_client():
    """
    Crea el cliente boto3 a partir de la configuracion.

    addressing_style="path" es necesario para MinIO: las URLs quedan como
    http://minio:9000/kids-html/key en vez de http://kids-html.minio:9000/key.
    """
    config = Config(
        region_name=settings.AWS_REGION,
        signature_version="s3v4",
        connect_timeout=settings.S3_CONNECT_TIMEOUT,
        read_timeout=settings.S3_READ_TIMEOUT,
        retries={"total_max_attempts": settings.S3_MAX_ATTEMPTS, "mode": "standard"},
        s3={"addressing_style": "path"},
    )
    return boto3.client(
        "s3",
        endpoint_url=settings.S3_ENDPOINT_URL or None,
        aws_access_key_id=settings.S3_ACCESS_KEY_ID,
        aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY,
        config=config,
    )


class HtmlStorage:
    """
    Operaciones de lectura/escritura de documentos HTML en el bucket.

    Atributos:
        client: Cliente boto3 de S3.
        bucket (str): Bucket donde viven todos los deploys.
    """

    def __init__(self, client=None, bucket: str | None = None):
        self.client = client or create_s3_client()
        self.bucket = bucket or settings.S3_BUCKET

    def put(self, key: str, data: bytes, content_type: str, metadata: dict[str, str] | None = None) -> None:
        """
        Escribe (o sobreescribe) un objeto.

        S3 no tiene versionado en este bucket: mismo key = el objeto anterior
        se reemplaza. Los valores de metadata deben ser ASCII porque S3 los
        guarda como headers HTTP (x-amz-meta-*).
        """
        params = {
            "Bucket": self.bucket,
            "Key": key,
            "Body": data,
            "ContentType": content_type,
        }
        if metadata:
            params["Metadata"] = metadata

        try:
            self.client.put_object(**params)
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(f"put_object failed for {key!r}: {exc}") from exc

    def get(self, key: str) -> StoredObject:
        """
        Lee un objeto completo.

        Los deploys pesan como maximo 10 MB, asi que leerlos en memoria es
        aceptable.

        Raises:
            ObjectNotFound: Si el key no existe.
            StorageError: Cualquier otro fallo.
        """
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=key)
            body = response["Body"].read()
        except ClientError as exc:
            if _is_not_found(exc):
                raise ObjectNotFound(key) from exc
            raise StorageError(f"get_object failed for {key!r}: {exc}") from exc
        except BotoCoreError as exc:
            raise StorageError(f"get_object failed for {key!r}: {exc}") from exc

        return StoredObject(
            body=body,
            content_type=response.get("ContentType", settings.HTML_CONTENT_TYPE),
            metadata=response.get("Metadata", {}),
        )

    def exists(self, key: str) -> bool:
        """Consulta con HEAD (sin descargar el body) si el key ya esta ocupado."""
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            if _is_not_found(exc):
                return False
            raise StorageError(f"head_object failed for {key!r}: {exc}") from exc
        except BotoCoreError as exc:
            raise StorageError(f"head_object failed for {key!r}: {exc}") from exc
        return True

    def ensure_bucket(self) -> bool:
        """
        Crea el bucket si no existe. Retorna True si lo creo.

        Lo usa scripts/ensure_bucket.py al preparar un entorno nuevo; la app
        no crea buckets por su cuenta. En us-east-1 create_bucket no acepta
        LocationConstraint; en el resto de regiones es obligatorio.
        """
        try:
            self.client.head_bucket(Bucket=self.bucket)
            return False
        except ClientError as exc:
            if not _is_not_found(exc):
                raise StorageError(f"head_bucket failed for {self.bucket!r}: {exc}") from exc
        except BotoCoreError as exc:
            raise StorageError(f"head_bucket failed for {self.bucket!r}: {exc}") from exc

        params = {"Bucket": self.bucket}
        region = self.client.meta.region_name
        if region and region != "us-east-1":
            params["CreateBucketConfiguration"] = {"LocationConstraint": region}

        try:
            self.client.create_bucket(**params)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code")
            if code not in {"BucketAlreadyOwnedByYou", "BucketAlreadyExists"}:
                raise StorageError(f"create_bucket failed for {self.bucket!r}: {exc}") from exc
            return False

        logger.info("Created bucket %s", self.bucket)
        return True


# Instancia global (cliente boto3 con pool de conexiones reutilizable).
# Crear el cliente no hace ninguna llamada de red.
storage = HtmlStorage()
