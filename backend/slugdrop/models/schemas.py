"""
Esquemas (Pydantic) de las respuestas JSON de la API.

Son el contrato con el frontend: FastAPI los usa para serializar la
respuesta y para documentar los endpoints en /docs.
"""

from pydantic import BaseModel, ConfigDict, Field


class DeployResponse(BaseModel):
    """
    Respuesta de POST /api/deploy.

    Atributos:
        slug (str): Identificador publico, ej. "happy-cat-0042".
        url (str): URL completa donde queda publicado el documento.
        qr_code (str): URL de una imagen QR que apunta a `url`. Se serializa
            como "qrCode" (el nombre que espera el frontend).
    """
    model_config = ConfigDict(populate_by_name=True)

    slug: str
    url: str
    qr_code: str = Field(alias="qrCode")


class ErrorResponse(BaseModel):
    """
    Formato uniforme de error: `{"error": "mensaje"}`.

    El mensaje es siempre publico; los detalles internos se loguean.
    """
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"
