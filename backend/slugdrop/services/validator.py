"""
Modulo de validacion de subidas.

Antes de aceptar un archivo para deploy verificamos, en orden de costo:

1. Tamano: no puede superar MAX_FILE_SIZE (10 MB por defecto).
2. Tipo: el Content-Type declarado es "text/html" O el nombre termina en
   ".html". Basta con una de las dos (algunos navegadores y clientes CLI
   mandan "application/octet-stream" para archivos locales).

La ausencia del campo `file` la detecta la ruta antes de llamar aqui.

El nombre original del archivo NUNCA se usa para construir el key de S3
(eso sale solo del slug); solo se guarda como metadata informativa, por
eso `sanitize_filename` se limita a quedarse con el basename.

Igual que en el resto del servicio, devolvemos un `ValidationResult` en
vez de lanzar excepciones: el caller decide como traducirlo a HTTP.
"""

from dataclasses import dataclass

HTML_MEDIA_TYPE = "text/html"
HTML_EXTENSION = ".html"


@dataclass
class ValidationResult:
    """
    Resultado de validar una subida.

    Atributos:
        is_valid (bool): True si el archivo paso todas las validaciones.
        error (str): Motivo del rechazo (vacio si is_valid es True). Es un
            mensaje publico, se devuelve tal cual al cliente.
        filename (str): Nombre original saneado, para la metadata.
    """
    is_valid: bool
    error: str = ""
    filename: str = ""


def size_limit_message(max_size: int) -> str:
    return f"File size exceeds {max_size // (1024 * 1024)}MB limit"


def sanitize_filename(filename: str | None) -> str:
    """
    Reduce el nombre enviado por el cliente a su basename.

        "../../etc/passwd"        -> "passwd"
        "C:\\Users\\ana\\pag.html" -> "pag.html"
        None / ""                 -> "unknown"

    No usamos os.path.basename porque en Linux no trata "\\" como separador.
    """
    name = (filename or "").replace("\\", "/").rsplit("/", 1)[-1].strip()
    return name or "unknown"


def is_html(filename: str, content_type: str | None) -> bool:
    # "text/html; charset=utf-8" -> "text/html"
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    return media_type == HTML_MEDIA_TYPE or filename.lower().endswith(HTML_EXTENSION)


def validate_upload(
    data: bytes,
    filename: str | None,
    content_type: str | None,
    max_size: int,
) -> ValidationResult:
    """
    Valida el contenido y el nombre de un archivo subido.

    Parametros:
        data (bytes): Contenido leido. El caller lee como maximo
            max_size + 1 bytes, asi que un archivo demasiado grande se
            detecta sin cargarlo completo.
        filename (str | None): Nombre enviado en la parte multipart.
        content_type (str | None): Content-Type declarado de la parte.
        max_size (int): Tamano maximo en bytes.

    Ejemplos:
        >>> validate_upload(b"<h1>hola</h1>", "index.html", "text/html", 1024)
        ValidationResult(is_valid=True, error='', filename='index.html')

        >>> validate_upload(b"MZ...", "virus.exe", "application/x-msdownload", 1024).error
        'Only .html files are allowed'
    """
    safe_name = sanitize_filename(filename)

    if len(data) > max_size:
        return ValidationResult(
            is_valid=False,
            error=size_limit_message(max_size),
            filename=safe_name,
        )

    if not is_html(safe_name, content_type):
        return ValidationResult(
            is_valid=False,
            error="Only .html files are allowed",
            filename=safe_name,
        )

    return ValidationResult(is_valid=True, filename=safe_name)
