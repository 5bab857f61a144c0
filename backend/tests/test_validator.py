import pytest

from slugdrop.services.validator import sanitize_filename, validate_upload

MAX_SIZE = 10 * 1024 * 1024
HTML = b"<!doctype html><html><body><h1>Hola</h1></body></html>"


def test_valid_html_with_html_type():
    result = validate_upload(HTML, "index.html", "text/html", MAX_SIZE)
    assert result.is_valid is True
    assert result.error == ""
    assert result.filename == "index.html"


def test_html_type_with_charset_parameter():
    result = validate_upload(HTML, "page", "text/html; charset=utf-8", MAX_SIZE)
    assert result.is_valid is True


def test_html_extension_with_generic_type():
    result = validate_upload(HTML, "game.html", "application/octet-stream", MAX_SIZE)
    assert result.is_valid is True


def test_extension_check_is_case_insensitive():
    result = validate_upload(HTML, "GAME.HTML", None, MAX_SIZE)
    assert result.is_valid is True


def test_empty_html_file_is_accepted():
    result = validate_upload(b"", "empty.html", "text/html", MAX_SIZE)
    assert result.is_valid is True


@pytest.mark.parametrize(
    "filename,content_type",
    [
        ("notes.txt", "text/plain"),
        ("script.sh", "text/x-shellscript"),
        ("page.htm", "application/octet-stream"),
        ("index.html.exe", "application/x-msdownload"),
        (None, None),
    ],
)
def test_rejects_non_html(filename, content_type):
    result = validate_upload(HTML, filename, content_type, MAX_SIZE)
    assert result.is_valid is False
    assert result.error == "Only .html files are allowed"


def test_rejects_oversized_file():
    data = b"x" * (MAX_SIZE + 1)
    result = validate_upload(data, "huge.html", "text/html", MAX_SIZE)
    assert result.is_valid is False
    assert "size" in result.error.lower()
    assert "10MB" in result.error


def test_file_at_exact_limit_is_accepted():
    data = b"x" * MAX_SIZE
    result = validate_upload(data, "big.html", "text/html", MAX_SIZE)
    assert result.is_valid is True


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("index.html", "index.html"),
        ("../../etc/passwd", "passwd"),
        ("C:\\Users\\ana\\juego.html", "juego.html"),
        ("dir/", "unknown"),
        ("", "unknown"),
        (None, "unknown"),
    ],
)
def test_sanitize_filename(raw, expected):
    assert sanitize_filename(raw) == expected
