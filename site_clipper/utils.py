"""site_clipper.utils: Нормализация адресов, извлечение домена и отсев ссылок на файлы."""

from __future__ import annotations

from typing import FrozenSet, Sequence
from urllib.parse import urlsplit, urlunsplit

from site_clipper.logger import logger

__all__: Sequence[str] = (
    "ASSET_EXTENSIONS",
    "normalize_url",
    "extract_domain",
    "is_asset_url",
    "is_http_url",
    "strip_query_and_fragment",
)

#: Расширения путей, которые не являются HTML-документами.
ASSET_EXTENSIONS: FrozenSet[str] = frozenset(
    {
        # документы
        ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx", ".odt", ".rtf",
        # архивы
        ".zip", ".rar", ".tar", ".gz", ".7z", ".bz2",
        # изображения
        ".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg", ".bmp", ".ico",
        # аудио и видео
        ".mp3", ".mp4", ".avi", ".mov", ".wav", ".webm", ".ogg",
        # стили, скрипты, данные
        ".css", ".js", ".json", ".xml", ".rss", ".csv",
    }
)


def normalize_url(url: str) -> str:
    """Канонический ключ адреса: нижний регистр, без query/fragment и без завершающего слеша.

    Путь ``/`` сохраняется как есть, пустой путь приводится к ``/``.
    Результат идемпотентен: ``normalize_url(normalize_url(x)) == normalize_url(x)``.
    """
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        logger.debug("Unparseable URL kept as-is: %s", url)
        return url.strip().lower()

    path = parts.path
    if parts.netloc:
        path = path.rstrip("/") or "/"
    else:
        # без хоста urlunsplit превратил бы "//x" в сетевой адрес
        if path.startswith("//"):
            path = "/" + path.lstrip("/")
        return (f"{parts.scheme}:{path}" if parts.scheme else path).lower()
    return urlunsplit((parts.scheme, parts.netloc, path, "", "")).lower()


def extract_domain(url: str) -> str:
    """Возвращает hostname в нижнем регистре или пустую строку, если адрес не разбирается."""
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""


def is_http_url(url: str) -> bool:
    """Проверяет, что адрес использует схему http или https."""
    try:
        return urlsplit(url).scheme.lower() in ("http", "https")
    except ValueError:
        return False


def is_asset_url(url: str) -> bool:
    """True, если путь адреса оканчивается известным расширением не-документа."""
    try:
        path = urlsplit(url).path.lower()
    except ValueError:
        return False
    dot = path.rfind(".")
    if dot == -1 or "/" in path[dot:]:
        return False
    return path[dot:] in ASSET_EXTENSIONS


def strip_query_and_fragment(url: str) -> str:
    """Убирает query и fragment, остальные части адреса не меняются."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
