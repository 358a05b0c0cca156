"""URL helpers: validation, scheme coercion and file-type checks."""

from __future__ import annotations

import re
from typing import Any, Optional

from .validators import SettingsLike, is_url


_KNOWN_SCHEME = re.compile(r"^(f|ht)tps?://", re.IGNORECASE)

VALID_IMAGE_TYPES: frozenset[str] = frozenset(
    {
        "apng",
        "bmp",
        "gif",
        "ico",
        "cur",
        "jpg",
        "jpeg",
        "jfif",
        "pjpeg",
        "pjp",
        "png",
        "svg",
        "tif",
        "tiff",
        "webp",
    }
)

# matched by substring, see is_this_a_non_html_url
NON_HTML_EXTENSIONS: tuple[str, ...] = (
    ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
    ".3gp", ".avi", ".mov", ".mp4", ".m4v", ".m4a", ".mp3", ".mkv",
    ".ogv", ".ogm", ".ogg", ".oga", ".webm", ".wav",
    ".bmp", ".gif", ".jpg", ".jpeg", ".png", ".webp",
    ".zip", ".rar", ".tar", ".tar.gz", ".tgz", ".tar.bz2", ".tbz2",
    ".txt", ".pdf",
)


def is_url_valid(url: Any, settings: SettingsLike = None) -> bool:
    """Return True if ``url`` is a non-empty string accepted by ``is_url``.

    Never raises: non-string input and unusable settings both yield False.
    """
    if not isinstance(url, str) or not url:
        return False
    try:
        return is_url(url, settings)
    except (TypeError, ValueError):
        return False


def coerce_url(url: str) -> str:
    """Prefix ``http://`` unless the URL already has an http(s)/ftp(s) scheme."""
    return url if _KNOWN_SCHEME.match(url) else f"http://{url}"


def validate_and_format_url(url: Any, settings: SettingsLike = None) -> dict[str, Optional[str]]:
    """Return ``{"url": <coerced url>}`` for a valid URL, ``{"url": None}`` otherwise."""
    return {"url": coerce_url(url) if is_url_valid(url, settings) else None}


def find_image_type_from_url(url: str) -> str:
    extension = url.split(".")[-1]
    return extension.split("?")[0]


def is_image_type_valid(image_type: str) -> bool:
    return image_type in VALID_IMAGE_TYPES


def is_this_a_non_html_url(url: str) -> bool:
    """Return True if the URL's extension marks it as a document/media/archive.

    The check is substring containment of each known extension in
    ``"." + extension`` (so ``.docs`` matches ``.doc``), not equality.
    """
    extension = f".{find_image_type_from_url(url)}"
    return any(ext in extension for ext in NON_HTML_EXTENSIONS)
