"""Media type classification for asset files."""

from typing import Optional
from urllib.parse import unquote, urlparse

from mediasync.models import MediaKind

__all__ = [
    "IMAGE_EXTENSIONS",
    "VIDEO_EXTENSIONS",
    "filename_from_url",
    "extension_of",
    "display_name",
    "classify_media",
]

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".webp", ".gif"})
VIDEO_EXTENSIONS = frozenset({".mp4", ".mov", ".webm", ".m4v"})


def filename_from_url(url: Optional[str]) -> str:
    """Return the percent-decoded last path segment of a URL."""
    if not url:
        return ""
    try:
        path = urlparse(url).path
    except ValueError:
        return url.split("/")[-1]
    return unquote(path.split("/")[-1])


def extension_of(name: Optional[str]) -> str:
    """Lowercased trailing extension including the dot, or ''."""
    name = str(name or "").lower()
    dot = name.rfind(".")
    if dot == -1:
        return ""
    ext = name[dot:]
    return ext if ext[1:].isalnum() and ext[1:].isascii() else ""


def display_name(name: Optional[str], url: Optional[str]) -> str:
    """Asset name, or the URL's filename when the name is empty."""
    return name or filename_from_url(url)


def classify_media(declared_type: Optional[str], filename: Optional[str]) -> MediaKind:
    """Pick the catalog media kind for a file.

    A declared ``image/`` or ``video/`` MIME prefix wins; otherwise the file
    extension decides. Anything unrecognised is sent as EXTERNAL_VIDEO, which
    the catalog accepts for arbitrary external references.
    """
    mime = (declared_type or "").strip().lower()
    if mime.startswith("image/"):
        return MediaKind.IMAGE
    if mime.startswith("video/"):
        return MediaKind.VIDEO

    ext = extension_of(filename)
    if ext in IMAGE_EXTENSIONS:
        return MediaKind.IMAGE
    if ext in VIDEO_EXTENSIONS:
        return MediaKind.VIDEO
    return MediaKind.EXTERNAL_VIDEO
