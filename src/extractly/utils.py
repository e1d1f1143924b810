"""Utility functions for the Extractly SDK."""

import base64
import binascii
from pathlib import Path

from extractly.errors import ValidationError

MIME_TYPES = {
    ".pdf": "application/pdf",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
    ".heic": "image/heic",
}

SUPPORTED_EXTENSIONS = set(MIME_TYPES)

# Leading bytes of each supported format
_SIGNATURES = [
    (b"%PDF", "application/pdf"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"II*\x00", "image/tiff"),
    (b"MM\x00*", "image/tiff"),
]


def is_supported_file(path: str | Path) -> bool:
    """Check if a file path has a supported extension."""
    return Path(path).suffix.lower() in SUPPORTED_EXTENSIONS


def get_file_extension(filename: str) -> str:
    """Get the lowercase file extension from a filename."""
    return Path(filename).suffix.lower()


def guess_mime_type(data: bytes) -> str | None:
    """Guess the MIME type of file contents from their first bytes."""
    for signature, mime_type in _SIGNATURES:
        if data.startswith(signature):
            return mime_type
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[4:12] in (b"ftypheic", b"ftypheix", b"ftypmif1"):
        return "image/heic"
    return None


def extension_for_mime_type(mime_type: str) -> str:
    """First extension registered for a MIME type."""
    for extension, known in MIME_TYPES.items():
        if known == mime_type:
            return extension
    return ""


def decode_base64(data: str | bytes) -> bytes:
    """Decode a base64 encoded document, ignoring line breaks."""
    if isinstance(data, str):
        data = "".join(data.split())
    else:
        data = b"".join(data.split())
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError(f"Invalid base64 data: {exc}") from exc
