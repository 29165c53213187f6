"""
File <-> ImagePayload conversion for API adapters.

Architectural role:
- Turn an uploaded file (path or in-memory bytes) into a validated
  `ImagePayload`.
- Enforce size/extension/content constraints before any operation runs.
- Write result payloads back to disk for the CLI.

Processing lifecycle (load):
1. Resolve the path (`~` expansion, canonicalization).
2. Reject missing files and unsupported extensions.
3. Reject content above `MAX_UPLOAD_BYTES`.
4. Identify the image with Pillow; the MIME type comes from the detected
   format, not from the file name.
5. Base64-encode into an `ImagePayload`.

Error handling strategy:
- Every rejection raises `ValidationError`; nothing is swallowed.

Side effects:
- `save_image_payload` creates the parent directory when missing.
"""

import io
import os
from typing import Optional

from PIL import Image, UnidentifiedImageError

from imagelab.core.errors import ValidationError
from imagelab.core.types import ImagePayload
from imagelab.image.provider_config import (
    ALLOWED_MIME_TYPES,
    MAX_UPLOAD_BYTES,
    MAX_UPLOAD_MB,
)


# ============================================================
# CONFIG
# ============================================================

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp"}

MIME_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


class PayloadTooLarge(ValidationError):
    """Upload exceeds `MAX_UPLOAD_MB`."""


# ============================================================
# LOAD
# ============================================================

def load_image_file(path: str) -> ImagePayload:
    """Read an image file from disk into an `ImagePayload`."""
    normalized = _normalize_path(path)
    if not normalized:
        raise ValidationError("Invalid file path")

    if not os.path.isfile(normalized):
        raise ValidationError(f"File does not exist: {path}")

    _validate_extension(normalized)

    if os.path.getsize(normalized) > MAX_UPLOAD_BYTES:
        raise PayloadTooLarge(_too_large_message())

    with open(normalized, "rb") as f:
        raw = f.read()

    return load_image_bytes(raw, filename=normalized)


def load_image_bytes(raw: bytes, filename: Optional[str] = None) -> ImagePayload:
    """
    Validate in-memory image bytes and wrap them as an `ImagePayload`.

    Validation behavior:
    - Rejects empty input and input above the upload limit.
    - Rejects unsupported extensions when `filename` is given.
    - Rejects content Pillow cannot identify or whose format is not PNG,
      JPEG or WebP.
    """
    if not raw:
        raise ValidationError("Uploaded file is empty")

    if len(raw) > MAX_UPLOAD_BYTES:
        raise PayloadTooLarge(_too_large_message())

    if filename:
        _validate_extension(filename)

    mime_type = detect_mime_type(raw)
    if mime_type not in ALLOWED_MIME_TYPES:
        raise ValidationError(f"Unsupported image type: {mime_type}")

    return ImagePayload.from_bytes(raw, mime_type)


def detect_mime_type(raw: bytes) -> str:
    """Return the MIME type of image bytes as identified by Pillow."""
    try:
        with Image.open(io.BytesIO(raw)) as img:
            image_format = img.format
    except (UnidentifiedImageError, OSError) as err:
        raise ValidationError("File is not a readable image") from err

    mime_type = Image.MIME.get(image_format or "")
    if not mime_type:
        raise ValidationError(f"Unsupported image format: {image_format}")
    return mime_type


def check_payload_size(image: ImagePayload) -> None:
    """Reject payloads whose decoded size exceeds the upload limit."""
    if image.approx_size_bytes() > MAX_UPLOAD_BYTES:
        raise PayloadTooLarge(_too_large_message())


# ============================================================
# SAVE
# ============================================================

def default_output_name(operation: Optional[str], image: ImagePayload) -> str:
    """`processed_<operation>.<ext>` with the extension taken from the MIME type."""
    ext = MIME_EXTENSIONS.get(image.mime_type.lower(), ".png")
    return f"processed_{operation or 'image'}{ext}"


def save_image_payload(image: ImagePayload, path: str) -> str:
    """Write decoded image bytes to `path` and return the absolute path."""
    normalized = _normalize_path(path)
    if not normalized:
        raise ValidationError("Invalid output path")

    parent = os.path.dirname(normalized)
    if parent:
        os.makedirs(parent, exist_ok=True)

    with open(normalized, "wb") as f:
        f.write(image.decode())

    return normalized


# ============================================================
# VALIDATION
# ============================================================

def _normalize_path(path: str) -> Optional[str]:
    """Expand and canonicalize a path; return `None` for empty input."""
    if not path:
        return None
    expanded = os.path.expanduser(path)
    return os.path.realpath(expanded)


def _validate_extension(path: str) -> None:
    _, ext = os.path.splitext(path)
    if ext.lower() not in ALLOWED_EXTENSIONS:
        raise ValidationError("Unsupported file type")


def _too_large_message() -> str:
    return f"Please upload an image smaller than {MAX_UPLOAD_MB:g}MB."
