"""Input validation: text length, file type and file size checks."""

import os
from typing import Any, Optional, Tuple

from core.errors import ValidationError


MIN_TEXT_LENGTH = 10

FORMAT_TXT = "txt"
FORMAT_PDF = "pdf"
FORMAT_DOCX = "docx"
FORMAT_IMAGE = "image"

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# extension -> (format, canonical mime type)
EXTENSION_FORMATS = {
    ".txt": (FORMAT_TXT, "text/plain"),
    ".pdf": (FORMAT_PDF, "application/pdf"),
    ".docx": (FORMAT_DOCX, DOCX_MIME_TYPE),
    ".png": (FORMAT_IMAGE, "image/png"),
    ".jpg": (FORMAT_IMAGE, "image/jpeg"),
    ".jpeg": (FORMAT_IMAGE, "image/jpeg"),
    ".gif": (FORMAT_IMAGE, "image/gif"),
    ".webp": (FORMAT_IMAGE, "image/webp"),
}

MIME_FORMATS = {
    "text/plain": FORMAT_TXT,
    "application/pdf": FORMAT_PDF,
    DOCX_MIME_TYPE: FORMAT_DOCX,
    "image/png": FORMAT_IMAGE,
    "image/jpeg": FORMAT_IMAGE,
    "image/jpg": FORMAT_IMAGE,
    "image/gif": FORMAT_IMAGE,
    "image/webp": FORMAT_IMAGE,
}

ACCEPTED_EXTENSIONS = [ext.lstrip(".") for ext in EXTENSION_FORMATS]


def validate_text_length(text: Any) -> str:
    """Return the trimmed text, or raise ValidationError if it is too short."""
    s = text.strip() if isinstance(text, str) else ""
    if len(s) < MIN_TEXT_LENGTH:
        raise ValidationError(
            ValidationError.TOO_SHORT,
            f"text has {len(s)} characters (minimum {MIN_TEXT_LENGTH})",
        )
    return s


def resolve_file_format(file_name: str, mime_type: Optional[str] = None) -> Tuple[str, str]:
    """Map an upload to (format, mime type) by extension, then by MIME type."""
    ext = os.path.splitext(file_name or "")[1].lower()
    if ext in EXTENSION_FORMATS:
        return EXTENSION_FORMATS[ext]

    mime = (mime_type or "").split(";")[0].strip().lower()
    if mime in MIME_FORMATS:
        return MIME_FORMATS[mime], mime

    raise ValidationError(
        ValidationError.UNSUPPORTED_TYPE,
        f"unsupported upload {file_name!r} ({mime_type or 'no mime type'})",
    )


def check_file_size(size_bytes: int, file_format: str, *, max_document_bytes: int, max_image_bytes: int) -> None:
    """Raise ValidationError when the upload exceeds the ceiling for its format."""
    limit = max_image_bytes if file_format == FORMAT_IMAGE else max_document_bytes
    if size_bytes > limit:
        limit_mb = limit / (1024 * 1024)
        kind = "images" if file_format == FORMAT_IMAGE else "documents"
        raise ValidationError(
            ValidationError.TOO_LARGE,
            f"{size_bytes} bytes exceeds {limit} byte limit for {kind}",
            user_message=f"File size too large. Please upload {kind} smaller than {limit_mb:g}MB.",
        )
