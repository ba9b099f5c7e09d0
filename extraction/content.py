"""Normalize pasted text and uploaded files into quiz source content.

Type and size are checked before any parsing. PDFs prefer local text-layer
extraction and fall back to shipping the raw bytes to Gemini, which performs
its own document understanding (scanned or image-only PDFs). Images are
always shipped raw.
"""

from typing import Optional

from core.config import AppSettings
from core.errors import ExtractionError, ValidationError
from core.logging_utils import get_logger
from core.models import FilePayload, SourceContent, TextContent
from core.validation import (
    FORMAT_DOCX,
    FORMAT_IMAGE,
    FORMAT_PDF,
    FORMAT_TXT,
    MIN_TEXT_LENGTH,
    check_file_size,
    resolve_file_format,
    validate_text_length,
)
from extraction.docx_utils import extract_docx_text
from extraction.pdf_utils import extract_pdf_text


LOGGER = get_logger()


def extract_from_text(text: str) -> TextContent:
    """Validate pasted text and wrap it as source content."""
    return TextContent(value=validate_text_length(text))


def decode_text_bytes(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def extract_from_upload(
    data: bytes,
    file_name: str,
    mime_type: Optional[str] = None,
    *,
    settings: AppSettings,
) -> SourceContent:
    """Convert an uploaded file into TextContent or a FilePayload.

    Raises:
        ValidationError: unsupported type, oversized file, or too little text
            in a TXT file.
        ExtractionError: a DOCX file with no usable text.
    """
    file_format, resolved_mime = resolve_file_format(file_name, mime_type)
    size_bytes = len(data)
    check_file_size(
        size_bytes,
        file_format,
        max_document_bytes=settings.max_document_bytes,
        max_image_bytes=settings.max_image_bytes,
    )

    if file_format == FORMAT_TXT:
        return TextContent(value=validate_text_length(decode_text_bytes(data)))

    if file_format == FORMAT_DOCX:
        return TextContent(value=_extract_docx(data, file_name))

    if file_format == FORMAT_PDF:
        return _extract_pdf(data, file_name, resolved_mime)

    if file_format == FORMAT_IMAGE:
        LOGGER.info("Image upload %s (%d bytes) will be sent to the model as-is", file_name, size_bytes)
        return FilePayload(
            data=data,
            mime_type=resolved_mime,
            file_name=file_name,
            size_bytes=size_bytes,
            is_image=True,
        )

    raise ValidationError(ValidationError.UNSUPPORTED_TYPE, f"unhandled format {file_format!r}")


def _extract_docx(data: bytes, file_name: str) -> str:
    try:
        text = extract_docx_text(data)
    except Exception as e:
        LOGGER.warning("DOCX extraction failed for %s: %s", file_name, e)
        raise ExtractionError(f"Could not read DOCX {file_name!r}: {e}") from e

    if len(text) < MIN_TEXT_LENGTH:
        raise ExtractionError(f"DOCX {file_name!r} is empty or unsupported ({len(text)} characters)")
    return text


def _extract_pdf(data: bytes, file_name: str, mime_type: str) -> SourceContent:
    try:
        text = extract_pdf_text(data)
    except Exception as e:
        LOGGER.warning("PDF text extraction failed for %s, sending raw file instead: %s", file_name, e)
        text = ""
    else:
        if len(text) >= MIN_TEXT_LENGTH:
            LOGGER.info("Extracted %d characters of text from %s", len(text), file_name)
            return TextContent(value=text)
        LOGGER.info("PDF %s has no usable text layer, sending raw file instead", file_name)

    return FilePayload(
        data=data,
        mime_type=mime_type,
        file_name=file_name,
        size_bytes=len(data),
        is_image=False,
    )
