"""PDF utilities for text-layer extraction."""

import io

from pypdf import PdfReader


def extract_pdf_text(pdf_bytes: bytes) -> str:
    """Extract the text layer of a PDF.

    Whitespace-separated runs within a page are joined by single spaces and
    pages are joined by newlines. Scanned PDFs typically yield an empty string.

    Args:
        pdf_bytes: PDF file bytes

    Returns:
        Extracted text, stripped
    """
    reader = PdfReader(io.BytesIO(pdf_bytes))
    pages = []
    for page in reader.pages:
        runs = (page.extract_text() or "").split()
        pages.append(" ".join(runs))
    return "\n".join(pages).strip()


def get_page_count(pdf_bytes: bytes) -> int:
    """Get the total number of pages in a PDF.

    Args:
        pdf_bytes: PDF file bytes

    Returns:
        Number of pages in the PDF
    """
    reader = PdfReader(io.BytesIO(pdf_bytes))
    return len(reader.pages)
