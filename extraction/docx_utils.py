"""DOCX text extraction."""

import io

import docx


def extract_docx_text(docx_bytes: bytes) -> str:
    """Return paragraph and table text of a .docx file, one block per line."""
    document = docx.Document(io.BytesIO(docx_bytes))

    lines = [p.text for p in document.paragraphs if p.text.strip()]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                lines.append(" | ".join(cells))

    return "\n".join(lines).strip()
