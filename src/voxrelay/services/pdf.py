"""PDF text extraction."""

import io
import logging

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from voxrelay.errors import PDFExtractionError

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"


def is_pdf(data: bytes) -> bool:
    """Whether ``data`` starts with the PDF header."""
    return data.lstrip()[:5] == PDF_MAGIC


def extract_pdf_text(data: bytes) -> str:
    """Extract the text of every page, joined with newlines.

    Args:
        data: Raw PDF bytes.

    Returns:
        Extracted text (may be empty for image-only documents).

    Raises:
        PDFExtractionError: If the document cannot be read.
    """
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PdfReadError, ValueError, OSError) as e:
        raise PDFExtractionError(f"Failed to read PDF: {e}") from e

    logger.info("Extracted text from %d PDF page(s)", len(pages))
    return "\n".join(p.strip() for p in pages if p.strip())
