"""
Resume text extraction from uploaded files using PyMuPDF (no poppler dependency).
"""
import logging

import fitz  # PyMuPDF

from ..exceptions import InputError

logger = logging.getLogger(__name__)

CORRUPTED_PDF_MESSAGE = (
    "The PDF file appears to be corrupted or invalid. Please try uploading a different PDF file."
)

# PyMuPDF / MuPDF messages that mean the upload itself is broken
_CORRUPTION_MARKERS = ("bad xref", "broken document", "cannot open", "no objects found", "format error")


def pdf_to_text(pdf_bytes: bytes) -> str:
    """
    Extract plain text from every page of a PDF.

    Args:
        pdf_bytes: Raw PDF file bytes

    Returns:
        Page texts joined by blank lines (may be empty for scanned PDFs)

    Raises:
        InputError if the bytes are not a readable PDF
    """
    try:
        pdf_document = fitz.open(stream=pdf_bytes, filetype="pdf")
    except (fitz.FileDataError, RuntimeError, ValueError) as e:
        message = str(e).lower()
        logger.warning(f"Failed to open PDF: {e}")
        if isinstance(e, fitz.FileDataError) or any(marker in message for marker in _CORRUPTION_MARKERS):
            raise InputError(f"Unreadable PDF: {e}", CORRUPTED_PDF_MESSAGE) from e
        raise InputError(f"Failed to open PDF: {e}", "Could not read the uploaded resume file.") from e

    try:
        if pdf_document.page_count == 0:
            # MuPDF repairs some garbage into an empty document instead of failing
            raise InputError("PDF has no pages", CORRUPTED_PDF_MESSAGE)
        pages = [page.get_text() for page in pdf_document]
    finally:
        pdf_document.close()

    return "\n\n".join(text.strip() for text in pages if text and text.strip())


def resume_file_to_text(content: bytes, filename: str = "", content_type: str = "") -> str:
    """Plain-text uploads are decoded directly, everything else goes through the PDF path."""
    filename = (filename or "").lower()
    if content_type == "text/plain" or filename.endswith(".txt"):
        return content.decode("utf-8", errors="replace")
    return pdf_to_text(content)
