"""Text extraction for uploaded notes using PyMuPDF."""

import logging
import re

import pymupdf  # PyMuPDF

from app.services.errors import ValidationError

logger = logging.getLogger(__name__)

# Control characters that Postgres TEXT/VARCHAR cannot store (NUL, etc.)
_ILLEGAL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")

PDF_MIME_TYPE = "application/pdf"
_TEXT_MIME_TYPES = {"application/json", "application/xml", "application/x-yaml"}
_TEXT_EXTENSIONS = (".txt", ".md", ".markdown", ".csv", ".json")


class TextExtractor:
    """Turns uploaded bytes into the plain text stored on a Note."""

    def extract_text(self, data: bytes, mime_type: str, filename: str = "") -> str:
        """
        Extract plain text from an uploaded file.

        Args:
            data: Raw bytes of the upload
            mime_type: Declared content type
            filename: Original filename, used when the type is generic

        Returns:
            Extracted text with control characters removed

        Raises:
            ValidationError: Unsupported type, unreadable PDF, or no text
        """
        mime_type = (mime_type or "").split(";")[0].strip().lower()

        if mime_type == PDF_MIME_TYPE or (
            mime_type in ("", "application/octet-stream") and filename.lower().endswith(".pdf")
        ):
            text = self._extract_pdf(data)
        elif self._is_text(mime_type, filename):
            text = data.decode("utf-8", errors="replace")
        else:
            raise ValidationError(
                f"Unsupported file type: {mime_type or 'unknown'}",
                details={"mime_type": mime_type, "filename": filename},
            )

        text = _ILLEGAL_CHARS.sub("", text)
        if not text.strip():
            raise ValidationError("No text could be extracted from the file.", details={"filename": filename})
        return text

    @staticmethod
    def _is_text(mime_type: str, filename: str) -> bool:
        if mime_type.startswith("text/") or mime_type in _TEXT_MIME_TYPES:
            return True
        return mime_type in ("", "application/octet-stream") and filename.lower().endswith(_TEXT_EXTENSIONS)

    @staticmethod
    def _extract_pdf(data: bytes) -> str:
        try:
            doc = pymupdf.open(stream=data, filetype="pdf")
        except Exception as e:
            logger.warning("Could not open PDF: %s", str(e))
            raise ValidationError("The uploaded file is not a valid PDF.") from e

        try:
            # Combine all pages with double newline separator
            return "\n\n".join(page.get_text() for page in doc)
        finally:
            doc.close()


# Singleton instance
text_extractor = TextExtractor()
