"""
PDF Loader Module (Standalone Runnable)

Responsibilities:
- Validate the %PDF signature of raw bytes
- Detect structurally trivial documents (nothing to chunk)
- Open the bytes as a PyMuPDF document

This file CAN be run independently for verification.
"""

import sys
from typing import Optional

import fitz  # PyMuPDF

from config.system_loader import get_extraction_config
from core.errors import InvalidDocumentFormatError
from core.utils.logging_utils import get_component_logger

logger = get_component_logger("PDFLoader", component="extraction")

PDF_SIGNATURE = b"%PDF"
DEFAULT_MIN_DOCUMENT_CHARS = 50


class PDFLoader:
    def __init__(
        self,
        data: bytes,
        filename: Optional[str] = None,
        min_document_chars: int = DEFAULT_MIN_DOCUMENT_CHARS,
    ):
        self.data = data or b""
        self.filename = filename or "<bytes>"
        self.min_document_chars = min_document_chars

    @classmethod
    def from_config(cls, data: bytes, filename: Optional[str] = None) -> "PDFLoader":
        cfg = get_extraction_config()
        return cls(
            data,
            filename,
            min_document_chars=int(cfg.get("min_document_chars", DEFAULT_MIN_DOCUMENT_CHARS)),
        )

    # ------------------------------
    # Step 1: Validate Signature
    # ------------------------------
    def validate(self):
        logger.info(f"STEP 1: Validating PDF signature ({self.filename}, {len(self.data)} bytes)")

        if not self.data.startswith(PDF_SIGNATURE):
            logger.error(f"Not a PDF: {self.filename}")
            raise InvalidDocumentFormatError(f"Invalid PDF format: {self.filename}")

    # ------------------------------
    # Step 2: Trivial Document Check
    # ------------------------------
    def is_trivial(self) -> bool:
        """True when the raw bytes are too short to hold any content."""
        text = self.data.decode("latin-1").strip()
        trivial = len(text) < self.min_document_chars

        if trivial:
            logger.info(f"Document is structurally empty ({len(text)} chars)")
        return trivial

    # ------------------------------
    # Step 3: Open Document
    # ------------------------------
    def open(self) -> fitz.Document:
        logger.info("STEP 3: Opening PDF document...")
        try:
            doc = fitz.open(stream=self.data, filetype="pdf")
            logger.info(f"PDF loaded successfully | Pages: {doc.page_count}")
            return doc
        except Exception:
            logger.exception(f"Failed to open PDF: {self.filename}")
            raise


# ============================================================
# Standalone Runner
# ============================================================
def main():
    if len(sys.argv) < 2:
        logger.error("Usage: python -m core.pdf.loader <path_to_pdf>")
        sys.exit(1)

    pdf_path = sys.argv[1]

    with open(pdf_path, "rb") as f:
        loader = PDFLoader.from_config(f.read(), pdf_path)

    loader.validate()

    if loader.is_trivial():
        sys.exit(0)

    with loader.open() as doc:
        logger.info(f"Metadata: {doc.metadata}")


if __name__ == "__main__":
    main()
