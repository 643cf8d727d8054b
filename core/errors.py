"""
DocChunk: Error Types

Raised by the byte-level entry point and the chunking orchestrator.
Per-page extraction faults never surface here; they are logged and skipped.
"""


class DocumentChunkingError(Exception):
    """Base class for every failure raised by the chunking core."""


class InvalidDocumentFormatError(DocumentChunkingError):
    """Input bytes do not carry a recognizable document signature."""


class DocumentProcessingError(DocumentChunkingError):
    """Unexpected failure while extracting, parsing or grouping a document."""
