"""
DocChunk: Document Chunking Pipeline

Entry points:
- chunk_markdown(markdown, max_tokens)   markdown -> chunks
- chunk_bytes(data, filename, max_tokens) PDF bytes -> chunks

PDF flow:
  signature check -> table regions + table markdown -> positional text
  -> normalize -> clean text + table markdown -> chunk orchestrator

Usage:
    python -m pipelines.ingest <file.pdf|file.md> [max_tokens] [output.json]
"""

import json
import sys
from dataclasses import dataclass
from typing import List, Optional

from config.system_loader import get_chunking_config, get_extraction_config
from core.chunking.models import Chunk
from core.chunking.orchestrator import ChunkOrchestrator
from core.errors import DocumentChunkingError, DocumentProcessingError
from core.pdf.loader import PDFLoader
from core.pdf.table_extractor import TableRegionExtractor
from core.pdf.text_extractor import PositionalTextExtractor
from core.utils.logging_utils import get_component_logger
from core.utils.text_normalizer import TextNormalizer


# =====================================================
# LOGGER SETUP
# =====================================================

logger = get_component_logger("DocumentChunkingPipeline", component="pipeline")


PROCESSOR_VERSION = "docchunk-1.0.0"

STRATEGIES = ("hybrid", "hierarchical")
MIN_MAX_TOKENS = 100
MAX_MAX_TOKENS = 8000


@dataclass(frozen=True)
class ChunkingOptions:
    """Caller-side settings. strategy is recorded, never interpreted."""

    strategy: str = "hybrid"
    max_tokens: int = 2000

    @classmethod
    def from_config(cls) -> "ChunkingOptions":
        cfg = get_chunking_config()
        return cls(
            strategy=cfg.get("strategy", "hybrid"),
            max_tokens=int(cfg.get("max_tokens", 2000)),
        )


def clamp_max_tokens(value: int, low: int = MIN_MAX_TOKENS, high: int = MAX_MAX_TOKENS) -> int:
    return max(low, min(high, int(value)))


# =====================================================
# MASTER PIPELINE CLASS
# =====================================================

class DocumentChunkingPipeline:

    def __init__(
        self,
        options: Optional[ChunkingOptions] = None,
        table_extractor: Optional[TableRegionExtractor] = None,
        text_extractor: Optional[PositionalTextExtractor] = None,
        normalizer: Optional[TextNormalizer] = None,
        orchestrator: Optional[ChunkOrchestrator] = None,
        min_document_chars: int = 50,
    ):
        self.options = options or ChunkingOptions()
        self.table_extractor = table_extractor or TableRegionExtractor()
        self.text_extractor = text_extractor or PositionalTextExtractor()
        self.normalizer = normalizer or TextNormalizer()
        self.orchestrator = orchestrator or ChunkOrchestrator()
        self.min_document_chars = min_document_chars

        if self.options.strategy not in STRATEGIES:
            logger.warning(f"Unknown chunking strategy: {self.options.strategy}")

    @classmethod
    def from_config(cls) -> "DocumentChunkingPipeline":
        return cls(
            options=ChunkingOptions.from_config(),
            table_extractor=TableRegionExtractor.from_config(),
            text_extractor=PositionalTextExtractor.from_config(),
            orchestrator=ChunkOrchestrator.from_config(),
            min_document_chars=int(get_extraction_config().get("min_document_chars", 50)),
        )

    # =====================================================
    # MARKDOWN ENTRY
    # =====================================================

    def chunk_markdown(self, markdown: str, max_tokens: Optional[int] = None) -> List[Chunk]:

        max_tokens = max_tokens or self.options.max_tokens
        logger.info(f"[PIPELINE] Chunking markdown | strategy={self.options.strategy} | max_tokens={max_tokens}")

        try:
            return self.orchestrator.run(markdown, max_tokens)
        except Exception as exc:
            logger.exception("Markdown chunking failed")
            raise DocumentProcessingError(f"Failed to chunk markdown: {exc}") from exc

    # =====================================================
    # BYTES ENTRY
    # =====================================================

    def chunk_bytes(
        self,
        data: bytes,
        filename: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ) -> List[Chunk]:

        logger.info("=" * 80)
        logger.info(f"DOCUMENT CHUNKING STARTED: {filename or '<bytes>'}")
        logger.info("=" * 80)

        if not data:
            logger.info("Empty input, nothing to chunk")
            return []

        loader = PDFLoader(data, filename, min_document_chars=self.min_document_chars)
        loader.validate()

        if loader.is_trivial():
            return []

        try:
            with loader.open() as doc:

                if doc.page_count == 0:
                    logger.info("Document has no pages")
                    return []

                markdown = self.extract_markdown(doc)

            chunks = self.chunk_markdown(markdown, max_tokens)

        except DocumentChunkingError:
            raise
        except Exception as exc:
            logger.exception(f"Document processing failed: {filename}")
            raise DocumentProcessingError(f"Failed to process {filename or 'document'}: {exc}") from exc

        logger.info(f"DOCUMENT CHUNKING COMPLETED: {len(chunks)} chunks")
        return chunks

    # =====================================================
    # EXTRACTION STEPS
    # =====================================================

    def extract_markdown(self, doc) -> str:

        tables = self.table_extractor.extract(doc)

        tagged = self.text_extractor.extract(doc, tables.regions_by_page)

        # Normalizing leaves all prose on one line. If that line opens like a
        # list item ("1. Introduction ...") the parser reads the whole text as
        # one atomic LIST unit, which is never split however large it is.
        clean = self.normalizer.normalize(tagged)
        logger.info(f"STEP 3: Normalized text {len(tagged)} -> {len(clean)} chars")

        return clean + "\n\n" + tables.markdown


# =====================================================
# RUNNER
# =====================================================

def main():

    if len(sys.argv) < 2:
        logger.warning(
            "Usage: python -m pipelines.ingest <file.pdf|file.md> [max_tokens] [output.json]"
        )
        sys.exit(1)

    path = sys.argv[1]
    pipeline = DocumentChunkingPipeline.from_config()

    max_tokens = pipeline.options.max_tokens
    if len(sys.argv) > 2:
        max_tokens = clamp_max_tokens(sys.argv[2])

    output_path = sys.argv[3] if len(sys.argv) > 3 else "chunks.json"

    try:
        if path.lower().endswith((".md", ".markdown", ".txt")):
            with open(path, "r", encoding="utf-8") as f:
                chunks = pipeline.chunk_markdown(f.read(), max_tokens)
        else:
            with open(path, "rb") as f:
                chunks = pipeline.chunk_bytes(f.read(), path, max_tokens)
    except DocumentChunkingError:
        logger.exception("Chunking failed")
        sys.exit(1)

    for chunk in chunks:
        logger.info(
            f"[{chunk.position}] {chunk.content_type.value:<7} "
            f"tokens={chunk.token_count:<5} section={chunk.section_heading!r}"
        )

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(
            {
                "processor_version": PROCESSOR_VERSION,
                "strategy": pipeline.options.strategy,
                "max_tokens": max_tokens,
                "chunks": [c.to_dict() for c in chunks],
            },
            f,
            indent=2,
            ensure_ascii=False,
        )

    logger.info(f"[OUTPUT] {len(chunks)} chunks saved to {output_path}")


if __name__ == "__main__":
    main()
