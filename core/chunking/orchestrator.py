"""
DocChunk: Chunking Orchestrator

Markdown entry point. Connects:
- Semantic chunking
- Line fallback (only when semantic chunking yields nothing)
- Validation
"""

from typing import List, Optional

from config.system_loader import get_chunking_config
from core.chunking.content_type import ContentTypeClassifier
from core.chunking.fallback_chunker import FallbackLineChunker
from core.chunking.models import Chunk
from core.chunking.semantic_chunker import DEFAULT_MAX_TOKENS, SemanticChunker
from core.chunking.validator import ChunkValidator
from core.utils.logging_utils import get_component_logger
from core.utils.token_estimator import TokenEstimator

logger = get_component_logger("ChunkOrchestrator", component="chunking")


class ChunkOrchestrator:

    def __init__(
        self,
        chunker: Optional[SemanticChunker] = None,
        estimator: Optional[TokenEstimator] = None,
        classifier: Optional[ContentTypeClassifier] = None,
        fallback_max_tokens: Optional[int] = None,
    ):
        self.estimator = estimator or TokenEstimator()
        self.classifier = classifier or ContentTypeClassifier()
        self.chunker = chunker or SemanticChunker(estimator=self.estimator, classifier=self.classifier)
        self.fallback_max_tokens = fallback_max_tokens
        self.validator = ChunkValidator(self.estimator)

    @classmethod
    def from_config(cls) -> "ChunkOrchestrator":
        cfg = get_chunking_config()
        estimator = TokenEstimator()
        fallback = cfg.get("fallback_max_tokens")
        return cls(
            chunker=SemanticChunker.from_config(estimator=estimator),
            estimator=estimator,
            fallback_max_tokens=int(fallback) if fallback else None,
        )

    # =====================================================
    # MAIN RUN
    # =====================================================

    def run(self, markdown: str, max_tokens: int = DEFAULT_MAX_TOKENS) -> List[Chunk]:

        if not markdown or not markdown.strip():
            logger.info("Empty markdown, nothing to chunk")
            return []

        logger.info("=" * 60)
        logger.info(f"CHUNKING STARTED ({len(markdown)} chars, max_tokens={max_tokens})")

        # -----------------------------------------
        # STEP 1: Semantic chunking
        # -----------------------------------------

        chunks = self.chunker.chunk(markdown, max_tokens)

        # -----------------------------------------
        # STEP 2: Fallback
        # -----------------------------------------

        if not chunks:
            logger.warning("Semantic chunker returned no chunks, using line fallback")
            chunks = self._fallback(markdown, max_tokens)

        # -----------------------------------------
        # STEP 3: Validate
        # -----------------------------------------

        report = self.validator.validate(chunks)
        if report["status"] != "PASS":
            logger.error(f"Chunk validation failed: {len(report['errors'])} errors")

        logger.info(f"CHUNKING COMPLETED ({len(chunks)} chunks)")
        logger.info("=" * 60)

        return chunks

    def _fallback(self, markdown: str, max_tokens: int) -> List[Chunk]:
        splitter = FallbackLineChunker(self.fallback_max_tokens or max_tokens, self.estimator)
        return [
            Chunk(
                content=segment,
                content_type=self.classifier.classify(segment),
                token_count=self.estimator.estimate(segment),
                position=position,
            )
            for position, segment in enumerate(splitter.split(markdown))
        ]
