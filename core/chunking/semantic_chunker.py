"""
Semantic Chunker

Phase A: MarkdownUnitParser cuts markdown into semantic units.
Phase B: the units are folded left to right into token-bounded chunks.

Grouping rules:
- TABLE / LIST / CODE units are atomic and never split
- Headings set the section context; level 1-2 headings (or a pending chunk
  above heading_flush_ratio of the budget) start a fresh chunk
- Oversized paragraphs are split at sentence boundaries
- A heading left alone at the end merges into the previous chunk
"""

import re
import sys
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from config.system_loader import get_chunking_config
from core.chunking.content_type import ContentTypeClassifier
from core.chunking.models import Chunk, ChunkingState, SemanticUnit, UnitKind
from core.chunking.unit_parser import MarkdownUnitParser
from core.utils.logging_utils import get_component_logger
from core.utils.token_estimator import TokenEstimator

# =====================================================
# LOGGER SETUP
# =====================================================

logger = get_component_logger("SemanticChunker", component="chunking")


DEFAULT_MAX_TOKENS = 2000
DEFAULT_HEADING_FLUSH_RATIO = 0.2
DEFAULT_LARGE_ATOMIC_RATIO = 0.8

UNIT_SEPARATOR = "\n\n"
SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


@dataclass(frozen=True)
class _ChunkDraft:
    content: str
    section_heading: Optional[str] = None
    heading_level: Optional[int] = None


Step = Tuple[ChunkingState, Tuple[_ChunkDraft, ...]]


class SemanticChunker:

    # =====================================================
    # INITIALIZATION
    # =====================================================

    def __init__(
        self,
        estimator: Optional[TokenEstimator] = None,
        classifier: Optional[ContentTypeClassifier] = None,
        parser: Optional[MarkdownUnitParser] = None,
        heading_flush_ratio: float = DEFAULT_HEADING_FLUSH_RATIO,
        large_atomic_ratio: float = DEFAULT_LARGE_ATOMIC_RATIO,
    ):
        self.estimator = estimator or TokenEstimator()
        self.classifier = classifier or ContentTypeClassifier()
        self.parser = parser or MarkdownUnitParser()
        self.heading_flush_ratio = heading_flush_ratio
        self.large_atomic_ratio = large_atomic_ratio

        if heading_flush_ratio != DEFAULT_HEADING_FLUSH_RATIO:
            logger.warning(
                f"heading_flush_ratio={heading_flush_ratio} "
                f"(default {DEFAULT_HEADING_FLUSH_RATIO}): chunk boundaries will drift"
            )
        if large_atomic_ratio != DEFAULT_LARGE_ATOMIC_RATIO:
            logger.warning(
                f"large_atomic_ratio={large_atomic_ratio} "
                f"(default {DEFAULT_LARGE_ATOMIC_RATIO}): chunk boundaries will drift"
            )

    @classmethod
    def from_config(cls, estimator: Optional[TokenEstimator] = None) -> "SemanticChunker":
        cfg = get_chunking_config()
        return cls(
            estimator=estimator,
            heading_flush_ratio=float(cfg.get("heading_flush_ratio", DEFAULT_HEADING_FLUSH_RATIO)),
            large_atomic_ratio=float(cfg.get("large_atomic_ratio", DEFAULT_LARGE_ATOMIC_RATIO)),
        )

    # =====================================================
    # PIPELINE ENTRY
    # =====================================================

    def chunk(self, markdown: str, max_tokens: int = DEFAULT_MAX_TOKENS) -> List[Chunk]:

        if not markdown or not markdown.strip():
            return []

        units = self.parse(markdown)
        logger.debug(f"Parsed {len(units)} semantic units")

        chunks = self.group(units, max_tokens)
        logger.info(f"Semantic chunking produced {len(chunks)} chunks (max_tokens={max_tokens})")
        return chunks

    # =====================================================
    # PHASE A: Units
    # =====================================================

    def parse(self, markdown: str) -> List[SemanticUnit]:
        return self.parser.parse(markdown)

    # =====================================================
    # PHASE B: Grouping
    # =====================================================

    def group(self, units: Sequence[SemanticUnit], max_tokens: int = DEFAULT_MAX_TOKENS) -> List[Chunk]:

        state = ChunkingState()
        drafts: List[_ChunkDraft] = []

        for unit in units:
            state, emitted = self._step(state, unit, max_tokens)
            drafts.extend(emitted)

        drafts = self._finish(state, drafts)
        return self._materialize(drafts)

    def _step(self, state: ChunkingState, unit: SemanticUnit, max_tokens: int) -> Step:
        logger.debug(f"Unit {unit.kind.value} ({len(unit.content)} chars)")

        if unit.kind is UnitKind.HEADING:
            return self._on_heading(state, unit, max_tokens)
        if unit.kind.is_atomic:
            return self._on_atomic(state, unit, max_tokens)
        return self._on_paragraph(state, unit, max_tokens)

    # -------------------------------------------------
    def _on_atomic(self, state: ChunkingState, unit: SemanticUnit, max_tokens: int) -> Step:
        emitted: Tuple[_ChunkDraft, ...] = ()

        if state.pending and self._tokens_with(state, unit) > max_tokens:
            state, emitted = self._flush(state)

        state = self._add(state, unit)

        if self.estimator.estimate(unit.content) > self.large_atomic_ratio * max_tokens:
            state, closed = self._flush(state)
            emitted += closed

        return state, emitted

    # -------------------------------------------------
    def _on_heading(self, state: ChunkingState, unit: SemanticUnit, max_tokens: int) -> Step:
        emitted: Tuple[_ChunkDraft, ...] = ()

        top_level = unit.heading_level is not None and unit.heading_level <= 2
        if state.pending and (state.pending_tokens > self.heading_flush_ratio * max_tokens or top_level):
            state, emitted = self._flush(state)

        state = self._add(state, unit)
        state = replace(state, section_heading=unit.heading_text, heading_level=unit.heading_level)
        return state, emitted

    # -------------------------------------------------
    def _on_paragraph(self, state: ChunkingState, unit: SemanticUnit, max_tokens: int) -> Step:
        emitted: Tuple[_ChunkDraft, ...] = ()

        if state.pending and self._tokens_with(state, unit) > max_tokens:
            state, emitted = self._flush(state)

        if self.estimator.estimate(unit.content) <= max_tokens:
            return self._add(state, unit), emitted

        return self._split_paragraph(state, unit, max_tokens, emitted)

    def _split_paragraph(
        self,
        state: ChunkingState,
        unit: SemanticUnit,
        max_tokens: int,
        emitted: Tuple[_ChunkDraft, ...],
    ) -> Step:
        sentences = [s for s in SENTENCE_BOUNDARY.split(unit.content) if s]
        logger.debug(f"Splitting oversized paragraph into {len(sentences)} sentences")

        packed: List[str] = []
        for sentence in sentences:
            if packed and self.estimator.estimate(" ".join(packed + [sentence])) > max_tokens:
                emitted += (self._draft(" ".join(packed), state),)
                packed = []
            packed.append(sentence)

        if packed:
            state = self._add(state, SemanticUnit(UnitKind.PARAGRAPH, " ".join(packed)))

        return state, emitted

    # -------------------------------------------------
    def _finish(self, state: ChunkingState, drafts: List[_ChunkDraft]) -> List[_ChunkDraft]:
        if not state.pending:
            return drafts

        lone_heading = len(state.pending) == 1 and state.pending[0].kind is UnitKind.HEADING
        if lone_heading and drafts:
            last = drafts[-1]
            merged = replace(last, content=last.content + UNIT_SEPARATOR + state.pending[0].content)
            return drafts[:-1] + [merged]

        _, closed = self._flush(state)
        return drafts + list(closed)

    # =====================================================
    # STATE HELPERS
    # =====================================================

    def _join(self, units: Sequence[SemanticUnit]) -> str:
        return UNIT_SEPARATOR.join(u.content for u in units)

    def _tokens_with(self, state: ChunkingState, unit: SemanticUnit) -> int:
        return self.estimator.estimate(self._join(state.pending + (unit,)))

    def _add(self, state: ChunkingState, unit: SemanticUnit) -> ChunkingState:
        pending = state.pending + (unit,)
        return replace(state, pending=pending, pending_tokens=self.estimator.estimate(self._join(pending)))

    def _flush(self, state: ChunkingState) -> Step:
        if not state.pending:
            return state, ()

        heading = next((u for u in state.pending if u.kind is UnitKind.HEADING), None)
        if heading is not None:
            draft = _ChunkDraft(self._join(state.pending), heading.heading_text, heading.heading_level)
        else:
            draft = self._draft(self._join(state.pending), state)

        return replace(state, pending=(), pending_tokens=0), (draft,)

    def _draft(self, content: str, state: ChunkingState) -> _ChunkDraft:
        return _ChunkDraft(content, state.section_heading, state.heading_level)

    def _materialize(self, drafts: Sequence[_ChunkDraft]) -> List[Chunk]:
        return [
            Chunk(
                content=draft.content,
                content_type=self.classifier.classify(draft.content),
                token_count=self.estimator.estimate(draft.content),
                position=position,
                section_heading=draft.section_heading,
                heading_level=draft.heading_level,
            )
            for position, draft in enumerate(drafts)
        ]


# ============================================================
# STANDALONE RUNNER
# ============================================================

def main():

    if len(sys.argv) < 2:
        logger.warning("Usage: python -m core.chunking.semantic_chunker <file.md> [max_tokens]")
        sys.exit(1)

    with open(sys.argv[1], "r", encoding="utf-8") as f:
        markdown = f.read()

    max_tokens = int(sys.argv[2]) if len(sys.argv) > 2 else DEFAULT_MAX_TOKENS

    for chunk in SemanticChunker().chunk(markdown, max_tokens):
        logger.info(
            f"[{chunk.position}] {chunk.content_type.value} "
            f"tokens={chunk.token_count} section={chunk.section_heading!r}"
        )


if __name__ == "__main__":
    main()
