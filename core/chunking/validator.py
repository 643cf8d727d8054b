"""
Chunk Validator (Standalone)

Purpose:
- Check a chunk list against the output contract
- Catch silent failures early
- Report, never raise

Checks:
- positions are exactly 0..n-1
- token_count matches the estimate of content
- content is never blank
- TABLE chunks carry a header-separator row

This file CAN be run independently on a JSON chunk dump.
"""

import json
import sys
from typing import Any, Dict, List, Optional, Sequence

from core.chunking.content_type import TABLE_SEPARATOR_PATTERN
from core.chunking.models import Chunk, ContentType
from core.utils.logging_utils import get_component_logger
from core.utils.token_estimator import TokenEstimator

logger = get_component_logger("ChunkValidator", component="chunking")


class ChunkValidator:
    """Stateless: every validate() call builds its own error and warning lists."""

    def __init__(self, estimator: Optional[TokenEstimator] = None):
        self.estimator = estimator or TokenEstimator()

    # -------------------------------------------------
    # ENTRY
    # -------------------------------------------------
    def validate(self, chunks: Sequence[Chunk]) -> Dict[str, Any]:
        errors: List[str] = []
        warnings: List[str] = []

        logger.debug(f"Validating {len(chunks)} chunks")

        self.validate_positions(chunks, errors)
        for chunk in chunks:
            self.validate_chunk(chunk, errors, warnings)

        return self.report(errors, warnings)

    # -------------------------------------------------
    # POSITION CONTRACT
    # -------------------------------------------------
    def validate_positions(self, chunks: Sequence[Chunk], errors: List[str]):
        positions = [c.position for c in chunks]
        if positions != list(range(len(chunks))):
            errors.append(f"Positions are not 0..{len(chunks) - 1}: {positions}")

    # -------------------------------------------------
    # PER-CHUNK CHECKS
    # -------------------------------------------------
    def validate_chunk(self, chunk: Chunk, errors: List[str], warnings: List[str]):
        idx = chunk.position

        if not chunk.content or not chunk.content.strip():
            errors.append(f"Chunk {idx} has empty content")

        expected = self.estimator.estimate(chunk.content)
        if chunk.token_count != expected:
            errors.append(f"Chunk {idx} token_count {chunk.token_count} != estimate {expected}")

        if chunk.content_type is ContentType.TABLE:
            separators = len(TABLE_SEPARATOR_PATTERN.findall(chunk.content))
            if separators == 0:
                errors.append(f"Chunk {idx} is TABLE but has no header-separator row")
            elif separators > 1:
                warnings.append(f"Chunk {idx} holds {separators} tables")

    # -------------------------------------------------
    # FINAL REPORT
    # -------------------------------------------------
    def report(self, errors: List[str], warnings: List[str]) -> Dict[str, Any]:

        for e in errors:
            logger.error(f"Validation error: {e}")

        for w in warnings:
            logger.warning(f"Validation warning: {w}")

        status = "PASS" if not errors else "FAIL"
        logger.info(f"Validation status: {status}")

        return {
            "status": status,
            "errors": list(errors),
            "warnings": list(warnings),
        }


def chunk_from_dict(data: Dict[str, Any]) -> Chunk:
    return Chunk(
        content=data["content"],
        content_type=ContentType(data["content_type"]),
        token_count=int(data["token_count"]),
        position=int(data["position"]),
        section_heading=data.get("section_heading"),
        heading_level=data.get("heading_level"),
    )


# ============================================================
# STANDALONE RUNNER
# ============================================================
def main():
    if len(sys.argv) < 2:
        logger.warning("Usage: python -m core.chunking.validator <chunks.json>")
        sys.exit(1)

    with open(sys.argv[1], "r", encoding="utf-8") as f:
        data = json.load(f)

    # accepts a bare list or the pipeline runner output
    items = data["chunks"] if isinstance(data, dict) else data
    chunks = [chunk_from_dict(item) for item in items]

    result = ChunkValidator().validate(chunks)
    sys.exit(0 if result["status"] == "PASS" else 1)


if __name__ == "__main__":
    main()
