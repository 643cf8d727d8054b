"""
Fallback Line Chunker

Plain line scanner used only when the semantic chunker yields nothing.
Contiguous table lines always stay together in one segment; other text is
cut once its estimate passes the budget.
"""

from typing import List, Optional

from core.utils.logging_utils import get_component_logger
from core.utils.token_estimator import TokenEstimator

logger = get_component_logger("FallbackLineChunker", component="chunking")


def is_table_line(line: str) -> bool:
    stripped = line.strip()
    return stripped.startswith("|") or stripped.count("|") >= 2


class FallbackLineChunker:

    def __init__(self, max_tokens: int = 2000, estimator: Optional[TokenEstimator] = None):
        self.max_tokens = max_tokens
        self.estimator = estimator or TokenEstimator()

    def split(self, content: str) -> List[str]:

        segments: List[str] = []
        text_lines: List[str] = []
        table_lines: List[str] = []

        def close_text():
            if text_lines:
                segments.append("\n".join(text_lines).strip())
                text_lines.clear()

        def close_table():
            if table_lines:
                segments.append("\n".join(table_lines).strip())
                table_lines.clear()

        for line in (content or "").split("\n"):

            if is_table_line(line):
                close_text()
                table_lines.append(line)
                continue

            close_table()

            if not line.strip():
                continue

            text_lines.append(line)
            if self.estimator.estimate("\n".join(text_lines)) > self.max_tokens:
                close_text()

        close_table()
        close_text()

        segments = [s for s in segments if s]
        logger.debug(f"Fallback split produced {len(segments)} segments")
        return segments
