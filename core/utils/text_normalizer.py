"""
Text Normalizer (Standalone)

Repairs text extracted from PDFs, in four ordered passes:
1. Drop every [[LIXO_INICIO]] ... [[LIXO_FIM]] span (table text that is
   already rendered as markdown elsewhere)
2. Rejoin letters split by single spaces ("C a m p" -> "Camp")
3. Join soft line breaks
4. Collapse whitespace and trim

Pass 4 can leave two single letters one space apart ("a  b" -> "a b"),
so pass 2 runs once more at the end. The output is then a fixed point.
"""

import re
import sys
from typing import Optional

from core.utils.logging_utils import get_component_logger

# =====================================================
# LOGGER SETUP
# =====================================================

logger = get_component_logger("TextNormalizer", component="chunking")


TABLE_TEXT_START = "[[LIXO_INICIO]]"
TABLE_TEXT_END = "[[LIXO_FIM]]"

_TAGGED_SPAN = re.compile(
    re.escape(TABLE_TEXT_START) + r".*?" + re.escape(TABLE_TEXT_END),
    re.DOTALL
)

# a space between two single-letter tokens
_SPLIT_LETTERS = re.compile(r"(?<=\b[^\W\d_]) (?=[^\W\d_]\b)")

# line break(s) after a non-terminal character, followed by a letter
_SOFT_BREAK = re.compile(r"(?<=[^.!?:;\n])\n+(?=([^\W\d_]))")

_LONE_NEWLINE = re.compile(r"(?<!\n)\n(?!\n)")

_WHITESPACE_RUN = re.compile(r"\s{2,}")


class TextNormalizer:

    # -------------------------------------------------
    def remove_tagged_spans(self, text: str) -> str:
        logger.debug("Removing tagged table spans")
        return _TAGGED_SPAN.sub("", text)

    # -------------------------------------------------
    def fix_split_words(self, text: str) -> str:
        logger.debug("Rejoining split letters")
        previous = None
        while previous != text:
            previous = text
            text = _SPLIT_LETTERS.sub("", text)
        return text

    # -------------------------------------------------
    def join_broken_lines(self, text: str) -> str:
        logger.debug("Joining soft line breaks")

        def _join(match):
            if match.group(1).islower():
                return " "
            return match.group(0)

        text = _SOFT_BREAK.sub(_join, text)
        return _LONE_NEWLINE.sub(" ", text)

    # -------------------------------------------------
    def clean_whitespace(self, text: str) -> str:
        logger.debug("Collapsing whitespace")
        return _WHITESPACE_RUN.sub(" ", text).strip()

    # -------------------------------------------------
    def normalize(self, text: Optional[str]) -> str:

        if not text:
            return ""

        try:
            logger.debug(f"Normalizing {len(text)} characters")

            text = self.remove_tagged_spans(text)
            text = self.fix_split_words(text)
            text = self.join_broken_lines(text)
            text = self.clean_whitespace(text)
            text = self.fix_split_words(text)

            logger.debug(f"Normalized length: {len(text)}")
            return text

        except Exception:
            logger.exception("Text normalization failed")
            raise


_default_normalizer = TextNormalizer()


def normalize_text(text: Optional[str]) -> str:
    return _default_normalizer.normalize(text)


# ============================================================
# STANDALONE RUNNER
# ============================================================

def main():

    if len(sys.argv) < 2:
        logger.warning("Usage: python -m core.utils.text_normalizer <text_or_txt_file>")
        sys.exit(1)

    input_value = sys.argv[1]

    if input_value.lower().endswith(".txt"):
        with open(input_value, "r", encoding="utf-8") as f:
            input_value = f.read()

    logger.info("NORMALIZED OUTPUT:")
    logger.info(normalize_text(input_value))


if __name__ == "__main__":
    main()
