"""
Markdown Unit Parser

Scans markdown line by line and cuts it into SemanticUnits:
HEADING, TABLE, LIST, CODE and PARAGRAPH. Blank lines never become units.
"""

import re
from typing import List

from core.chunking.content_type import CODE_FENCE, TABLE_SEPARATOR_PATTERN
from core.chunking.models import SemanticUnit, UnitKind

HEADING_PATTERN = re.compile(r"^(#{1,6})[ \t]+(.*)$")
LIST_ITEM_PATTERN = re.compile(r"^[ \t]*(?:[-*+]|\d+\.)[ \t]+")


def is_blank(line: str) -> bool:
    return not line.strip()


def is_heading(line: str) -> bool:
    return HEADING_PATTERN.match(line) is not None


def is_list_item(line: str) -> bool:
    return LIST_ITEM_PATTERN.match(line) is not None


def is_code_fence(line: str) -> bool:
    return line.strip().startswith(CODE_FENCE)


def is_table_separator(line: str) -> bool:
    return TABLE_SEPARATOR_PATTERN.match(line) is not None


def is_structural(line: str) -> bool:
    return is_heading(line) or is_list_item(line) or is_code_fence(line) or "|" in line


class MarkdownUnitParser:

    def parse(self, markdown: str) -> List[SemanticUnit]:
        if not markdown:
            return []

        lines = markdown.replace("\r\n", "\n").split("\n")
        units: List[SemanticUnit] = []

        i = 0
        while i < len(lines):
            line = lines[i]

            if is_blank(line):
                i += 1
                continue

            if is_heading(line):
                units.append(self._heading(line))
                i += 1
                continue

            if "|" in line:
                end = self._table_end(lines, i)
                if end > i:
                    units.append(SemanticUnit(UnitKind.TABLE, self._join_lines(lines, i, end)))
                    i = end
                    continue

            if is_list_item(line):
                end = self._list_end(lines, i)
                units.append(SemanticUnit(UnitKind.LIST, self._join_lines(lines, i, end)))
                i = end
                continue

            if is_code_fence(line):
                end = self._code_end(lines, i)
                units.append(SemanticUnit(UnitKind.CODE, self._join_lines(lines, i, end)))
                i = end
                continue

            end = self._paragraph_end(lines, i)
            units.append(SemanticUnit(UnitKind.PARAGRAPH, self._join_words(lines, i, end)))
            i = end

        return units

    # -------------------------------------------------
    # Unit boundaries
    # -------------------------------------------------

    def _heading(self, line: str) -> SemanticUnit:
        match = HEADING_PATTERN.match(line)
        hashes, text = match.groups()
        text = text.strip() or line.strip()
        return SemanticUnit(
            UnitKind.HEADING,
            line.strip(),
            heading_level=len(hashes),
            heading_text=text,
        )

    def _table_end(self, lines: List[str], start: int) -> int:
        """Index after the table starting at start, or start when there is no table."""
        if start + 1 >= len(lines) or not is_table_separator(lines[start + 1]):
            return start

        i = start + 2
        while i < len(lines) and "|" in lines[i]:
            i += 1
        return i

    def _list_end(self, lines: List[str], start: int) -> int:
        i = start + 1
        while i < len(lines):
            line = lines[i]
            if is_blank(line):
                # one blank line is allowed between items
                if i + 1 < len(lines) and is_list_item(lines[i + 1]):
                    i += 1
                    continue
                break
            if not is_list_item(line):
                break
            i += 1
        return i

    def _code_end(self, lines: List[str], start: int) -> int:
        i = start + 1
        while i < len(lines) and not is_code_fence(lines[i]):
            i += 1
        return i + 1 if i < len(lines) else len(lines)

    def _paragraph_end(self, lines: List[str], start: int) -> int:
        i = start + 1
        while i < len(lines):
            line = lines[i]
            if is_blank(line) or is_structural(line):
                break
            i += 1
        return i

    # -------------------------------------------------
    # Content builders
    # -------------------------------------------------

    def _join_lines(self, lines: List[str], start: int, end: int) -> str:
        return "\n".join(lines[start:end]).strip()

    def _join_words(self, lines: List[str], start: int, end: int) -> str:
        return " ".join(line.strip() for line in lines[start:end]).strip()
