"""
Table Markdown Renderer

Turns the rows of one detected table into a pipe table wrapped in
[START_TABLE] / [END_TABLE] markers. Tables with fewer than two rows are
treated as detection noise and render as an empty string.
"""

import re
from typing import Optional, Sequence

TABLE_START = "[START_TABLE]"
TABLE_END = "[END_TABLE]"

_LINE_BREAKS = re.compile(r"[\r\n]+")
# stray page numbers often get picked up as a cell
_PAGE_NUMBER_CELL = re.compile(r"^\d{1,3}$")

Row = Sequence[Optional[str]]


class TableMarkdownRenderer:

    def __init__(self, min_rows: int = 2):
        self.min_rows = min_rows

    def render(self, rows: Sequence[Row]) -> str:
        if not rows or len(rows) < self.min_rows:
            return ""

        columns = len(rows[0])
        lines = [TABLE_START]

        for index, row in enumerate(rows):
            lines.append(self.render_row(row))
            if index == 0:
                lines.append("| " + " | ".join(["---"] * columns) + " |")

        lines.append(TABLE_END)
        return "\n" + "\n".join(lines) + "\n"

    def render_row(self, row: Row) -> str:
        return "| " + " | ".join(self.clean_cell(cell) or " " for cell in row) + " |"

    @staticmethod
    def clean_cell(cell: Optional[str]) -> str:
        if cell is None:
            return ""

        text = _LINE_BREAKS.sub(" ", str(cell)).replace("|", "\\|").strip()
        if _PAGE_NUMBER_CELL.match(text):
            return ""
        return text
