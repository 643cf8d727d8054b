"""
Positional Text Extractor (Standalone Runnable)

Responsibilities:
- Walk page spans via get_text("dict")
- Rebuild natural reading order (top-to-bottom, left-to-right)
- Tag every span whose origin falls inside a table region with
  [[LIXO_INICIO]] / [[LIXO_FIM]] markers

Tagged spans are NOT removed here; TextNormalizer deletes them.
"""

import sys
from typing import Dict, List, Optional, Sequence, Tuple

import fitz  # PyMuPDF

from config.system_loader import get_extraction_config
from core.pdf.geometry import DEFAULT_TABLE_MARGIN, TableRegion
from core.utils.logging_utils import get_component_logger
from core.utils.text_normalizer import TABLE_TEXT_END, TABLE_TEXT_START

logger = get_component_logger("PositionalTextExtractor", component="extraction")

PAGE_SEPARATOR = "\n\n"


class PositionalTextExtractor:

    def __init__(self, margin: float = DEFAULT_TABLE_MARGIN, line_tolerance: float = 2.0):
        self.margin = margin
        self.line_tolerance = line_tolerance

    @classmethod
    def from_config(cls) -> "PositionalTextExtractor":
        cfg = get_extraction_config()
        return cls(
            margin=float(cfg.get("table_margin", DEFAULT_TABLE_MARGIN)),
            line_tolerance=float(cfg.get("line_tolerance", 2.0)),
        )

    # ------------------------------------------------------------
    # Main Extraction
    # ------------------------------------------------------------
    def extract(self, doc, regions_by_page: Optional[Dict[int, List[TableRegion]]] = None) -> str:
        regions_by_page = regions_by_page or {}
        logger.info(f"STEP 2: Extracting positional text ({doc.page_count} pages)")

        pages = []
        in_table = False

        for index in range(doc.page_count):
            page_number = index + 1
            regions = regions_by_page.get(page_number, [])

            page = doc.load_page(index)
            text, in_table = self.extract_page(page, regions, in_table)
            logger.debug(f"PAGE {page_number}: {len(text)} characters, {len(regions)} table regions")
            pages.append(text)

        text = PAGE_SEPARATOR.join(pages)

        # a table running to the very end of the document
        if in_table:
            text += TABLE_TEXT_END

        logger.info(f"Extracted text length: {len(text)}")
        return text

    def extract_page(
        self,
        page,
        regions: Sequence[TableRegion],
        in_table: bool = False,
    ) -> Tuple[str, bool]:
        """
        Render one page in reading order.

        in_table carries the open/closed marker state across pages; the
        updated state is returned with the text.
        """
        rows = []

        for row in self._reading_order(page):
            parts = []
            for line in row:
                pieces = []
                for span in line.get("spans", []):
                    x, y = span["origin"]
                    inside = any(region.contains(x, y, self.margin) for region in regions)

                    if inside and not in_table:
                        pieces.append(TABLE_TEXT_START)
                    elif in_table and not inside:
                        pieces.append(TABLE_TEXT_END)
                    in_table = inside

                    pieces.append(span.get("text", ""))
                parts.append("".join(pieces))
            rows.append(" ".join(parts))

        return "\n".join(rows), in_table

    # ------------------------------------------------------------
    # Reading Order
    # ------------------------------------------------------------
    def _reading_order(self, page) -> List[List[dict]]:
        lines = []
        for block in page.get_text("dict").get("blocks", []):
            for line in block.get("lines", []):
                spans = line.get("spans", [])
                if spans:
                    x, y = spans[0]["origin"]
                    lines.append((y, x, line))

        lines.sort(key=lambda item: (item[0], item[1]))

        rows: List[List[Tuple[float, float, dict]]] = []
        for item in lines:
            if rows and abs(item[0] - rows[-1][0][0]) <= self.line_tolerance:
                rows[-1].append(item)
            else:
                rows.append([item])

        return [[line for _, _, line in sorted(row, key=lambda item: item[1])] for row in rows]


# ============================================================
# Standalone Runner
# ============================================================
def main():
    if len(sys.argv) < 2:
        logger.error("Usage: python -m core.pdf.text_extractor <path_to_pdf>")
        sys.exit(1)

    with fitz.open(sys.argv[1]) as doc:
        text = PositionalTextExtractor.from_config().extract(doc)

    print(text)


if __name__ == "__main__":
    main()
