"""
Table Region Extractor (Standalone Runnable)

Responsibilities:
- Detect ruled (grid) tables on every page with PyMuPDF find_tables()
- Record each table's page + bounding box for the text extractor
- Render every table to markdown
- Skip pages whose content cannot be analyzed

This file CAN be run independently for verification.
"""

import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import fitz  # PyMuPDF

from config.system_loader import get_extraction_config
from core.pdf.geometry import BoundingBox, TableRegion
from core.pdf.table_renderer import TableMarkdownRenderer
from core.utils.logging_utils import get_component_logger

logger = get_component_logger("TableRegionExtractor", component="extraction")


@dataclass
class DetectedTable:
    region: TableRegion
    rows: List[List[Optional[str]]]
    markdown: str


@dataclass
class TableExtractionResult:
    tables: List[DetectedTable] = field(default_factory=list)
    regions_by_page: Dict[int, List[TableRegion]] = field(default_factory=dict)
    skipped_pages: List[int] = field(default_factory=list)

    @property
    def markdown(self) -> str:
        return "".join(t.markdown for t in self.tables)

    def regions_for(self, page_number: int) -> List[TableRegion]:
        return self.regions_by_page.get(page_number, [])


class TableRegionExtractor:

    def __init__(
        self,
        strategy: str = "lines",
        renderer: Optional[TableMarkdownRenderer] = None,
    ):
        self.strategy = strategy
        self.renderer = renderer or TableMarkdownRenderer()

    @classmethod
    def from_config(cls) -> "TableRegionExtractor":
        cfg = get_extraction_config()
        return cls(
            strategy=cfg.get("table_strategy", "lines"),
            renderer=TableMarkdownRenderer(min_rows=int(cfg.get("min_table_rows", 2))),
        )

    # ------------------------------------------------------------
    # Main Extraction
    # ------------------------------------------------------------
    def extract(self, doc) -> TableExtractionResult:
        """
        Scan every page of an open document, in page order.

        Pages are numbered from 1. A page that fails detection or rendering
        contributes nothing and is listed in skipped_pages.
        """
        logger.info(f"STEP 1: Detecting tables ({doc.page_count} pages, strategy={self.strategy})")
        result = TableExtractionResult()

        for index in range(doc.page_count):
            page_number = index + 1

            try:
                page_tables = self._extract_page(doc.load_page(index), page_number)
            except Exception:
                logger.warning(f"PAGE {page_number}: table detection failed, skipping", exc_info=True)
                result.skipped_pages.append(page_number)
                continue

            if page_tables:
                logger.debug(f"PAGE {page_number}: {len(page_tables)} tables")
                result.tables.extend(page_tables)
                result.regions_by_page[page_number] = [t.region for t in page_tables]

        logger.info(
            f"Tables found: {len(result.tables)} | "
            f"pages with tables: {len(result.regions_by_page)} | "
            f"skipped pages: {result.skipped_pages}"
        )
        return result

    def _extract_page(self, page, page_number: int) -> List[DetectedTable]:
        found = page.find_tables(strategy=self.strategy)
        tables = []

        for table in found.tables:
            rows = table.extract()
            tables.append(DetectedTable(
                region=TableRegion(page_number, BoundingBox.from_sequence(tuple(table.bbox))),
                rows=rows,
                markdown=self.renderer.render(rows),
            ))

        return tables


# ============================================================
# Standalone Runner
# ============================================================
def main():
    if len(sys.argv) < 2:
        logger.error("Usage: python -m core.pdf.table_extractor <path_to_pdf>")
        sys.exit(1)

    with fitz.open(sys.argv[1]) as doc:
        result = TableRegionExtractor.from_config().extract(doc)

    for table in result.tables:
        logger.info(f"PAGE {table.region.page}: {table.region.bounds}")
    logger.info(result.markdown)


if __name__ == "__main__":
    main()
