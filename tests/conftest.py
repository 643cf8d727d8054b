"""Shared fixtures: temp log dir and in-memory fake documents."""

import os
import tempfile

# must run before any core module creates its loggers
os.environ.setdefault("DOCCHUNK_LOG_DIR", tempfile.mkdtemp(prefix="docchunk-logs-"))

import pytest


class FakeTable:
    def __init__(self, bbox, rows):
        self.bbox = bbox
        self.rows = rows

    def extract(self):
        return self.rows


class FakeTableFinder:
    def __init__(self, tables):
        self.tables = tables


class FakePage:
    """
    Minimal stand-in for a PyMuPDF page.

    lines: (x, y, text) triples, one span each; or a list of span tuples
    for multi-span lines.
    """

    def __init__(self, lines=(), tables=(), fail_tables=False):
        self.lines = list(lines)
        self.tables = list(tables)
        self.fail_tables = fail_tables
        self.strategies = []

    def find_tables(self, strategy="lines"):
        self.strategies.append(strategy)
        if self.fail_tables:
            raise RuntimeError("corrupt content stream")
        return FakeTableFinder(self.tables)

    def get_text(self, option="text"):
        assert option == "dict"
        lines = []
        for line in self.lines:
            spans = line if isinstance(line, list) else [line]
            lines.append({
                "spans": [{"origin": (x, y), "text": text} for x, y, text in spans]
            })
        return {"blocks": [{"type": 0, "lines": lines}]}


class FakeDocument:
    def __init__(self, pages):
        self.pages = list(pages)

    @property
    def page_count(self):
        return len(self.pages)

    def load_page(self, index):
        return self.pages[index]


@pytest.fixture
def make_page():
    return FakePage


@pytest.fixture
def make_table():
    return FakeTable


@pytest.fixture
def make_document():
    def _make(*pages):
        return FakeDocument(pages)
    return _make
