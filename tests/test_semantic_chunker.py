"""Tests for semantic chunking."""

import pytest

from core.chunking import semantic_chunker
from core.chunking.models import ContentType, SemanticUnit, UnitKind
from core.chunking.semantic_chunker import SENTENCE_BOUNDARY, SemanticChunker
from core.chunking.validator import ChunkValidator
from core.utils.token_estimator import estimate_tokens


def words(n_chars):
    """Plain words with no sentence punctuation, about n_chars long."""
    return ("lorem ipsum dolor " * (n_chars // 18 + 1))[:n_chars].strip()


def big_table(rows=30, cell_width=150):
    lines = ["| Name | Description |", "|---|---|"]
    for i in range(rows - 2):
        lines.append(f"| row {i} | {'x' * cell_width} |")
    return "\n".join(lines)


@pytest.fixture
def chunker():
    return SemanticChunker()


class TestExamples:
    """End-to-end chunking scenarios."""

    def test_heading_paragraph_and_table_fit_in_one_chunk(self, chunker):
        """Small mixed content stays together as one MIXED chunk."""
        md = "# Title\n\nShort paragraph.\n\n| A | B |\n|---|---|\n| 1 | 2 |\n"
        chunks = chunker.chunk(md, 2000)

        assert len(chunks) == 1
        chunk = chunks[0]
        assert chunk.content_type is ContentType.MIXED
        assert chunk.position == 0
        assert chunk.section_heading == "Title"
        assert chunk.heading_level == 1
        assert chunk.content == "# Title\n\nShort paragraph.\n\n| A | B |\n|---|---|\n| 1 | 2 |"
        assert chunk.token_count == estimate_tokens(chunk.content)

    def test_oversized_paragraph_split_at_sentences(self, chunker):
        """A long paragraph is packed sentence by sentence under the budget."""
        sentences = [f"Sentence number {i} talks about topic {i}." for i in range(100)]
        paragraph = " ".join(sentences)
        assert estimate_tokens(paragraph) > 900

        chunks = chunker.chunk(paragraph, 500)

        assert len(chunks) >= 2
        assert all(c.token_count <= 500 for c in chunks)
        assert " ".join(c.content for c in chunks) == paragraph

    def test_large_table_is_never_split(self, chunker):
        """A table above the budget stays whole in its own chunk."""
        table = big_table()
        assert estimate_tokens(table) > 1000

        chunks = chunker.chunk(table, 500)

        assert len(chunks) == 1
        assert chunks[0].content == table
        assert chunks[0].content_type is ContentType.TABLE
        assert chunks[0].token_count == estimate_tokens(table)


class TestAtomicUnits:
    """Tests for table, list and code handling."""

    def test_pending_flushed_before_oversized_table(self, chunker):
        """Text before a table that does not fit goes out first."""
        table = big_table()
        chunks = chunker.chunk("Intro paragraph.\n\n" + table, 500)

        assert [c.content for c in chunks] == ["Intro paragraph.", table]
        assert [c.content_type for c in chunks] == [ContentType.TEXT, ContentType.TABLE]

    def test_large_atomic_unit_closes_its_chunk(self, chunker):
        """Nothing attaches after an atomic unit above 80% of the budget."""
        table = big_table(rows=12)
        assert estimate_tokens(table) > 400

        chunks = chunker.chunk(table + "\n\nTrailing note.", 500)

        assert [c.content for c in chunks] == [table, "Trailing note."]

    def test_small_atomic_unit_keeps_accepting(self, chunker):
        """Text after a moderate list joins the list's chunk."""
        items = "\n".join(f"- item {i} {words(40)}" for i in range(20))
        md = f"{words(1200)}\n\n{items}\n\nClosing words."
        chunks = chunker.chunk(md, 500)

        assert len(chunks) == 2
        assert chunks[1].content.startswith("- item 0")
        assert chunks[1].content.endswith("Closing words.")
        assert chunks[1].content_type is ContentType.LIST

    def test_single_line_opening_like_a_list_stays_whole(self, chunker):
        """One long line starting with "1. " is a single LIST unit."""
        text = "1. Introduction " + " ".join(f"Sentence {i} is here." for i in range(400))
        assert estimate_tokens(text) > 500

        chunks = chunker.chunk(text, 500)

        assert len(chunks) == 1
        assert chunks[0].content == text
        assert chunks[0].content_type is ContentType.LIST

    def test_code_block_kept_whole(self, chunker):
        """Code blocks are atomic even when they contain blank lines."""
        code = "```\n" + "\n\n".join(f"line_{i} = {i}" for i in range(200)) + "\n```"
        chunks = chunker.chunk("Setup.\n\n" + code, 300)

        code_chunks = [c for c in chunks if c.content_type is ContentType.CODE]
        assert len(code_chunks) == 1
        assert code_chunks[0].content == code


class TestHeadings:
    """Tests for heading boundaries and section context."""

    def test_top_level_heading_starts_new_chunk(self, chunker):
        """Level 1-2 headings always flush pending content."""
        chunks = chunker.chunk("Para one.\n\n## Section\n\nPara two.", 2000)

        assert [c.content for c in chunks] == ["Para one.", "## Section\n\nPara two."]
        assert chunks[0].section_heading is None
        assert chunks[1].section_heading == "Section"
        assert chunks[1].heading_level == 2

    def test_low_level_heading_joins_small_chunk(self, chunker):
        """A level 3 heading joins pending content below 20% of the budget."""
        chunks = chunker.chunk("Para one.\n\n### Sub\n\nPara two.", 2000)

        assert len(chunks) == 1
        assert chunks[0].section_heading == "Sub"
        assert chunks[0].heading_level == 3
        assert chunks[0].content_type is ContentType.HEADING

    def test_low_level_heading_flushes_full_chunk(self, chunker):
        """A level 3 heading flushes pending content above 20% of the budget."""
        chunks = chunker.chunk(words(100) + "\n\n### Sub\n\nshort.", 100)

        assert len(chunks) == 2
        assert chunks[1].content == "### Sub\n\nshort."

    def test_section_context_inherited(self, chunker):
        """Chunks without their own heading inherit the latest one."""
        md = "# Title\n\n" + "\n\n".join(words(200) for _ in range(3))
        chunks = chunker.chunk(md, 100)

        assert len(chunks) >= 2
        assert chunks[0].content.startswith("# Title")
        for chunk in chunks[1:]:
            assert chunk.section_heading == "Title"
            assert chunk.heading_level == 1

    def test_trailing_heading_merges_into_previous_chunk(self, chunker):
        """A heading left alone at the end joins the last chunk."""
        chunks = chunker.chunk("Intro text.\n\n## Appendix", 2000)

        assert len(chunks) == 1
        assert chunks[0].content == "Intro text.\n\n## Appendix"
        assert chunks[0].content_type is ContentType.HEADING
        assert chunks[0].token_count == estimate_tokens(chunks[0].content)

    def test_heading_before_oversized_paragraph_stands_alone(self, chunker):
        """A heading is flushed on its own when the next paragraph overflows it."""
        paragraph = " ".join(f"Note {i} is here." for i in range(80))
        chunks = chunker.chunk("### Notes\n\n" + paragraph, 100)

        assert chunks[0].content == "### Notes"
        assert chunks[0].content_type is ContentType.HEADING
        assert len(chunks) >= 3
        for chunk in chunks[1:]:
            assert chunk.content_type is ContentType.TEXT
            assert chunk.section_heading == "Notes"
            assert chunk.heading_level == 3
        assert " ".join(c.content for c in chunks[1:]) == paragraph

    def test_heading_only_document(self, chunker):
        """A lone heading with nothing before it is its own chunk."""
        chunks = chunker.chunk("# Only", 2000)
        assert [c.content for c in chunks] == ["# Only"]


class TestContract:
    """Tests for output invariants."""

    @pytest.mark.parametrize("md", ["", "   \n\n  "])
    def test_empty_input(self, chunker, md):
        """Blank markdown yields no chunks."""
        assert chunker.chunk(md, 2000) == []

    def test_positions_dense_and_counts_exact(self, chunker):
        """Positions run 0..n-1, token counts match, and the budget holds."""
        max_tokens = 200
        md = "\n\n".join([
            "# Report",
            words(900),
            "## Data",
            big_table(rows=10, cell_width=40),
            "- a\n- b\n- c",
            "### Notes",
            " ".join(f"Note {i} is here." for i in range(80)),
            "```\nprint('done')\n```",
            "## Appendix",
            big_table(),
        ])
        chunks = chunker.chunk(md, max_tokens)

        assert [c.position for c in chunks] == list(range(len(chunks)))
        assert ChunkValidator().validate(chunks)["status"] == "PASS"

        splittable = (ContentType.TEXT, ContentType.HEADING, ContentType.MIXED)
        for chunk in chunks:
            if chunk.token_count <= max_tokens:
                continue
            if chunk.content_type in splittable:
                assert not SENTENCE_BOUNDARY.search(chunk.content)
            else:
                assert len(chunker.parse(chunk.content)) == 1

        assert any(
            c.content_type is ContentType.TABLE and c.token_count > max_tokens for c in chunks
        )

    def test_group_accepts_prebuilt_units(self, chunker):
        """Grouping works on units built by hand."""
        units = [
            SemanticUnit(UnitKind.HEADING, "# A", heading_level=1, heading_text="A"),
            SemanticUnit(UnitKind.PARAGRAPH, "Body."),
        ]
        chunks = chunker.group(units, 2000)
        assert [c.content for c in chunks] == ["# A\n\nBody."]

    def test_unsplittable_sentence_kept_whole(self, chunker):
        """A single sentence longer than the budget is not cut."""
        paragraph = words(3000)
        chunks = chunker.chunk(paragraph, 500)
        assert [c.content for c in chunks] == [paragraph]


class TestThresholds:
    """Tests for the configurable flush ratios."""

    def test_non_default_ratio_warns(self, monkeypatch):
        """Changing a ratio logs a drift warning."""
        warnings = []
        monkeypatch.setattr(semantic_chunker.logger, "warning", warnings.append)

        SemanticChunker(heading_flush_ratio=0.5)

        assert len(warnings) == 1
        assert "heading_flush_ratio" in warnings[0]

    def test_default_ratios_do_not_warn(self, monkeypatch):
        """Default ratios log nothing."""
        warnings = []
        monkeypatch.setattr(semantic_chunker.logger, "warning", warnings.append)

        SemanticChunker()

        assert warnings == []

    def test_higher_heading_ratio_keeps_heading_attached(self):
        """Raising heading_flush_ratio lets a level 3 heading join fuller chunks."""
        md = words(100) + "\n\n### Sub\n\nshort."
        chunks = SemanticChunker(heading_flush_ratio=0.5).chunk(md, 100)
        assert len(chunks) == 1
