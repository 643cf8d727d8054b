"""Tests for content type classification."""

import pytest

from core.chunking.content_type import (
    ContentTypeClassifier,
    has_code,
    has_heading,
    has_list,
    has_table,
    reduce_matches,
)
from core.chunking.models import ContentType

TABLE = "| A | B |\n|---|---|\n| 1 | 2 |"


class TestPredicates:
    """Tests for the individual structural checks."""

    def test_table_needs_separator_row(self):
        """Pipes alone are not a table; a dash separator row is."""
        assert has_table(TABLE)
        assert has_table("| a |\n| :--- | ---: |")
        assert not has_table("a | b | c")
        assert not has_table("|   |   |")

    def test_heading_needs_space(self):
        """Headings are 1-6 hashes followed by whitespace."""
        assert has_heading("# Title")
        assert has_heading("text\n###### Deep")
        assert not has_heading("#hashtag")
        assert not has_heading("####### Seven")

    def test_bullet_and_numbered_lists(self):
        """Bullet markers and N. both count as list lines."""
        assert has_list("- item")
        assert has_list("* item")
        assert has_list("+ item")
        assert has_list("12. item")
        assert not has_list("-item")
        assert not has_list("3.14 is pi")

    def test_code_fence(self):
        """A triple backtick marks code."""
        assert has_code("```python\nprint(1)\n```")
        assert not has_code("`inline`")


class TestReduceMatches:
    """Tests for the none/one/many reduction."""

    def test_none(self):
        """No match is TEXT."""
        assert reduce_matches([]) is ContentType.TEXT

    def test_one(self):
        """A single match wins."""
        assert reduce_matches([ContentType.LIST]) is ContentType.LIST

    def test_many(self):
        """Two or more matches are MIXED."""
        assert reduce_matches([ContentType.TABLE, ContentType.CODE]) is ContentType.MIXED


class TestContentTypeClassifier:
    """Tests for ContentTypeClassifier."""

    @pytest.mark.parametrize("text", [None, ""])
    def test_empty_is_text(self, text):
        """Null and empty input classify as TEXT."""
        assert ContentTypeClassifier().classify(text) is ContentType.TEXT

    @pytest.mark.parametrize("text, expected", [
        ("Just a sentence.", ContentType.TEXT),
        (TABLE, ContentType.TABLE),
        ("## Section", ContentType.HEADING),
        ("- a\n- b", ContentType.LIST),
        ("```\ncode\n```", ContentType.CODE),
        ("# Title\n\n" + TABLE, ContentType.MIXED),
        ("- a\n\n```\ncode\n```", ContentType.MIXED),
    ])
    def test_classify(self, text, expected):
        """Each structure maps to its type; combinations are MIXED."""
        assert ContentTypeClassifier().classify(text) is expected

    def test_classification_is_stable(self):
        """Repeated calls on the same text agree."""
        classifier = ContentTypeClassifier()
        text = "# Title\n\nSome text\n\n- item"
        assert {classifier.classify(text) for _ in range(5)} == {ContentType.MIXED}

    def test_custom_predicates(self):
        """The predicate list can be replaced."""
        classifier = ContentTypeClassifier(predicates=[(has_code, ContentType.CODE)])
        assert classifier.classify("# Title") is ContentType.TEXT
        assert classifier.matches("```") == [ContentType.CODE]
