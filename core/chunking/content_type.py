"""
Content Type Classifier

Labels a block of markdown with a ContentType.

Four independent structural checks run over the whole text; the result is
reduced by one rule: none fired -> TEXT, exactly one -> its type,
more than one -> MIXED.
"""

import re
from typing import Callable, List, Optional, Sequence, Tuple

from core.chunking.models import ContentType

# a separator row: only pipes, dashes, colons and spaces, with at least one dash
TABLE_SEPARATOR_PATTERN = re.compile(r"^\s*\|(?=[-:| ]*-)[-:| ]+\|\s*$", re.MULTILINE)
HEADING_LINE_PATTERN = re.compile(r"^#{1,6}[ \t]+", re.MULTILINE)
LIST_LINE_PATTERN = re.compile(r"^[ \t]*(?:[-*+]|\d+\.)[ \t]+", re.MULTILINE)
CODE_FENCE = "```"

Predicate = Callable[[str], bool]


def has_table(text: str) -> bool:
    return "|" in text and TABLE_SEPARATOR_PATTERN.search(text) is not None


def has_heading(text: str) -> bool:
    return HEADING_LINE_PATTERN.search(text) is not None


def has_list(text: str) -> bool:
    return LIST_LINE_PATTERN.search(text) is not None


def has_code(text: str) -> bool:
    return CODE_FENCE in text


# order decides which type wins when exactly one check fires
DEFAULT_PREDICATES: Tuple[Tuple[Predicate, ContentType], ...] = (
    (has_table, ContentType.TABLE),
    (has_heading, ContentType.HEADING),
    (has_list, ContentType.LIST),
    (has_code, ContentType.CODE),
)


def reduce_matches(matches: Sequence[ContentType]) -> ContentType:
    if len(matches) > 1:
        return ContentType.MIXED
    return matches[0] if matches else ContentType.TEXT


class ContentTypeClassifier:

    def __init__(self, predicates: Sequence[Tuple[Predicate, ContentType]] = DEFAULT_PREDICATES):
        self.predicates = tuple(predicates)

    def matches(self, text: str) -> List[ContentType]:
        return [tag for predicate, tag in self.predicates if predicate(text)]

    def classify(self, text: Optional[str]) -> ContentType:
        if not text:
            return ContentType.TEXT
        return reduce_matches(self.matches(text))
