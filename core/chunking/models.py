"""
Chunking data model.

SemanticUnit and ChunkingState live only inside the chunker; Chunk is the
record handed back to callers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ContentType(str, Enum):
    TEXT = "TEXT"
    TABLE = "TABLE"
    LIST = "LIST"
    CODE = "CODE"
    HEADING = "HEADING"
    MIXED = "MIXED"


class UnitKind(str, Enum):
    HEADING = "HEADING"
    PARAGRAPH = "PARAGRAPH"
    TABLE = "TABLE"
    LIST = "LIST"
    CODE = "CODE"

    @property
    def is_atomic(self) -> bool:
        return self in (UnitKind.TABLE, UnitKind.LIST, UnitKind.CODE)


@dataclass(frozen=True)
class SemanticUnit:
    kind: UnitKind
    content: str
    heading_level: Optional[int] = None
    heading_text: Optional[str] = None


@dataclass(frozen=True)
class Chunk:
    """
    One ordered chunk of a document.

    position is dense from 0; token_count always equals the estimate of
    content. Identity and timestamps belong to the persistence layer.
    """

    content: str
    content_type: ContentType
    token_count: int
    position: int
    section_heading: Optional[str] = None
    heading_level: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "content_type": self.content_type.value,
            "section_heading": self.section_heading,
            "heading_level": self.heading_level,
            "token_count": self.token_count,
            "position": self.position,
        }


@dataclass(frozen=True)
class ChunkingState:
    """
    Carried from unit to unit while grouping.

    pending holds the units of the chunk under construction; section_heading
    and heading_level are the most recent heading seen so far.
    """

    pending: Tuple[SemanticUnit, ...] = field(default_factory=tuple)
    pending_tokens: int = 0
    section_heading: Optional[str] = None
    heading_level: Optional[int] = None
