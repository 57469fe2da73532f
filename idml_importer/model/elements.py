"""In-memory representation of parsed spread and story content."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass(frozen=True, slots=True)
class Position:
    """Page coordinates in the document's own units."""

    x: float
    y: float


ORIGIN = Position(0.0, 0.0)


@dataclass(frozen=True, slots=True)
class ImageCandidate:
    """A placed image and the decoded file name of its link resource."""

    position: Position
    basename: str


@dataclass(slots=True)
class SpreadLayout:
    """Text frame anchors and image placements found in one spread."""

    text_frames: Dict[str, Position] = field(default_factory=dict)
    images: List[ImageCandidate] = field(default_factory=list)

    def add_text_frame(self, story_id: str, position: Position) -> None:
        """Register a frame for ``story_id``; within one spread the last frame wins."""
        if story_id:
            self.text_frames[story_id] = position


@dataclass(frozen=True, slots=True)
class Paragraph:
    """One paragraph style range with body text and URL-styled text kept apart."""

    style: str
    text: str
    url: str = ""


@dataclass(frozen=True, slots=True)
class ParsedStory:
    """Structured content of a single story document."""

    id: str = ""
    paragraphs: Tuple[Paragraph, ...] = ()
    paragraph_styles: Tuple[str, ...] = ()
    has_url_style: bool = False

    @property
    def text_all(self) -> str:
        """Body text of every paragraph joined by newlines."""
        return "\n".join(paragraph.text for paragraph in self.paragraphs)

    @property
    def is_empty(self) -> bool:
        return not self.id and not self.paragraphs

    @classmethod
    def from_paragraphs(cls, story_id: str, paragraphs: List[Paragraph], has_url_style: bool) -> "ParsedStory":
        """Build a story, collecting distinct non-empty style names in order."""
        styles = tuple(dict.fromkeys(p.style for p in paragraphs if p.style))
        return cls(
            id=story_id,
            paragraphs=tuple(paragraphs),
            paragraph_styles=styles,
            has_url_style=has_url_style,
        )
