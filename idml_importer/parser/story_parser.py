"""Parse story XML into ordered, style-tagged paragraphs."""
from __future__ import annotations

import html
import re
from typing import Iterator, List, Optional, Protocol, Sequence, Tuple, Union
from xml.etree import ElementTree as ET

from idml_importer.model.elements import Paragraph, ParsedStory
from idml_importer.utils.logger import get_logger
from idml_importer.utils.text_normalizer import is_url_character_style
from idml_importer.utils.xml_utils import XmlParseError, decode_part, find_attribute, iter_local, local_name, parse_xml

LOGGER = get_logger(__name__)

XmlSource = Union[str, bytes]


class StoryParseStrategy(Protocol):
    """One way of turning story XML into a ``ParsedStory``."""

    def parse(self, story_xml: XmlSource) -> ParsedStory:
        ...


class _ParagraphBuffer:
    """Collects body and URL text for one paragraph style range."""

    def __init__(self) -> None:
        self.text: List[str] = []
        self.url: List[str] = []

    def append(self, value: str, is_url: bool) -> None:
        (self.url if is_url else self.text).append(value)

    def build(self, style: str) -> Paragraph:
        return Paragraph(style=style, text="".join(self.text), url="".join(self.url))


class DomStoryParser:
    """Structured parse; raises ``XmlParseError`` on malformed documents."""

    def parse(self, story_xml: XmlSource) -> ParsedStory:
        root = parse_xml(story_xml)
        # The outer idPkg:Story wrapper has no Self; the inner Story carries the id.
        story_el = next((el for el in root.iter() if local_name(el.tag) == "Story" and "Self" in el.attrib), None)
        if story_el is None:
            return ParsedStory()

        paragraphs: List[Paragraph] = []
        has_url_style = False
        for range_el in iter_local(story_el, "ParagraphStyleRange"):
            buffer = _ParagraphBuffer()
            for run_el in iter_local(range_el, "CharacterStyleRange"):
                is_url = is_url_character_style(run_el.get("AppliedCharacterStyle", ""))
                has_url_style = has_url_style or is_url
                for value in self._run_values(run_el):
                    buffer.append(value, is_url)
            paragraphs.append(buffer.build(range_el.get("AppliedParagraphStyle", "")))

        return ParsedStory.from_paragraphs(story_el.get("Self", ""), paragraphs, has_url_style)

    @staticmethod
    def _run_values(run_el: ET.Element) -> Iterator[str]:
        for child in run_el:
            tag = local_name(child.tag)
            if tag == "Content":
                yield "".join(child.itertext())
            elif tag == "Br":
                yield "\n"


class PatternStoryParser:
    """Fragment-pattern recovery for stories that are not well-formed XML."""

    STORY_PATTERN = re.compile(r"<Story\b([^>]*)>", re.IGNORECASE)
    PARAGRAPH_PATTERN = re.compile(
        r"<ParagraphStyleRange\b([^>]*?)(?:/>|>([\s\S]*?)</ParagraphStyleRange\s*>)", re.IGNORECASE
    )
    RUN_PATTERN = re.compile(
        r"<CharacterStyleRange\b([^>]*?)(?:/>|>([\s\S]*?)</CharacterStyleRange\s*>)", re.IGNORECASE
    )
    TEXT_PATTERN = re.compile(r"<Content\b[^>]*>([\s\S]*?)</Content\s*>|<Br\b[^>]*>", re.IGNORECASE)
    TAG_PATTERN = re.compile(r"<[^>]*>")

    def parse(self, story_xml: XmlSource) -> ParsedStory:
        text = decode_part(story_xml)

        story_id = ""
        for match in self.STORY_PATTERN.finditer(text):
            story_id = find_attribute(match.group(1), "Self") or ""
            if story_id:
                break

        paragraphs: List[Paragraph] = []
        has_url_style = False
        for match in self.PARAGRAPH_PATTERN.finditer(text):
            style = find_attribute(match.group(1), "AppliedParagraphStyle") or ""
            buffer = _ParagraphBuffer()
            for value, is_url in self._segments(match.group(2) or ""):
                has_url_style = has_url_style or is_url
                if value:
                    buffer.append(value, is_url)
            paragraphs.append(buffer.build(style))

        return ParsedStory.from_paragraphs(story_id, paragraphs, has_url_style)

    def _segments(self, inner: str) -> Iterator[Tuple[str, bool]]:
        """Yield text per run in document order, flagged as URL-styled or not."""
        cursor = 0
        for run in self.RUN_PATTERN.finditer(inner):
            yield self._text_of(inner[cursor:run.start()]), False
            style = find_attribute(run.group(1), "AppliedCharacterStyle") or ""
            yield self._text_of(run.group(2) or ""), is_url_character_style(style)
            cursor = run.end()
        yield self._text_of(inner[cursor:]), False

    def _text_of(self, fragment: str) -> str:
        parts: List[str] = []
        for match in self.TEXT_PATTERN.finditer(fragment):
            content = match.group(1)
            if content is None:
                parts.append("\n")
            else:
                parts.append(html.unescape(self.TAG_PATTERN.sub("", content)))
        return "".join(parts)


class StoryParser:
    """Try each strategy in order until one recovers an id or paragraphs.

    Never raises: a story no strategy can read comes back empty.
    """

    def __init__(self, strategies: Optional[Sequence[StoryParseStrategy]] = None) -> None:
        self._strategies = tuple(strategies) if strategies is not None else (DomStoryParser(), PatternStoryParser())

    def parse(self, story_xml: XmlSource) -> ParsedStory:
        for strategy in self._strategies:
            try:
                story = strategy.parse(story_xml)
            except (XmlParseError, ValueError) as exc:
                LOGGER.debug("%s failed (%s); trying next strategy", type(strategy).__name__, exc)
                continue
            if not story.is_empty:
                return story
        return ParsedStory()
