"""Extract text frame anchors and image placements from spread XML."""
from __future__ import annotations

import posixpath
import re
from typing import Optional, Protocol, Sequence, Union
from urllib.parse import unquote

from idml_importer.model.elements import ImageCandidate, SpreadLayout
from idml_importer.utils.geometry import item_transform_translation
from idml_importer.utils.logger import get_logger
from idml_importer.utils.xml_utils import XmlParseError, decode_part, find_attribute, iter_local, local_name, parse_xml

LOGGER = get_logger(__name__)

XmlSource = Union[str, bytes]


class SpreadParseStrategy(Protocol):
    """One way of turning spread XML into a ``SpreadLayout``."""

    def parse(self, spread_xml: XmlSource) -> SpreadLayout:
        ...


class DomSpreadParser:
    """Structured parse; raises ``XmlParseError`` on malformed documents."""

    def parse(self, spread_xml: XmlSource) -> SpreadLayout:
        root = parse_xml(spread_xml)
        layout = SpreadLayout()

        for element in root.iter():
            tag = local_name(element.tag)
            if tag == "TextFrame":
                position = item_transform_translation(element.get("ItemTransform"))
                layout.add_text_frame(element.get("ParentStory", ""), position)
            elif tag == "Image":
                link = next(iter_local(element, "Link"), None)
                if link is None:
                    continue
                uri = link.get("LinkResourceURI", "")
                if not uri:
                    continue
                layout.images.append(
                    ImageCandidate(
                        position=item_transform_translation(element.get("ItemTransform")),
                        basename=basename_from_link_uri(uri),
                    )
                )
        return layout


class PatternSpreadParser:
    """Tag-pattern scan for spreads that are not well-formed XML."""

    TEXT_FRAME_PATTERN = re.compile(r"<TextFrame\b([^>]*)>", re.IGNORECASE)
    IMAGE_PATTERN = re.compile(r"<Image\b([^>]*?)(?:/>|>([\s\S]*?)</Image\s*>)", re.IGNORECASE)
    LINK_PATTERN = re.compile(r"<Link\b([^>]*)>", re.IGNORECASE)

    def parse(self, spread_xml: XmlSource) -> SpreadLayout:
        text = decode_part(spread_xml)
        layout = SpreadLayout()

        for match in self.TEXT_FRAME_PATTERN.finditer(text):
            attrs = match.group(1)
            story_id = find_attribute(attrs, "ParentStory") or ""
            layout.add_text_frame(story_id, item_transform_translation(find_attribute(attrs, "ItemTransform")))

        for match in self.IMAGE_PATTERN.finditer(text):
            uri = self._link_uri(match.group(2))
            if not uri:
                continue
            layout.images.append(
                ImageCandidate(
                    position=item_transform_translation(find_attribute(match.group(1), "ItemTransform")),
                    basename=basename_from_link_uri(uri),
                )
            )
        return layout

    def _link_uri(self, inner: Optional[str]) -> str:
        if not inner:
            return ""
        for link in self.LINK_PATTERN.finditer(inner):
            uri = find_attribute(link.group(1), "LinkResourceURI")
            if uri:
                return uri
        return ""


class SpreadParser:
    """Try each strategy in order, falling back when a parse fails."""

    def __init__(self, strategies: Optional[Sequence[SpreadParseStrategy]] = None) -> None:
        self._strategies = tuple(strategies) if strategies is not None else (DomSpreadParser(), PatternSpreadParser())

    def parse(self, spread_xml: XmlSource) -> SpreadLayout:
        for strategy in self._strategies:
            try:
                return strategy.parse(spread_xml)
            except (XmlParseError, ValueError) as exc:
                LOGGER.debug("%s failed (%s); trying next strategy", type(strategy).__name__, exc)
        LOGGER.warning("Spread could not be parsed by any strategy; skipping")
        return SpreadLayout()


def basename_from_link_uri(uri: str) -> str:
    """Return the decoded file name a ``LinkResourceURI`` points at."""
    decoded = unquote(uri).replace("file:", "").strip()
    basename = posixpath.basename(decoded.replace("\\", "/"))
    return basename or posixpath.basename(uri)
