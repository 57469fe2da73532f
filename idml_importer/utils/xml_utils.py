"""Helper functions to work with IDML XML parts."""
from __future__ import annotations

import html
import re
from typing import Iterator, Optional, Union
from xml.etree import ElementTree as ET

XmlParseError = ET.ParseError

_ATTRIBUTE_PATTERN = r'\b{name}\s*=\s*"([^"]*)"'


def parse_xml(data: Union[str, bytes]) -> ET.Element:
    """Parse XML from raw text or bytes, raising ``XmlParseError`` on malformed input."""
    return ET.fromstring(data)


def decode_part(data: Union[str, bytes]) -> str:
    """Return the text of a part, replacing undecodable bytes."""
    if isinstance(data, str):
        return data
    return data.decode("utf-8", errors="replace")


def local_name(tag: object) -> str:
    """Strip the ``{namespace}`` prefix from an element tag."""
    if not isinstance(tag, str):
        return ""
    return tag.split("}", 1)[-1]


def iter_local(element: ET.Element, name: str) -> Iterator[ET.Element]:
    """Iterate descendants of ``element`` (excluding itself) whose local name matches."""
    for node in element.iter():
        if node is element:
            continue
        if local_name(node.tag) == name:
            yield node


def find_attribute(fragment: str, name: str) -> Optional[str]:
    """Return the unescaped value of ``name`` inside a raw tag fragment."""
    match = re.search(_ATTRIBUTE_PATTERN.format(name=re.escape(name)), fragment)
    if match is None:
        return None
    return html.unescape(match.group(1))
