"""Paragraph style vocabulary used as semantic role markers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from idml_importer.utils.text_normalizer import decode_style_name


@dataclass(frozen=True, slots=True)
class StyleVocabulary:
    """Style names that mark each role in the magazine templates.

    Prefix entries are matched with ``startswith``; the others with a
    substring test. Both the raw and the percent-decoded style names are
    checked.
    """

    headline_prefix: str = "ParagraphStyle/01_Headline"
    lead_prefix: str = "ParagraphStyle/02_Vorspann"
    teaser_location: str = "06_Ort_KT_Meldungen"
    teaser_link: str = "03_LT_links"
    teaser_headline: str = "06_Headline"
    info_location: str = "Info_DZ"
    info_head: str = "Head_Info"
    info_body: str = "Info_LT"
    fallback_headline: str = "Head versal"
    fallback_headline_prefix: str = "ParagraphStyle/H1"
    fallback_lead: str = "VS_Infoseite"


DEFAULT_VOCABULARY = StyleVocabulary()


def has_style(styles: Iterable[str], needle: str) -> bool:
    """True when any style name contains ``needle``."""
    for style in styles:
        if needle in style or needle in decode_style_name(style):
            return True
    return False


def has_style_prefix(styles: Iterable[str], prefix: str) -> bool:
    """True when any style name starts with ``prefix``."""
    for style in styles:
        if style.startswith(prefix) or decode_style_name(style).startswith(prefix):
            return True
    return False
