"""Classified records and the aggregate import result consumers receive."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(slots=True)
class Teaser:
    """Content teaser built from a location/link styled story."""

    story_id: str
    location: str = ""
    headline: str = ""
    intro: str = ""
    url: str = ""
    image_basename: str = ""
    attachment_id: int = 0

    @property
    def label(self) -> str:
        return self.headline


@dataclass(slots=True)
class InfoTeaser:
    """Teaser for the info-page layout."""

    story_id: str
    location: str = ""
    headline: str = ""
    intro: str = ""
    url: str = ""
    image_basename: str = ""
    attachment_id: int = 0

    @property
    def label(self) -> str:
        return self.headline


@dataclass(slots=True)
class ParallaxItem:
    """Item of the photo-series (parallax background) layout."""

    story_id: str
    location: str = ""
    title: str = ""
    body: str = ""
    image_basename: str = ""
    attachment_id: int = 0

    @property
    def label(self) -> str:
        return self.title


ClassifiedRecord = Union[Teaser, InfoTeaser, ParallaxItem]


@dataclass(frozen=True, slots=True)
class ImageReportRow:
    """Which file a record expects and what the asset lookup returned."""

    kind: str
    label: str
    expected_file: str
    attachment_id: int


@dataclass(frozen=True, slots=True)
class OrderReportRow:
    """Current position of an info teaser, for building order overrides."""

    story_id: str
    label: str
    order: int


@dataclass(frozen=True, slots=True)
class ImportResult:
    """Terminal artifact of an import run."""

    layout: str
    headline: str = ""
    lead: str = ""
    teasers: Tuple[Teaser, ...] = ()
    info_teasers: Tuple[InfoTeaser, ...] = ()
    parallax_items: Tuple[ParallaxItem, ...] = ()
    warnings: Tuple[str, ...] = ()
    image_report: Tuple[ImageReportRow, ...] = ()
    order_report: Tuple[OrderReportRow, ...] = ()
