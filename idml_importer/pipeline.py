"""Sequence parsing, classification and image assignment into an ImportResult."""
from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from idml_importer.config import LAYOUT_FOTOSTRECKE, LAYOUT_INFOSEITEN, SPREADS_PREFIX, STORIES_PREFIX, ImportOptions
from idml_importer.model.elements import ORIGIN, ImageCandidate, ParsedStory, Position
from idml_importer.model.import_model import (
    ClassifiedRecord,
    ImageReportRow,
    ImportResult,
    InfoTeaser,
    OrderReportRow,
    ParallaxItem,
)
from idml_importer.parser.asset_resolver import NOT_FOUND, AssetResolver, resolve_attachment
from idml_importer.parser.idml_loader import ContainerReader, IdmlPackageError, part_names
from idml_importer.parser.image_assigner import (
    Assignment,
    assign_images,
    assign_in_reading_order,
    filter_images_for_import,
    small_rendition_basename,
)
from idml_importer.parser.spread_parser import SpreadParser
from idml_importer.parser.story_classifier import Classification, StoryClassifier, classification_warnings
from idml_importer.parser.story_parser import StoryParser
from idml_importer.utils.logger import get_logger
from idml_importer.utils.text_normalizer import normalize_key

LOGGER = get_logger(__name__)

UNORDERED = 9999


class ImportPipeline:
    """Runs one import over a container, start to finish."""

    def __init__(
        self,
        options: Optional[ImportOptions] = None,
        asset_resolver: Optional[AssetResolver] = None,
        spread_parser: Optional[SpreadParser] = None,
        story_parser: Optional[StoryParser] = None,
    ) -> None:
        self._options = options or ImportOptions()
        self._resolver = asset_resolver
        self._spread_parser = spread_parser or SpreadParser()
        self._story_parser = story_parser or StoryParser()
        self._classifier = StoryClassifier(self._options.vocabulary)

    def run(self, container: ContainerReader) -> ImportResult:
        """Return the import result; raises ``IdmlPackageError`` when no spreads exist."""
        layout = self._options.layout
        warnings: List[str] = []

        spread_names = part_names(container, SPREADS_PREFIX)
        if not spread_names:
            raise IdmlPackageError("No spread XML found in IDML package.")
        text_frames, images = self._collect_spreads(container, spread_names)

        story_names = part_names(container, STORIES_PREFIX)
        stories = self._collect_stories(container, story_names)
        LOGGER.info(
            "Parsed %d spread(s), %d/%d story file(s), %d text frame(s), %d image(s)",
            len(spread_names), len(stories), len(story_names), len(text_frames), len(images),
        )

        classification = self._classifier.classify(stories)
        warnings.extend(
            classification_warnings(
                classification,
                layout,
                self._options.vocabulary,
                spread_files=len(spread_names),
                story_files=len(story_names),
                parsed_stories=len(stories),
            )
        )

        if self._resolver is None:
            LOGGER.warning("No asset resolver configured; skipping attachment lookup")

        teasers = classification.teasers
        assignment = assign_images(self._anchors(teasers, text_frames, warnings), images)
        self._attach_images(teasers, images, assignment, warnings)

        usable_images = filter_images_for_import(images)
        image_report: List[ImageReportRow] = []
        info_teasers: List[InfoTeaser] = []
        parallax_items: List[ParallaxItem] = []

        if layout == LAYOUT_INFOSEITEN:
            info_teasers = self._order_info_teasers(classification, text_frames)
            assignment = assign_images(self._anchors(info_teasers, text_frames, warnings), usable_images)
            image_report.extend(self._attach_images(info_teasers, usable_images, assignment, warnings, kind=layout))
        elif layout == LAYOUT_FOTOSTRECKE:
            parallax_items = list(classification.parallax_items)
            assignment = assign_in_reading_order(len(parallax_items), usable_images)
            image_report.extend(self._attach_images(parallax_items, usable_images, assignment, warnings, kind=layout))

        order_report = [
            OrderReportRow(story_id=teaser.story_id, label=teaser.headline, order=index)
            for index, teaser in enumerate(info_teasers)
        ]

        self._log_summary(classification, warnings)
        return ImportResult(
            layout=layout,
            headline=classification.headline,
            lead=classification.lead,
            teasers=tuple(teasers),
            info_teasers=tuple(info_teasers),
            parallax_items=tuple(parallax_items),
            warnings=tuple(warnings),
            image_report=tuple(image_report),
            order_report=tuple(order_report),
        )

    # ------------------------------------------------------------------
    # Parsing
    def _collect_spreads(self, container: ContainerReader, names: Sequence[str]):
        text_frames: Dict[str, Position] = {}
        images: List[ImageCandidate] = []
        for name in names:
            data = container.read(name)
            if not data:
                continue
            spread = self._spread_parser.parse(data)
            for story_id, position in spread.text_frames.items():
                text_frames.setdefault(story_id, position)
            images.extend(spread.images)
        return text_frames, images

    def _collect_stories(self, container: ContainerReader, names: Sequence[str]) -> List[ParsedStory]:
        stories: List[ParsedStory] = []
        for name in names:
            story = self._story_parser.parse(container.read(name))
            if story.is_empty:
                LOGGER.debug("Discarding unreadable story %s", name)
                continue
            stories.append(story)
        return stories

    # ------------------------------------------------------------------
    # Ordering and images
    def _order_info_teasers(self, classification: Classification, text_frames: Dict[str, Position]) -> List[InfoTeaser]:
        info_teasers = list(classification.info_teasers)

        def reading_order(teaser: InfoTeaser):
            position = text_frames.get(teaser.story_id, ORIGIN)
            return position.y, position.x

        info_teasers.sort(key=reading_order)

        if self._options.order:
            override = {normalize_key(story_id): order for story_id, order in self._options.order.items()}
            info_teasers.sort(key=lambda teaser: override.get(normalize_key(teaser.story_id), UNORDERED))
        return info_teasers

    def _anchors(self, records: Sequence[ClassifiedRecord], text_frames: Dict[str, Position], warnings: List[str]) -> List[Position]:
        anchors: List[Position] = []
        for record in records:
            position = text_frames.get(record.story_id)
            if position is None:
                warnings.append(f"No TextFrame position for story_id={record.story_id}")
                position = ORIGIN
            anchors.append(position)
        return anchors

    def _attach_images(
        self,
        records: Sequence[ClassifiedRecord],
        images: Sequence[ImageCandidate],
        assignment: Assignment,
        warnings: List[str],
        kind: Optional[str] = None,
    ) -> List[ImageReportRow]:
        """Set expected file names and asset ids; report rows are built when ``kind`` is given."""
        rows: List[ImageReportRow] = []
        for record_index, image_index in sorted(assignment.items()):
            record = records[record_index]
            link_basename = images[image_index].basename
            record.image_basename = small_rendition_basename(link_basename)
            record.attachment_id = self._resolve(record.image_basename, link_basename, warnings)
            if kind is not None:
                rows.append(ImageReportRow(kind, record.label, record.image_basename, record.attachment_id))
        return rows

    def _resolve(self, expected_file: str, link_basename: str, warnings: List[str]) -> int:
        if self._resolver is None:
            return NOT_FOUND
        attachment_id = resolve_attachment(self._resolver, expected_file, link_basename)
        if attachment_id <= 0 and link_basename:
            warnings.append(f"Attachment not found for {expected_file}")
        return attachment_id

    def _log_summary(self, classification: Classification, warnings: Sequence[str]) -> None:
        LOGGER.info(
            "Extracted: headline=%s, lead=%s, teasers=%d, info_teasers=%d, parallax_items=%d",
            "yes" if classification.headline else "no",
            "yes" if classification.lead else "no",
            len(classification.teasers),
            len(classification.info_teasers),
            len(classification.parallax_items),
        )
        for warning in warnings:
            LOGGER.warning(warning)
