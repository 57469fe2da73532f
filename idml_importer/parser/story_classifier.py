"""Assign semantic roles to parsed stories from their paragraph styles.

Classification is driven by an ordered rule table. Each story is offered to
the primary rules in priority order; a rule marked ``claims`` keeps the story
from later rules, and a rule marked ``first_only`` retires after its first
match. Fallback tiers run afterwards and only fill roles that are still
empty, picking the shortest candidate text. New template variants are
supported by appending rules or tiers.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence

from idml_importer.config import LAYOUT_FOTOSTRECKE, LAYOUT_INFOSEITEN
from idml_importer.model.elements import Paragraph, ParsedStory
from idml_importer.model.import_model import InfoTeaser, ParallaxItem, Teaser
from idml_importer.model.style_model import DEFAULT_VOCABULARY, StyleVocabulary, has_style, has_style_prefix
from idml_importer.utils.logger import get_logger
from idml_importer.utils.text_normalizer import (
    extract_trailing_url,
    normalize_text,
    normalize_url,
    split_lines,
    strip_urls,
)

LOGGER = get_logger(__name__)

STYLE_SAMPLE_SIZE = 12


@dataclass(slots=True)
class Classification:
    """Roles and records found across all stories of one document."""

    headline: str = ""
    lead: str = ""
    teasers: List[Teaser] = field(default_factory=list)
    info_teasers: List[InfoTeaser] = field(default_factory=list)
    parallax_items: List[ParallaxItem] = field(default_factory=list)
    paragraph_styles: List[str] = field(default_factory=list)


StoryPredicate = Callable[[ParsedStory], bool]
StoryExtractor = Callable[[ParsedStory, Classification], None]


@dataclass(frozen=True, slots=True)
class ClassificationRule:
    """Primary rule: predicate → extractor."""

    name: str
    predicate: StoryPredicate
    extract: StoryExtractor
    first_only: bool = False
    claims: bool = False


@dataclass(frozen=True, slots=True)
class FallbackTier:
    """Fills an empty text role with the shortest matching story text."""

    role: str
    predicate: StoryPredicate


class StoryClassifier:
    """Stateless classifier over a collection of parsed stories."""

    def __init__(self, vocabulary: StyleVocabulary = DEFAULT_VOCABULARY) -> None:
        self._vocabulary = vocabulary
        self.rules: List[ClassificationRule] = self._primary_rules()
        self.fallbacks: List[FallbackTier] = self._fallback_tiers()

    # ------------------------------------------------------------------
    # Public API
    def classify(self, stories: Iterable[ParsedStory]) -> Classification:
        stories = list(stories)
        result = Classification()
        seen_styles = dict.fromkeys(style for story in stories for style in story.paragraph_styles)
        result.paragraph_styles = list(seen_styles)

        retired = set()
        for story in stories:
            for rule in self.rules:
                if rule.name in retired or not rule.predicate(story):
                    continue
                LOGGER.debug("Story %s matched rule %s", story.id, rule.name)
                rule.extract(story, result)
                if rule.first_only:
                    retired.add(rule.name)
                if rule.claims:
                    break

        for tier in self.fallbacks:
            if getattr(result, tier.role):
                continue
            candidates = [text for text in (plain_text(s) for s in stories if tier.predicate(s)) if text]
            if candidates:
                setattr(result, tier.role, min(candidates, key=len))
                LOGGER.info("Using fallback %s from %d candidate(s)", tier.role, len(candidates))

        return result

    # ------------------------------------------------------------------
    # Rule table
    def _primary_rules(self) -> List[ClassificationRule]:
        return [
            ClassificationRule("headline", self._is_headline, self._take_headline, first_only=True, claims=True),
            ClassificationRule("lead", self._is_lead, self._take_lead, first_only=True, claims=True),
            ClassificationRule("teaser", self._is_teaser, self._take_teaser),
            ClassificationRule("info", self._is_info, self._take_info),
        ]

    def _fallback_tiers(self) -> List[FallbackTier]:
        return [
            FallbackTier("headline", self._is_fallback_headline),
            FallbackTier("lead", self._is_fallback_lead),
        ]

    # ------------------------------------------------------------------
    # Predicates
    def is_info_like(self, story: ParsedStory) -> bool:
        v = self._vocabulary
        styles = story.paragraph_styles
        return has_style(styles, v.info_location) and has_style(styles, v.info_body)

    def _is_headline(self, story: ParsedStory) -> bool:
        return not self.is_info_like(story) and has_style_prefix(story.paragraph_styles, self._vocabulary.headline_prefix)

    def _is_lead(self, story: ParsedStory) -> bool:
        return has_style_prefix(story.paragraph_styles, self._vocabulary.lead_prefix)

    def _is_teaser(self, story: ParsedStory) -> bool:
        v = self._vocabulary
        styles = story.paragraph_styles
        return has_style(styles, v.teaser_location) and has_style(styles, v.teaser_link) and story.has_url_style

    def _is_info(self, story: ParsedStory) -> bool:
        v = self._vocabulary
        styles = story.paragraph_styles
        return has_style(styles, v.info_location) and has_style(styles, v.info_head) and has_style(styles, v.info_body)

    def _is_fallback_headline(self, story: ParsedStory) -> bool:
        if self.is_info_like(story):
            return False
        v = self._vocabulary
        styles = story.paragraph_styles
        return has_style(styles, v.fallback_headline) or has_style_prefix(styles, v.fallback_headline_prefix)

    def _is_fallback_lead(self, story: ParsedStory) -> bool:
        return has_style(story.paragraph_styles, self._vocabulary.fallback_lead)

    # ------------------------------------------------------------------
    # Extractors
    def _take_headline(self, story: ParsedStory, result: Classification) -> None:
        result.headline = plain_text(story)

    def _take_lead(self, story: ParsedStory, result: Classification) -> None:
        result.lead = plain_text(story)

    def _take_teaser(self, story: ParsedStory, result: Classification) -> None:
        result.teasers.append(self.extract_teaser(story))

    def _take_info(self, story: ParsedStory, result: Classification) -> None:
        result.info_teasers.append(self.extract_info_teaser(story))
        result.parallax_items.append(self.extract_parallax_item(story))

    def extract_teaser(self, story: ParsedStory) -> Teaser:
        v = self._vocabulary
        teaser = Teaser(story_id=story.id)

        location_para = _first_with_style(story.paragraphs, v.teaser_location)
        if location_para is not None:
            lines = split_lines(location_para.text)
            if lines:
                teaser.location = normalize_text(lines[0])
            if len(lines) > 1:
                teaser.headline = normalize_text(lines[1])

        if not teaser.headline:
            headline_para = _first_with_style(story.paragraphs, v.teaser_headline)
            if headline_para is not None:
                teaser.headline = normalize_text(headline_para.text)

        link_para = _first_with_style(story.paragraphs, v.teaser_link)
        if link_para is not None:
            teaser.intro = strip_urls(normalize_text(link_para.text))
            teaser.url = normalize_url(normalize_text(link_para.url))
        return teaser

    def extract_info_teaser(self, story: ParsedStory) -> InfoTeaser:
        v = self._vocabulary
        teaser = InfoTeaser(story_id=story.id)
        body = ""
        for paragraph in story.paragraphs:
            styles = (paragraph.style,)
            if not teaser.location and has_style(styles, v.info_location):
                teaser.location = strip_urls(normalize_text(paragraph.text))
            elif not teaser.headline and has_style(styles, v.info_head):
                teaser.headline = strip_urls(normalize_text(paragraph.text))
            elif not body and has_style(styles, v.info_body):
                body = normalize_text(paragraph.text)
                teaser.url = normalize_url(normalize_text(paragraph.url))

        if teaser.url:
            teaser.intro = strip_urls(body)
        else:
            # Some variants type the link as plain text at the end of the body.
            teaser.intro, teaser.url = extract_trailing_url(body)
        return teaser

    def extract_parallax_item(self, story: ParsedStory) -> ParallaxItem:
        v = self._vocabulary
        item = ParallaxItem(story_id=story.id)
        for paragraph in story.paragraphs:
            styles = (paragraph.style,)
            if not item.location and has_style(styles, v.info_location):
                item.location = strip_urls(normalize_text(paragraph.text))
            elif not item.title and has_style(styles, v.info_head):
                item.title = strip_urls(normalize_text(paragraph.text))
            elif not item.body and has_style(styles, v.info_body):
                item.body = strip_urls(normalize_text(paragraph.text))
        return item


def plain_text(story: ParsedStory) -> str:
    """Whole-story text as a single line without a trailing URL."""
    return strip_urls(normalize_text(story.text_all))


def _first_with_style(paragraphs: Sequence[Paragraph], needle: str) -> Optional[Paragraph]:
    for paragraph in paragraphs:
        if has_style((paragraph.style,), needle):
            return paragraph
    return None


def classification_warnings(
    classification: Classification,
    layout: str,
    vocabulary: StyleVocabulary = DEFAULT_VOCABULARY,
    *,
    spread_files: int = 0,
    story_files: int = 0,
    parsed_stories: int = 0,
) -> List[str]:
    """Describe missing roles, with a style sample when the template is not recognised."""
    v = vocabulary
    info_styles = f"{v.info_location} + {v.info_head} + {v.info_body}"
    warnings: List[str] = []

    if not classification.headline:
        warnings.append(f"Headline story not found (paragraph style starting with {v.headline_prefix}).")
    if not classification.lead:
        warnings.append(f"Lead story not found (paragraph style starting with {v.lead_prefix}).")
    if not classification.teasers and not classification.info_teasers:
        warnings.append("No teaser/info stories found.")

    if layout == LAYOUT_FOTOSTRECKE:
        missing_main_items = not classification.parallax_items
        if missing_main_items:
            warnings.append(f"No parallax stories found ({info_styles}).")
    elif layout == LAYOUT_INFOSEITEN:
        missing_main_items = not classification.info_teasers
        if missing_main_items:
            warnings.append(f"No info-teaser stories found ({info_styles}).")
    else:
        missing_main_items = not classification.teasers

    if not classification.headline or not classification.lead or missing_main_items:
        styles = sorted(classification.paragraph_styles)
        sample = " | ".join(styles[:STYLE_SAMPLE_SIZE])
        if len(styles) > STYLE_SAMPLE_SIZE:
            sample += " | …"
        warnings.append(
            f"Diagnostics: spread_files={spread_files}, story_files={story_files}, "
            f"parsed_stories={parsed_stories}, unique_paragraph_styles={len(styles)}."
        )
        warnings.append(f"Diagnostics: paragraph_styles_sample={sample}.")
    return warnings
