"""Test cases for rule-based story classification."""

import unittest

from idml_importer.config import LAYOUT_FOTOSTRECKE, LAYOUT_INFOSEITEN
from idml_importer.model.elements import Paragraph, ParsedStory
from idml_importer.model.import_model import InfoTeaser, ParallaxItem, Teaser
from idml_importer.parser.story_classifier import (
    STYLE_SAMPLE_SIZE,
    Classification,
    FallbackTier,
    StoryClassifier,
    classification_warnings,
)

HEADLINE = "ParagraphStyle/01_Headline"
LEAD = "ParagraphStyle/02_Vorspann"
TEASER_LOCATION = "ParagraphStyle/06_Ort_KT_Meldungen"
TEASER_LINK = "ParagraphStyle/03_LT_links"
TEASER_HEADLINE = "ParagraphStyle/06_Headline"
INFO_LOCATION = "ParagraphStyle/Info_DZ"
INFO_HEAD = "ParagraphStyle/Head_Info"
INFO_BODY = "ParagraphStyle/Info_LT"


def story(story_id, *paragraphs, has_url_style=False):
    return ParsedStory.from_paragraphs(story_id, list(paragraphs), has_url_style)


def info_story(story_id, location="Berlin", head="Neue\nAusstellung", body="Taeglich geoeffnet. ", url="www.museum.de"):
    return story(
        story_id,
        Paragraph(INFO_LOCATION, location),
        Paragraph(INFO_HEAD, head),
        Paragraph(INFO_BODY, body, url=url),
        has_url_style=bool(url),
    )


class StoryClassifierTest(unittest.TestCase):
    """Test role detection and record extraction."""

    def setUp(self):
        self.classifier = StoryClassifier()

    def test_headline_story(self):
        result = self.classifier.classify([story("u1", Paragraph(HEADLINE, "Welcome Issue"))])
        self.assertEqual(result.headline, "Welcome Issue")

    def test_first_headline_wins_and_claims_story(self):
        result = self.classifier.classify([
            story("u1", Paragraph(HEADLINE, "First"), Paragraph(LEAD, "")),
            story("u2", Paragraph(HEADLINE, "Second")),
            story("u3", Paragraph(LEAD, "The lead")),
        ])
        self.assertEqual(result.headline, "First")
        self.assertEqual(result.lead, "The lead")

    def test_encoded_style_names_match(self):
        result = self.classifier.classify([story("u1", Paragraph("ParagraphStyle%2f01_Headline", "Titel"))])
        self.assertEqual(result.headline, "Titel")

    def test_info_like_story_is_not_headline(self):
        result = self.classifier.classify([
            story("u1", Paragraph(HEADLINE, "Looks like a headline"), Paragraph(INFO_LOCATION, "Ort"),
                  Paragraph(INFO_BODY, "Text")),
        ])
        self.assertEqual(result.headline, "")

    def test_teaser_record(self):
        teaser_story = story(
            "u5",
            Paragraph(TEASER_LOCATION, "Berlin\nNew Bridge Opens"),
            Paragraph(TEASER_LINK, "Read more", url="example.com/bridge"),
            has_url_style=True,
        )
        result = self.classifier.classify([teaser_story])

        self.assertEqual(
            result.teasers,
            [Teaser(story_id="u5", location="Berlin", headline="New Bridge Opens", intro="Read more",
                    url="https://example.com/bridge")],
        )

    def test_teaser_headline_from_headline_paragraph(self):
        teaser_story = story(
            "u6",
            Paragraph(TEASER_LOCATION, "Hamburg"),
            Paragraph(TEASER_HEADLINE, "Hafen  heute"),
            Paragraph(TEASER_LINK, "Mehr", url="hafen.de"),
            has_url_style=True,
        )
        teaser = self.classifier.extract_teaser(teaser_story)
        self.assertEqual((teaser.location, teaser.headline, teaser.url), ("Hamburg", "Hafen heute", "https://hafen.de"))

    def test_teaser_needs_url_style(self):
        result = self.classifier.classify([
            story("u7", Paragraph(TEASER_LOCATION, "Berlin"), Paragraph(TEASER_LINK, "Read more")),
        ])
        self.assertEqual(result.teasers, [])

    def test_info_story_feeds_both_record_lists(self):
        result = self.classifier.classify([info_story("u8")])

        self.assertEqual(
            result.info_teasers,
            [InfoTeaser(story_id="u8", location="Berlin", headline="Neue Ausstellung", intro="Taeglich geoeffnet.",
                        url="https://www.museum.de")],
        )
        self.assertEqual(
            result.parallax_items,
            [ParallaxItem(story_id="u8", location="Berlin", title="Neue Ausstellung", body="Taeglich geoeffnet.")],
        )

    def test_info_teaser_url_typed_as_plain_text(self):
        teaser = self.classifier.extract_info_teaser(
            info_story("u9", body="Taeglich geoeffnet. museum.de/info", url="")
        )
        self.assertEqual(teaser.intro, "Taeglich geoeffnet.")
        self.assertEqual(teaser.url, "https://museum.de/info")

    def test_info_teaser_without_location(self):
        partial = story("u10", Paragraph(INFO_HEAD, "Kopf"), Paragraph(INFO_BODY, "Text"))
        teaser = self.classifier.extract_info_teaser(partial)
        self.assertEqual(teaser.location, "")
        self.assertEqual(teaser.headline, "Kopf")

    def test_empty_location_adds_no_field_warning(self):
        stories = [
            story("u1", Paragraph(HEADLINE, "Titel")),
            story("u2", Paragraph(LEAD, "Vorspann")),
            info_story("u3", location=""),
        ]
        result = self.classifier.classify(stories)

        self.assertEqual(result.info_teasers[0].location, "")
        self.assertEqual(classification_warnings(result, LAYOUT_INFOSEITEN), [])

    def test_fallbacks_pick_shortest_text(self):
        result = self.classifier.classify([
            story("u1", Paragraph("ParagraphStyle/Head versal", "Ein sehr langer Titel")),
            story("u2", Paragraph("ParagraphStyle/H1 Gross", "Kurz")),
            story("u3", Paragraph("ParagraphStyle/VS_Infoseite", "Lead text")),
        ])
        self.assertEqual(result.headline, "Kurz")
        self.assertEqual(result.lead, "Lead text")

    def test_fallback_does_not_override_primary(self):
        result = self.classifier.classify([
            story("u1", Paragraph("ParagraphStyle/Head versal", "X")),
            story("u2", Paragraph(HEADLINE, "Primary headline")),
        ])
        self.assertEqual(result.headline, "Primary headline")

    def test_appended_fallback_tier(self):
        self.classifier.fallbacks.append(FallbackTier("lead", lambda s: s.id == "u4"))
        result = self.classifier.classify([story("u4", Paragraph("ParagraphStyle/Other", "Custom lead"))])
        self.assertEqual(result.lead, "Custom lead")

    def test_classification_is_deterministic(self):
        stories = [
            story("u1", Paragraph(HEADLINE, "Titel")),
            info_story("u2"),
            info_story("u3", location="Hamburg"),
            story("u4", Paragraph("ParagraphStyle/VS_Infoseite", "Lead")),
        ]
        self.assertEqual(self.classifier.classify(stories), self.classifier.classify(stories))

    def test_paragraph_styles_collected_in_order(self):
        result = self.classifier.classify([info_story("u1"), story("u2", Paragraph(HEADLINE, "T"))])
        self.assertEqual(result.paragraph_styles, [INFO_LOCATION, INFO_HEAD, INFO_BODY, HEADLINE])


class ClassificationWarningsTest(unittest.TestCase):
    """Test role-presence warnings and diagnostics."""

    def test_empty_document(self):
        warnings = classification_warnings(
            Classification(), LAYOUT_INFOSEITEN, spread_files=1, story_files=2, parsed_stories=0
        )
        self.assertEqual(
            warnings,
            [
                "Headline story not found (paragraph style starting with ParagraphStyle/01_Headline).",
                "Lead story not found (paragraph style starting with ParagraphStyle/02_Vorspann).",
                "No teaser/info stories found.",
                "No info-teaser stories found (Info_DZ + Head_Info + Info_LT).",
                "Diagnostics: spread_files=1, story_files=2, parsed_stories=0, unique_paragraph_styles=0.",
                "Diagnostics: paragraph_styles_sample=.",
            ],
        )

    def test_missing_parallax_items(self):
        classification = Classification(headline="H", lead="L", teasers=[Teaser(story_id="u1")])
        warnings = classification_warnings(classification, LAYOUT_FOTOSTRECKE)

        self.assertIn("No parallax stories found (Info_DZ + Head_Info + Info_LT).", warnings)
        self.assertNotIn("No teaser/info stories found.", warnings)
        self.assertTrue(warnings[-1].startswith("Diagnostics: paragraph_styles_sample="))

    def test_style_sample_is_sorted_and_truncated(self):
        styles = [f"ParagraphStyle/S{index:02d}" for index in range(STYLE_SAMPLE_SIZE + 3, 0, -1)]
        classification = Classification(paragraph_styles=styles)
        sample = classification_warnings(classification, LAYOUT_INFOSEITEN)[-1]

        self.assertTrue(sample.startswith("Diagnostics: paragraph_styles_sample=ParagraphStyle/S01 | ParagraphStyle/S02"))
        self.assertTrue(sample.endswith(" | \u2026."))
        self.assertNotIn("ParagraphStyle/S13", sample)


if __name__ == '__main__':
    unittest.main()
