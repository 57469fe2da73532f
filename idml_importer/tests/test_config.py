"""Test cases for import options."""

import unittest

from idml_importer.config import DEFAULT_LAYOUT, LAYOUT_FOTOSTRECKE, ImportOptions
from idml_importer.model.style_model import DEFAULT_VOCABULARY, StyleVocabulary, has_style, has_style_prefix


class ImportOptionsTest(unittest.TestCase):

    def test_defaults(self):
        options = ImportOptions()
        self.assertEqual(options.layout, DEFAULT_LAYOUT)
        self.assertEqual(options.order, {})
        self.assertIs(options.vocabulary, DEFAULT_VOCABULARY)

    def test_unknown_layout(self):
        with self.assertRaises(ValueError):
            ImportOptions(layout="magazin")

    def test_order_values_are_coerced(self):
        options = ImportOptions(layout=LAYOUT_FOTOSTRECKE, order={"u1": "3", "u2": 1})
        self.assertEqual(options.order, {"u1": 3, "u2": 1})

    def test_invalid_order_value(self):
        with self.assertRaises(ValueError):
            ImportOptions(order={"u1": "first"})


class StyleVocabularyTest(unittest.TestCase):

    def test_custom_vocabulary(self):
        vocabulary = StyleVocabulary(info_location="Ort_Info")
        self.assertEqual(vocabulary.info_location, "Ort_Info")
        self.assertEqual(vocabulary.info_head, DEFAULT_VOCABULARY.info_head)

    def test_style_matching_checks_decoded_names(self):
        styles = ["ParagraphStyle%2fInfo_DZ%3aklein"]
        self.assertTrue(has_style(styles, "Info_DZ:klein"))
        self.assertTrue(has_style_prefix(styles, "ParagraphStyle/Info"))
        self.assertFalse(has_style(styles, "Head_Info"))


if __name__ == '__main__':
    unittest.main()
