"""Test cases for page geometry helpers."""

import unittest

from idml_importer.model.elements import Position
from idml_importer.utils.geometry import item_transform_translation, squared_distance


class GeometryTest(unittest.TestCase):

    def test_translation_from_item_transform(self):
        self.assertEqual(item_transform_translation("1 0 0 1 12.5 -40"), Position(12.5, -40.0))

    def test_unusable_transforms_give_origin(self):
        for value in (None, "", "1 0 0 1 10", "1 0 0 1 a b"):
            self.assertEqual(item_transform_translation(value), Position(0.0, 0.0), f"Failed for {value!r}")

    def test_squared_distance(self):
        self.assertEqual(squared_distance(Position(0, 0), Position(3, 4)), 25)
        self.assertEqual(squared_distance(Position(1, 1), Position(1, 1)), 0)


if __name__ == '__main__':
    unittest.main()
