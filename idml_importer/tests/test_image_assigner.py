"""Test cases for position-based image assignment."""

import random
import unittest
from itertools import permutations
from unittest.mock import patch

from idml_importer.model.elements import ImageCandidate, Position
from idml_importer.parser.image_assigner import (
    EXACT_ASSIGNMENT_LIMIT,
    assign_exact,
    assign_greedy,
    assign_images,
    assign_in_reading_order,
    filter_images_for_import,
    image_extension,
    small_rendition_basename,
)
from idml_importer.utils.geometry import squared_distance


def image(x, y, basename="photo.jpg"):
    return ImageCandidate(Position(float(x), float(y)), basename)


def total_cost(anchors, images, assignment):
    return sum(squared_distance(anchors[i], images[j].position) for i, j in assignment.items())


class AssignImagesTest(unittest.TestCase):
    """Test exact and greedy assignment."""

    def test_small_exact_case(self):
        anchors = [Position(0, 0), Position(0, 100), Position(0, 200)]
        images = [image(5, 205), image(5, 5), image(5, 95)]

        self.assertEqual(assign_images(anchors, images), {0: 1, 1: 2, 2: 0})

    def test_exact_matches_brute_force_oracle(self):
        rng = random.Random(7)
        for n in range(1, 7):
            anchors = [Position(rng.uniform(0, 500), rng.uniform(0, 700)) for _ in range(n)]
            images = [image(rng.uniform(0, 500), rng.uniform(0, 700)) for _ in range(n)]

            assignment = assign_images(anchors, images)
            oracle = min(
                sum(squared_distance(anchors[i], images[j].position) for i, j in enumerate(perm))
                for perm in permutations(range(n))
            )

            self.assertEqual(sorted(assignment), list(range(n)))
            self.assertEqual(sorted(assignment.values()), list(range(n)))
            self.assertAlmostEqual(total_cost(anchors, images, assignment), oracle)

    def test_exact_ties_keep_first_permutation(self):
        anchors = [Position(0, 0), Position(0, 0)]
        images = [image(1, 0), image(1, 0)]
        self.assertEqual(assign_exact(anchors, images), {0: 0, 1: 1})

    def test_exact_assignment_is_capped(self):
        size = EXACT_ASSIGNMENT_LIMIT + 1
        anchors = [Position(0, i) for i in range(size)]
        images = [image(0, i) for i in range(size)]
        with self.assertRaises(AssertionError):
            assign_exact(anchors, images)

    def test_large_equal_counts_use_greedy(self):
        size = EXACT_ASSIGNMENT_LIMIT + 1
        anchors = [Position(0, i * 10) for i in range(size)]
        images = [image(0, i * 10 + 1) for i in range(size)]

        with patch("idml_importer.parser.image_assigner.assign_exact") as exact:
            assignment = assign_images(anchors, images)

        exact.assert_not_called()
        self.assertEqual(assignment, {i: i for i in range(size)})

    def test_greedy_in_anchor_order(self):
        anchors = [Position(0, 0), Position(0, 10), Position(0, 20)]
        images = [image(0, 19), image(0, 1)]

        self.assertEqual(assign_images(anchors, images), {0: 1, 1: 0})

    def test_greedy_is_injective(self):
        rng = random.Random(11)
        anchors = [Position(rng.uniform(0, 100), rng.uniform(0, 100)) for _ in range(12)]
        images = [image(rng.uniform(0, 100), rng.uniform(0, 100)) for _ in range(10)]

        assignment = assign_greedy(anchors, images)

        self.assertEqual(len(assignment), 10)
        self.assertEqual(len(set(assignment.values())), 10)

    def test_empty_inputs(self):
        self.assertEqual(assign_images([], [image(0, 0)]), {})
        self.assertEqual(assign_images([Position(0, 0)], []), {})

    def test_reading_order(self):
        self.assertEqual(assign_in_reading_order(3, [image(0, 0), image(0, 1)]), {0: 0, 1: 1})
        self.assertEqual(assign_in_reading_order(0, [image(0, 0)]), {})


class ImageFilterTest(unittest.TestCase):
    """Test raster filtering and rendition names."""

    def test_filter_keeps_raster_images_in_page_order(self):
        images = [
            image(0, 0, "logo.eps"),
            image(10, 50, "b.tif"),
            image(5, 10, "c.jpg"),
            image(1, 10, "d.PNG"),
            image(0, 0, "e.pdf"),
            image(0, 0, "f.gif"),
            image(0, 0, "noext"),
        ]

        filtered = filter_images_for_import(images)

        self.assertEqual([i.basename for i in filtered], ["d.PNG", "c.jpg", "b.tif"])

    def test_image_extension(self):
        self.assertEqual(image_extension("Foto%2001.TIFF"), "tiff")
        self.assertEqual(image_extension("noext"), "")

    def test_small_rendition_basename(self):
        test_cases = [
            ("Foto%2001.tif", "Foto 01_small.jpg"),
            ("Links/bild.final.jpeg", "bild.final_small.jpg"),
            ("plain", "plain_small.jpg"),
            ("", ""),
            ("   ", ""),
        ]
        for basename, expected in test_cases:
            self.assertEqual(small_rendition_basename(basename), expected, f"Failed for {basename!r}")


if __name__ == '__main__':
    unittest.main()
