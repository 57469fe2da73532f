"""Match placed images to text anchors using page position only."""
from __future__ import annotations

import posixpath
from itertools import permutations
from typing import Dict, Iterable, List, Optional, Sequence
from urllib.parse import unquote

from idml_importer.model.elements import ImageCandidate, Position
from idml_importer.utils.geometry import squared_distance

# Exact search enumerates n! permutations; above this size it is never attempted.
EXACT_ASSIGNMENT_LIMIT = 8

RASTER_EXTENSIONS = frozenset({"tif", "tiff", "jpg", "jpeg", "png", "webp"})
PRINT_ONLY_EXTENSIONS = frozenset({"eps", "ai", "pdf"})

SMALL_RENDITION_SUFFIX = "_small"
SMALL_RENDITION_EXTENSION = ".jpg"

Assignment = Dict[int, int]


def image_extension(basename: str) -> str:
    """Lower-case extension of a (possibly percent-encoded) file name."""
    _, ext = posixpath.splitext(unquote(basename))
    return ext[1:].lower()


def filter_images_for_import(images: Iterable[ImageCandidate]) -> List[ImageCandidate]:
    """Keep raster images only and sort them top-to-bottom, then left-to-right."""
    filtered = []
    for image in images:
        ext = image_extension(image.basename)
        if ext in PRINT_ONLY_EXTENSIONS or ext not in RASTER_EXTENSIONS:
            continue
        filtered.append(image)
    return sorted(filtered, key=lambda image: (image.position.y, image.position.x))


def assign_images(anchors: Sequence[Position], images: Sequence[ImageCandidate]) -> Assignment:
    """Map anchor indexes to image indexes, minimizing squared distances.

    Equal, small counts are solved exactly; everything else greedily in
    anchor order. The result is injective and may leave anchors unmatched.
    """
    if not anchors or not images:
        return {}
    if len(anchors) == len(images) and len(anchors) <= EXACT_ASSIGNMENT_LIMIT:
        return assign_exact(anchors, images)
    return assign_greedy(anchors, images)


def assign_exact(anchors: Sequence[Position], images: Sequence[ImageCandidate]) -> Assignment:
    """Brute-force the permutation with the lowest total squared distance."""
    n = len(anchors)
    assert n == len(images), "exact assignment needs one image per anchor"
    assert n <= EXACT_ASSIGNMENT_LIMIT, f"exact assignment capped at {EXACT_ASSIGNMENT_LIMIT} anchors, got {n}"

    best: Optional[Sequence[int]] = None
    best_score = 0.0
    for perm in permutations(range(n)):
        score = sum(squared_distance(anchors[i], images[j].position) for i, j in enumerate(perm))
        if best is None or score < best_score:
            best, best_score = perm, score

    return {i: j for i, j in enumerate(best or ())}


def assign_greedy(anchors: Sequence[Position], images: Sequence[ImageCandidate]) -> Assignment:
    """Give each anchor, in order, the nearest image not yet taken."""
    used = set()
    assignment: Assignment = {}
    for i, anchor in enumerate(anchors):
        best_j: Optional[int] = None
        best_score = 0.0
        for j, image in enumerate(images):
            if j in used:
                continue
            score = squared_distance(anchor, image.position)
            if best_j is None or score < best_score:
                best_j, best_score = j, score
        if best_j is None:
            break
        used.add(best_j)
        assignment[i] = best_j
    return assignment


def assign_in_reading_order(count: int, images: Sequence[ImageCandidate]) -> Assignment:
    """Pair the n-th record with the n-th image."""
    return {i: i for i in range(min(count, len(images)))}


def small_rendition_basename(basename: str) -> str:
    """File name of the web rendition expected for a linked image.

    ``Links/Photo%2001.tif`` → ``Photo 01_small.jpg``.
    """
    basename = basename.strip()
    if not basename:
        return ""
    decoded = posixpath.basename(unquote(basename))
    stem, _ = posixpath.splitext(decoded)
    if not stem:
        return ""
    return f"{stem}{SMALL_RENDITION_SUFFIX}{SMALL_RENDITION_EXTENSION}"
