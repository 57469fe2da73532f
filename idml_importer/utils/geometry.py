"""Geometry helpers for IDML page coordinates."""
from __future__ import annotations

from typing import Optional

from idml_importer.model.elements import Position

AFFINE_COMPONENTS = 6


def item_transform_translation(item_transform: Optional[str]) -> Position:
    """Return the translation part of an ``ItemTransform`` affine matrix.

    The attribute holds six space separated numbers ``a b c d tx ty``. Only
    ``tx``/``ty`` are used. Short or non-numeric matrices give the origin.
    """
    parts = (item_transform or "").split()
    if len(parts) < AFFINE_COMPONENTS:
        return Position(0.0, 0.0)
    try:
        return Position(float(parts[-2]), float(parts[-1]))
    except ValueError:
        return Position(0.0, 0.0)


def squared_distance(a: Position, b: Position) -> float:
    """Squared euclidean distance between two page positions."""
    dx = a.x - b.x
    dy = a.y - b.y
    return dx * dx + dy * dy
