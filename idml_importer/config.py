"""Configuration objects and constants for an import run."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping

from idml_importer.model.style_model import DEFAULT_VOCABULARY, StyleVocabulary

LAYOUT_INFOSEITEN = "infoseiten"
LAYOUT_FOTOSTRECKE = "fotostrecke"
LAYOUTS = (LAYOUT_INFOSEITEN, LAYOUT_FOTOSTRECKE)
DEFAULT_LAYOUT = LAYOUT_INFOSEITEN

SPREADS_PREFIX = "Spreads/"
STORIES_PREFIX = "Stories/"


@dataclass
class ImportOptions:
    """Settings that select the layout and tune classification."""

    layout: str = DEFAULT_LAYOUT
    order: Mapping[str, int] = field(default_factory=dict)
    vocabulary: StyleVocabulary = DEFAULT_VOCABULARY

    def __post_init__(self) -> None:
        if self.layout not in LAYOUTS:
            raise ValueError(f"Unknown layout {self.layout!r}; expected one of {', '.join(LAYOUTS)}")
        self.order = self._coerce_order(self.order)

    @staticmethod
    def _coerce_order(order: Mapping[str, int]) -> Dict[str, int]:
        coerced: Dict[str, int] = {}
        for story_id, value in order.items():
            try:
                coerced[str(story_id)] = int(value)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"Order for story {story_id!r} must be an integer, got {value!r}") from exc
        return coerced
