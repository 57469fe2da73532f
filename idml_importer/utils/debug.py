"""Helpers to persist import results for debugging."""
from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any

from idml_importer.model.import_model import ImportResult


class DebugDumper:
    """Writes intermediate artifacts onto disk for inspection."""

    FILENAME = "import_result.json"

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def render(self, result: ImportResult) -> None:
        self.dump(result)

    def dump(self, result: ImportResult) -> Path:
        """Persist the import result as JSON for offline analysis."""
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / self.FILENAME
        payload = self._serialize(result)
        target.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        return target

    def _serialize(self, value: Any) -> Any:
        if is_dataclass(value) and not isinstance(value, type):
            return {k: self._serialize(v) for k, v in asdict(value).items()}
        if isinstance(value, dict):
            return {k: self._serialize(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._serialize(v) for v in value]
        return value
