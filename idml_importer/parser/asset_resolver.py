"""Look up stored assets for the image file names an import expects."""
from __future__ import annotations

import json
import posixpath
import re
from difflib import SequenceMatcher
from pathlib import Path
from typing import List, Mapping, Protocol, Tuple, Union
from urllib.parse import unquote

from idml_importer.parser.image_assigner import small_rendition_basename
from idml_importer.utils.logger import get_logger

LOGGER = get_logger(__name__)

NOT_FOUND = 0
CANDIDATE_LIMIT = 50

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
_EXTENSION_PATTERN = re.compile(r"\.[a-z0-9]{2,5}$", re.IGNORECASE)
_TOKEN_PATTERN = re.compile(r"[^a-z0-9]+")


class AssetResolver(Protocol):
    """Resolves expected file names to positive asset ids (0 when missing)."""

    def find_by_filename(self, filename: str) -> int:
        ...

    def find_by_link_basename(self, link_basename: str) -> int:
        ...


class MappingAssetResolver:
    """Resolver over an index of stored file paths to asset ids.

    Lookups follow the media-library conventions: exact file name suffix,
    then slug of the stem, then the most similar candidate whose path
    contains the expected stem.
    """

    def __init__(self, index: Mapping[str, int]) -> None:
        # Newest (highest id) first, so ties resolve to the latest upload.
        self._entries: List[Tuple[str, int]] = sorted(
            ((str(path), int(asset_id)) for path, asset_id in index.items() if int(asset_id) > 0),
            key=lambda entry: entry[1],
            reverse=True,
        )

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "MappingAssetResolver":
        """Load a ``{"stored/path.jpg": id}`` JSON index."""
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise ValueError(f"Asset index {path} must be a JSON object")
        return cls(payload)

    def find_by_filename(self, filename: str) -> int:
        filename = filename.strip()
        if not filename:
            return NOT_FOUND

        for stored, asset_id in self._entries:
            if stored.lower().endswith(filename.lower()):
                return asset_id

        slug = slugify(posixpath.splitext(filename)[0])
        if not slug:
            return NOT_FOUND
        for stored, asset_id in self._entries:
            if slugify(posixpath.splitext(posixpath.basename(stored))[0]) == slug:
                return asset_id
        return NOT_FOUND

    def find_by_link_basename(self, link_basename: str) -> int:
        expected = small_rendition_basename(link_basename)
        needle = posixpath.splitext(expected)[0].lower()
        if not needle:
            return NOT_FOUND

        candidates = [entry for entry in self._entries if needle in entry[0].lower()][:CANDIDATE_LIMIT]
        target = normalize_filename_token(expected)
        best_id, best_score = NOT_FOUND, -1.0
        for stored, asset_id in candidates:
            token = normalize_filename_token(posixpath.basename(stored))
            if not token:
                continue
            score = SequenceMatcher(None, target, token).ratio()
            if score > best_score:
                best_id, best_score = asset_id, score
        return best_id


def slugify(value: str) -> str:
    return _SLUG_PATTERN.sub("-", unquote(value).lower()).strip("-")


def normalize_filename_token(name: str) -> str:
    """Lower-case name without extension and without non-alphanumerics."""
    name = _EXTENSION_PATTERN.sub("", name.lower())
    return _TOKEN_PATTERN.sub("", name)


def resolve_attachment(resolver: AssetResolver, expected_file: str, link_basename: str) -> int:
    """Try the derived rendition name first, then the original link name."""
    attachment_id = resolver.find_by_filename(expected_file) if expected_file else NOT_FOUND
    if attachment_id <= 0 and link_basename:
        attachment_id = resolver.find_by_link_basename(link_basename)
    if attachment_id <= 0:
        LOGGER.debug("No stored asset for %s (link %s)", expected_file, link_basename)
        return NOT_FOUND
    return attachment_id
