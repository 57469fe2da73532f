"""IDML package loader exposing the spread and story parts of the container."""
from __future__ import annotations

import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Protocol, Union

from idml_importer.utils.logger import get_logger

LOGGER = get_logger(__name__)


class IdmlPackageError(ValueError):
    """Raised when a container cannot be used for an import at all."""


class ContainerReader(Protocol):
    """Minimal read access the import pipeline needs from a container."""

    def namelist(self) -> List[str]:
        ...

    def read(self, name: str) -> bytes:
        ...


@dataclass(slots=True)
class IdmlPackage:
    """In-memory copy of the parts stored in an IDML archive."""

    raw_parts: Mapping[str, bytes]

    @classmethod
    def load(cls, idml_path: Union[str, Path]) -> "IdmlPackage":
        """Open an IDML archive and read every part into memory."""
        path = Path(idml_path)
        try:
            with zipfile.ZipFile(path) as idml_zip:
                parts = {name: idml_zip.read(name) for name in idml_zip.namelist()}
        except FileNotFoundError as exc:
            raise IdmlPackageError(f"IDML file not found: {path}") from exc
        # Encrypted members raise RuntimeError, unknown compression NotImplementedError
        except (zipfile.BadZipFile, OSError, RuntimeError) as exc:
            raise IdmlPackageError(f"Failed to open IDML {path.name}: {exc}") from exc

        LOGGER.debug("Loaded %d parts from %s", len(parts), path.name)
        return cls(raw_parts=parts)

    # ------------------------------------------------------------------
    # ContainerReader
    def namelist(self) -> List[str]:
        return list(self.raw_parts)

    def read(self, name: str) -> bytes:
        try:
            return self.raw_parts[name]
        except KeyError:
            raise KeyError(f"Part missing from IDML package: {name}") from None


def part_names(container: ContainerReader, prefix: str) -> List[str]:
    """Return ``<prefix>*.xml`` entries in container order."""
    return [name for name in container.namelist() if name.startswith(prefix) and name.endswith(".xml")]
