"""
Extension metadata files on disk (YAML or JSON)
"""

import json
import logging
from pathlib import Path

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from blockforge.entities import ExtensionMetadata

logger = logging.getLogger(__name__)

EXTENSION_FILE_SUFFIXES = (".yaml", ".yml", ".json")


def load_extension_file(path: Path) -> ExtensionMetadata:
    """read and validate one metadata file"""
    with open(path, "r") as f:
        data = json.load(f) if path.suffix == ".json" else yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must contain a mapping at the top level")
    return ExtensionMetadata.model_validate(data)


class ExtensionLibrary:
    """Extension metadata discovered in a directory"""

    def __init__(self, extensions_dir: Path | None = None):
        if extensions_dir is None:
            from config import settings

            extensions_dir = settings.EXTENSIONS_PATH
        self.extensions_dir = extensions_dir
        self._extensions: dict[str, ExtensionMetadata] = {}
        self._sources: dict[str, Path] = {}
        self.reload()

    def reload(self) -> None:
        """re-read every metadata file in the directory"""
        self._extensions.clear()
        self._sources.clear()
        if not self.extensions_dir.exists():
            return

        for path in sorted(self.extensions_dir.iterdir()):
            if path.suffix not in EXTENSION_FILE_SUFFIXES or path.name.startswith("_"):
                continue
            try:
                self.load_file(path)
            except (OSError, ValueError, yaml.YAMLError, ValidationError) as e:
                logger.warning(f"failed to load extension file {path}: {e}")

    def load_file(self, path: Path) -> ExtensionMetadata:
        metadata = load_extension_file(path)
        previous = self._sources.get(metadata.id)
        if previous is not None and previous != path:
            logger.warning(f"extension {metadata.id} in {path} overrides {previous}")
        self._extensions[metadata.id] = metadata
        self._sources[metadata.id] = path
        return metadata

    def list_extensions(self) -> list[ExtensionMetadata]:
        return list(self._extensions.values())

    def get_extension(self, extension_id: str) -> ExtensionMetadata | None:
        return self._extensions.get(extension_id)

    def source_of(self, extension_id: str) -> Path | None:
        return self._sources.get(extension_id)
