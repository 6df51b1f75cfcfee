"""
bridge between the block compiler and the editor's event bus.

the compiler returns category info plus the field types it newly registered;
the runtime keeps the registered categories and publishes:
- EXTENSION_FIELD_ADDED once per new custom field type
- EXTENSION_ADDED once per registered extension
- BLOCKSINFO_UPDATE when an extension is refreshed

event payloads and returned categories are copies, so listeners and callers
cannot change what the runtime has registered.
"""

import logging
import threading
from typing import Any

from blockforge.constants import (
    BLOCKSINFO_UPDATE,
    EXTENSION_ADDED,
    EXTENSION_FIELD_ADDED,
    BlockType,
)
from blockforge.conversion import ConversionDriver, category_xml
from blockforge.entities import BlockDescriptor, CategoryInfo, ExtensionMetadata, HatInfo
from blockforge.errors import DuplicateExtensionError, ExtensionNotFoundError
from blockforge.events import EventBus, Listener

logger = logging.getLogger(__name__)


class ExtensionRuntime:
    def __init__(self, bus: EventBus | None = None, driver: ConversionDriver | None = None):
        self.bus = bus or EventBus()
        self.driver = driver or ConversionDriver()
        self._categories: dict[str, CategoryInfo] = {}  # extension id -> category, in registration order
        self._primitives: dict[str, str] = {}  # block type -> opcode
        self._hats: dict[str, HatInfo] = {}
        self._extension_block_types: dict[str, list[str]] = {}
        # reentrant so listeners may query the runtime while an event is delivered
        self._lock = threading.RLock()

    def on(self, event_name: str, listener: Listener) -> None:
        self.bus.on(event_name, listener)

    def register_extension_primitives(
        self, extension_info: ExtensionMetadata | dict[str, Any]
    ) -> CategoryInfo:
        metadata = _as_metadata(extension_info)
        with self._lock:
            if metadata.id in self._categories:
                raise DuplicateExtensionError(f"extension {metadata.id} is already registered")

            outcome = self.driver.convert(metadata)
            self._install(outcome.category_info)

            for added in outcome.field_types_added:
                self.bus.emit(EXTENSION_FIELD_ADDED, added)
            self.bus.emit(EXTENSION_ADDED, outcome.category_info.model_copy(deep=True))

        return outcome.category_info.model_copy(deep=True)

    def refresh_extension_primitives(
        self, extension_info: ExtensionMetadata | dict[str, Any]
    ) -> CategoryInfo:
        metadata = _as_metadata(extension_info)
        with self._lock:
            if metadata.id not in self._categories:
                raise ExtensionNotFoundError(f"extension {metadata.id} is not registered")

            outcome = self.driver.convert(metadata)
            self._install(outcome.category_info)

            for added in outcome.field_types_added:
                self.bus.emit(EXTENSION_FIELD_ADDED, added)
            self.bus.emit(BLOCKSINFO_UPDATE, outcome.category_info.model_copy(deep=True))

        return outcome.category_info.model_copy(deep=True)

    def load_extension(self, extension_info: ExtensionMetadata | dict[str, Any]) -> CategoryInfo:
        """register a new extension or refresh one already known"""
        metadata = _as_metadata(extension_info)
        with self._lock:
            if metadata.id in self._categories:
                return self.refresh_extension_primitives(metadata)
            return self.register_extension_primitives(metadata)

    def _install(self, category: CategoryInfo) -> None:
        # drop block types left over from a previous version of this extension
        for block_type in self._extension_block_types.pop(category.id, []):
            self._primitives.pop(block_type, None)
            self._hats.pop(block_type, None)

        block_types: list[str] = []

        for block in category.blocks:
            if block.block_json is None or not isinstance(block.info, BlockDescriptor):
                continue
            block_type = block.block_json["type"]
            block_types.append(block_type)
            info = block.info
            if info.block_type != BlockType.EVENT.value:
                self._primitives[block_type] = info.opcode or ""
            if info.block_type in (BlockType.EVENT.value, BlockType.HAT.value):
                self._hats[block_type] = HatInfo(
                    edge_activated=info.is_edge_activated,
                    restart_existing_threads=info.should_restart_existing_threads,
                )

        self._extension_block_types[category.id] = block_types
        self._categories[category.id] = category

    def get_category(self, extension_id: str) -> CategoryInfo | None:
        with self._lock:
            category = self._categories.get(extension_id)
            return category.model_copy(deep=True) if category is not None else None

    def list_categories(self) -> list[CategoryInfo]:
        with self._lock:
            return [c.model_copy(deep=True) for c in self._categories.values()]

    def get_opcode_function(self, block_type: str) -> str | None:
        with self._lock:
            return self._primitives.get(block_type)

    def get_hat_info(self, block_type: str) -> HatInfo | None:
        with self._lock:
            return self._hats.get(block_type)

    def get_blocks_xml(self) -> list[dict[str, str]]:
        """toolbox category XML for every registered extension"""
        with self._lock:
            return [{"id": c.id, "xml": category_xml(c)} for c in self._categories.values()]

    def registered_field_types(self) -> list[str]:
        return self.driver.field_registry.registered_types()


def _as_metadata(extension_info: ExtensionMetadata | dict[str, Any]) -> ExtensionMetadata:
    if isinstance(extension_info, ExtensionMetadata):
        return extension_info
    return ExtensionMetadata.model_validate(extension_info)


# singleton instance
runtime = ExtensionRuntime()
