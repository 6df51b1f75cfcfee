"""
custom field types: per-extension definitions and the process-wide registry.

the editor must be told about each distinct custom field type exactly once for
the lifetime of the process, no matter how many extensions declare it.
"""

import logging
import threading
from typing import Any

from blockforge.entities import CategoryInfo, ConvertedFieldType, CustomFieldType, FieldTypeAdded

logger = logging.getLogger(__name__)


def build_custom_field_type(
    type_name: str, field_type: CustomFieldType, category: CategoryInfo
) -> ConvertedFieldType:
    extended_name = f"{category.id}_{type_name}"
    field_name = f"field_{extended_name}"
    return ConvertedFieldType(
        field_type=type_name,
        extended_name=extended_name,
        shadow_type=extended_name,
        shadow_field_name=field_name,
        block_json={
            "type": extended_name,
            "message0": "%1",
            "inputsInline": True,
            "output": field_type.output,
            "colour": category.color1,
            "colourSecondary": category.color2,
            "colourTertiary": category.color3,
            "outputShape": field_type.output_shape,
            "args0": [{"name": field_name, "type": field_name}],
            "extensions": ["from_extension"],
        },
        implementation=field_type.implementation,
    )


class FieldTypeRegistry:
    """ordered, thread-safe set of custom field types already announced"""

    def __init__(self) -> None:
        self._registered: dict[str, FieldTypeAdded] = {}  # type name -> announcement
        self._lock = threading.Lock()

    def ensure_registered(
        self, type_name: str, implementation: Any = None, extension_id: str = ""
    ) -> FieldTypeAdded | None:
        """
        record a custom field type.

        returns the announcement to publish the first time a type name is seen,
        None on every later call.
        """
        with self._lock:
            if type_name in self._registered:
                return None

            field_name = f"field_{extension_id}_{type_name}" if extension_id else f"field_{type_name}"
            added = FieldTypeAdded(
                name=type_name,
                field_name=field_name,
                extension_id=extension_id,
                implementation=implementation,
            )
            self._registered[type_name] = added

        logger.info(f"registered custom field type {type_name} from extension {extension_id}")
        return added

    def is_registered(self, type_name: str) -> bool:
        with self._lock:
            return type_name in self._registered

    def get(self, type_name: str) -> FieldTypeAdded | None:
        with self._lock:
            return self._registered.get(type_name)

    def registered_types(self) -> list[str]:
        """type names in registration order"""
        with self._lock:
            return list(self._registered)

    def reset(self) -> None:
        """forget every registration; only for process teardown and tests"""
        with self._lock:
            self._registered.clear()

    def __contains__(self, type_name: object) -> bool:
        return isinstance(type_name, str) and self.is_registered(type_name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._registered)


# process-wide instance
field_type_registry = FieldTypeRegistry()
