"""domain entities organized by concern"""

from blockforge.entities.conversion import (
    CategoryInfo,
    ConversionOutcome,
    ConversionResult,
    ConvertedFieldType,
    FieldTypeAdded,
    HatInfo,
    MenuDefinition,
)
from blockforge.entities.extension import (
    ArgumentDescriptor,
    BlockDescriptor,
    CustomFieldType,
    ExtensionMetadata,
    MenuInfo,
    Message,
    MessageDescriptor,
)

__all__ = [
    # Extension metadata (input)
    "ExtensionMetadata",
    "BlockDescriptor",
    "ArgumentDescriptor",
    "CustomFieldType",
    "MenuInfo",
    "Message",
    "MessageDescriptor",
    # Conversion output
    "CategoryInfo",
    "ConversionResult",
    "ConvertedFieldType",
    "MenuDefinition",
    "ConversionOutcome",
    "FieldTypeAdded",
    "HatInfo",
]
