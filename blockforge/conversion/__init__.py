"""extension metadata -> block factory JSON and toolbox XML"""

from blockforge.conversion.driver import ConversionDriver
from blockforge.conversion.field_types import FieldTypeRegistry, field_type_registry
from blockforge.conversion.options import ConversionOptions
from blockforge.conversion.toolbox import category_xml

__all__ = [
    "ConversionDriver",
    "ConversionOptions",
    "FieldTypeRegistry",
    "field_type_registry",
    "category_xml",
]
