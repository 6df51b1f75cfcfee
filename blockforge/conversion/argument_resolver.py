"""
maps block arguments to block factory input specs and toolbox shadow XML.

each resolved argument carries the %N substitution (spec) and the XML that
goes inside the block's toolbox entry. when value_name is set, XmlBuilder wraps
the XML in <value name="...">; otherwise the XML is emitted as-is.
"""

import logging
from typing import Any

from pydantic import BaseModel

from blockforge.constants import INLINE_IMAGE_SIZE, ArgumentType
from blockforge.conversion.menus import convert_menu_items, menu_block_id
from blockforge.conversion.messages import format_message, xml_escape
from blockforge.entities import ArgumentDescriptor, ConvertedFieldType, MenuInfo
from blockforge.errors import MalformedTemplateError

logger = logging.getLogger(__name__)

# argument type -> (shadow block type, shadow field name)
BUILTIN_SHADOWS: dict[str, tuple[str, str]] = {
    ArgumentType.ANGLE.value: ("math_number", "NUM"),
    ArgumentType.COLOR.value: ("colour_picker", "COLOUR"),
    ArgumentType.MATRIX.value: ("matrix", "MATRIX"),
    ArgumentType.NOTE.value: ("note", "NOTE"),
    ArgumentType.NUMBER.value: ("math_number", "NUM"),
    ArgumentType.STRING.value: ("text", "TEXT"),
}

BOOLEAN_CHECK = "Boolean"


class ResolvedArgument(BaseModel):
    name: str
    spec: dict[str, Any]
    value_name: str | None = None
    xml: str = ""


def render_shadow(shadow_type: str, field_name: str, default: str) -> str:
    field = f'<field name="{field_name}">{default}</field>' if default else ""
    return f'<shadow type="{shadow_type}">{field}</shadow>'


def inline_image_json(argument: ArgumentDescriptor) -> dict[str, Any]:
    if not argument.data_uri:
        logger.warning("missing data URI in block argument of type image")
    return {
        "type": "field_image",
        "src": argument.data_uri or "",
        "width": INLINE_IMAGE_SIZE,
        "height": INLINE_IMAGE_SIZE,
        "flip_rtl": argument.flip_rtl,
    }


def branch_input(index: int) -> dict[str, Any]:
    """statement input for the index-th (0-based) branch of a C-shaped block"""
    return {
        "type": "input_statement",
        "name": "SUBSTACK" if index == 0 else f"SUBSTACK{index + 1}",
    }


class ArgumentResolver:
    def __init__(
        self,
        extension_id: str,
        custom_field_types: dict[str, ConvertedFieldType] | None = None,
        menus: dict[str, MenuInfo] | None = None,
    ):
        self.extension_id = extension_id
        self.custom_field_types = custom_field_types or {}
        self.menus = menus or {}

    def resolve(self, name: str, argument: ArgumentDescriptor | None) -> ResolvedArgument:
        if argument is None:
            # placeholder without a declared argument (non-strict parsing)
            return ResolvedArgument(
                name=name, spec={"type": "input_value", "name": name}, value_name=name
            )

        if argument.type == ArgumentType.IMAGE.value:
            return ResolvedArgument(name=name, spec=inline_image_json(argument))

        spec: dict[str, Any] = {"type": "input_value", "name": name}
        if argument.type == ArgumentType.BOOLEAN.value:
            spec["check"] = BOOLEAN_CHECK

        default = xml_escape(format_message(argument.default_value))

        if argument.menu:
            return self._resolve_menu(name, argument.menu, spec, default)

        shadow = self._shadow_for(argument.type)
        if shadow is None:
            if argument.type != ArgumentType.BOOLEAN.value:
                logger.warning(
                    f"unknown argument type {argument.type!r} for {name} in extension "
                    f"{self.extension_id}, using an empty input"
                )
            return ResolvedArgument(name=name, spec=spec, value_name=name)

        shadow_type, field_name = shadow
        return ResolvedArgument(
            name=name,
            spec=spec,
            value_name=name,
            xml=render_shadow(shadow_type, field_name, default),
        )

    def _shadow_for(self, argument_type: str) -> tuple[str, str] | None:
        if argument_type in BUILTIN_SHADOWS:
            return BUILTIN_SHADOWS[argument_type]
        custom = self.custom_field_types.get(argument_type)
        if custom is not None:
            return custom.shadow_type, custom.shadow_field_name
        return None

    def _resolve_menu(
        self, name: str, menu_name: str, spec: dict[str, Any], default: str
    ) -> ResolvedArgument:
        menu = self.menus.get(menu_name)
        if menu is None:
            raise MalformedTemplateError(
                f"argument {name} references unknown menu {menu_name}",
                detail={"argument": name, "menu": menu_name, "menus": sorted(self.menus)},
            )

        if menu.accept_reporters:
            shadow_type = menu_block_id(self.extension_id, menu_name)
            return ResolvedArgument(
                name=name,
                spec=spec,
                value_name=name,
                xml=render_shadow(shadow_type, menu_name, default),
            )

        # static dropdown rendered inline on the block, no input socket
        dropdown = {
            "type": "field_dropdown",
            "name": name,
            "options": convert_menu_items(menu_name, menu.items),
        }
        xml = f'<field name="{name}">{default}</field>' if default else ""
        return ResolvedArgument(name=name, spec=dropdown, xml=xml)
