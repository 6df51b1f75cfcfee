from typing import Any

from blockforge.constants import OUTPUT_SHAPE_ROUND, OUTPUT_SHAPE_SQUARE
from blockforge.conversion.messages import format_message, xml_escape
from blockforge.entities import CategoryInfo, MenuDefinition, MenuInfo, MessageDescriptor
from blockforge.errors import MalformedTemplateError


def menu_block_id(extension_id: str, menu_name: str) -> str:
    return f"{extension_id}_menu_{xml_escape(menu_name)}"


def convert_menu_items(menu_name: str, items: list[Any]) -> list[list[Any]]:
    """turn menu items into [text, value] dropdown options"""
    options: list[list[Any]] = []
    for item in items:
        if isinstance(item, (str, MessageDescriptor)):
            text = format_message(item)
            options.append([text, text])
        elif isinstance(item, dict) and "text" in item:
            options.append([format_message(item["text"]), item.get("value")])
        elif isinstance(item, dict) and "default" in item:
            text = format_message(item)
            options.append([text, text])
        else:
            raise MalformedTemplateError(
                f"can't interpret item of menu {menu_name}: {item!r}",
                detail={"menu": menu_name, "item": repr(item)},
            )
    return options


def build_menu_definition(menu_name: str, menu: MenuInfo, category: CategoryInfo) -> MenuDefinition:
    return MenuDefinition(
        name=menu_name,
        block_json={
            "message0": "%1",
            "type": menu_block_id(category.id, menu_name),
            "inputsInline": True,
            "output": "String",
            "colour": category.color1,
            "colourSecondary": category.color2,
            "colourTertiary": category.color3,
            "outputShape": OUTPUT_SHAPE_ROUND if menu.accept_reporters else OUTPUT_SHAPE_SQUARE,
            "args0": [
                {
                    "type": "field_dropdown",
                    "name": menu_name,
                    "options": convert_menu_items(menu_name, menu.items),
                }
            ],
        },
    )
