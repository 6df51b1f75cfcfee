"""toolbox XML for blocks, buttons and separators"""

from typing import Iterable

from blockforge.constants import SEPARATOR_GAP
from blockforge.conversion.argument_resolver import ResolvedArgument
from blockforge.conversion.messages import xml_escape
from blockforge.entities import BlockDescriptor


def button_xml(text: str, callback_key: str) -> str:
    return f'<button text="{xml_escape(text)}" callbackKey="{xml_escape(callback_key)}"></button>'


def separator_xml() -> str:
    return f'<sep gap="{SEPARATOR_GAP}"/>'


def input_xml(argument: ResolvedArgument) -> str:
    if argument.value_name:
        return f'<value name="{argument.value_name}">{argument.xml}</value>'
    return argument.xml


def mutation_xml(block: BlockDescriptor) -> str:
    """dynamic blocks carry their own descriptor so the editor can rebuild them"""
    block_info = block.model_dump_json(by_alias=True, exclude_none=True)
    return f'<mutation blockInfo="{xml_escape(block_info)}"/>'


def block_xml(block_type: str, arguments: Iterable[ResolvedArgument], mutation: str = "") -> str:
    inputs = "".join(input_xml(argument) for argument in arguments)
    return f'<block type="{block_type}">{mutation}{inputs}</block>'
