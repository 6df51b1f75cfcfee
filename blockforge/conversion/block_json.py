from typing import Any

from pydantic import BaseModel

from blockforge.constants import (
    BLOCK_ICON_SIZE,
    INLINE_IMAGE_SIZE,
    OUTPUT_SHAPE_ROUND,
    OUTPUT_SHAPE_SQUARE,
    BlockType,
)
from blockforge.conversion.argument_resolver import ResolvedArgument, branch_input
from blockforge.conversion.options import ConversionOptions
from blockforge.conversion.template_parser import TemplateLine
from blockforge.entities import BlockDescriptor, CategoryInfo


class ShapeRules(BaseModel):
    """block factory fields decided by the block's shape"""

    model_config = {"frozen": True}

    output_shape: int
    output: str | None = None
    previous_statement: bool = False
    next_statement: bool = False
    default_branch_count: int = 0


SHAPE_RULES: dict[BlockType, ShapeRules] = {
    BlockType.COMMAND: ShapeRules(
        output_shape=OUTPUT_SHAPE_SQUARE, previous_statement=True, next_statement=True
    ),
    BlockType.REPORTER: ShapeRules(output_shape=OUTPUT_SHAPE_ROUND, output="String"),
    BlockType.BOOLEAN: ShapeRules(output_shape=OUTPUT_SHAPE_ROUND, output="Boolean"),
    BlockType.HAT: ShapeRules(output_shape=OUTPUT_SHAPE_SQUARE, next_statement=True),
    BlockType.EVENT: ShapeRules(output_shape=OUTPUT_SHAPE_SQUARE, next_statement=True),
    BlockType.CONDITIONAL: ShapeRules(
        output_shape=OUTPUT_SHAPE_SQUARE,
        previous_statement=True,
        next_statement=True,
        default_branch_count=2,
    ),
    BlockType.LOOP: ShapeRules(
        output_shape=OUTPUT_SHAPE_SQUARE,
        previous_statement=True,
        next_statement=True,
        default_branch_count=1,
    ),
}

VERTICAL_SEPARATOR = {"type": "field_vertical_separator"}


def block_icon_json(icon_uri: str) -> dict[str, Any]:
    return {
        "type": "field_image",
        "src": icon_uri,
        "width": BLOCK_ICON_SIZE,
        "height": BLOCK_ICON_SIZE,
    }


def loop_arrow_json(src: str) -> dict[str, Any]:
    return {
        "type": "field_image",
        "src": src,
        "width": INLINE_IMAGE_SIZE,
        "height": INLINE_IMAGE_SIZE,
        "alt": "*",
        "flip_rtl": True,
    }


class BlockJsonBuilder:
    """
    assembles the block factory definition for one scriptable block.

    output lines alternate between text lines and branch slots: text line 0,
    branch 1, text line 1, branch 2, ... until both run out. each output line
    becomes message{i}, with args{i} holding its %1, %2, ... substitutions.
    """

    def __init__(self, category: CategoryInfo, options: ConversionOptions | None = None):
        self.category = category
        self.options = options or ConversionOptions()

    def build(
        self,
        block: BlockDescriptor,
        block_type: BlockType,
        lines: list[TemplateLine],
        resolved: dict[str, ResolvedArgument],
    ) -> dict[str, Any]:
        rules = SHAPE_RULES[block_type]
        icon_uri = block.block_icon_uri or self.category.block_icon_uri

        block_json: dict[str, Any] = {
            "type": f"{self.category.id}_{block.opcode}",
            "inputsInline": True,
            "category": self.category.name,
            "colour": self.category.color1,
            "colourSecondary": self.category.color2,
            "colourTertiary": self.category.color3,
            "extensions": self._extensions(icon_uri),
            "outputShape": rules.output_shape,
        }
        if rules.output is not None:
            block_json["output"] = rules.output
        if rules.previous_statement:
            block_json["previousStatement"] = None
        if rules.next_statement and not block.is_terminal:
            block_json["nextStatement"] = None
        if not block.disable_monitor:
            block_json["checkboxInFlyout"] = True

        lines = lines or [[]]
        if icon_uri:
            self._add_icon(block_json, icon_uri, has_text=bool(lines[0]))

        branch_count = 0
        if rules.default_branch_count:
            branch_count = (
                block.branch_count if block.branch_count is not None else rules.default_branch_count
            )

        text_index = branch_index = out_line = 0
        while text_index < len(lines) or branch_index < branch_count:
            if text_index < len(lines):
                self._add_text_line(block_json, out_line, lines[text_index], resolved)
                text_index += 1
                out_line += 1
            if branch_index < branch_count:
                block_json[f"message{out_line}"] = "%1"
                block_json[f"args{out_line}"] = [branch_input(branch_index)]
                branch_index += 1
                out_line += 1

        if block_type is BlockType.LOOP:
            # loop arrow in the bottom right corner
            block_json[f"lastDummyAlign{out_line}"] = "RIGHT"
            block_json[f"message{out_line}"] = "%1"
            block_json[f"args{out_line}"] = [loop_arrow_json(self.options.loop_arrow_uri)]

        return block_json

    def _extensions(self, icon_uri: str | None) -> list[str]:
        extensions = ["from_extension"]
        if icon_uri and self.options.icon_needs_compat(icon_uri):
            extensions.append("scratch_extension")
        return extensions

    @staticmethod
    def _add_icon(block_json: dict[str, Any], icon_uri: str, has_text: bool) -> None:
        if has_text:
            block_json["message0"] = "%1 %2"
            block_json["args0"] = [block_icon_json(icon_uri), dict(VERTICAL_SEPARATOR)]
        else:
            block_json["message0"] = "%1"
            block_json["args0"] = [block_icon_json(icon_uri)]

    @staticmethod
    def _add_text_line(
        block_json: dict[str, Any],
        out_line: int,
        segments: TemplateLine,
        resolved: dict[str, ResolvedArgument],
    ) -> None:
        args: list[dict[str, Any]] = block_json.get(f"args{out_line}", [])
        parts = [block_json.get(f"message{out_line}", "")]

        for segment in segments:
            if segment.is_placeholder:
                args.append(dict(resolved[segment.value].spec))
                parts.append(f"%{len(args)}")
            else:
                parts.append(segment.value)

        block_json[f"message{out_line}"] = "".join(parts)
        if args:
            block_json[f"args{out_line}"] = args
