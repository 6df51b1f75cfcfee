"""
Tests for block factory JSON: shapes, line layout, icons and branches.
"""

from blockforge.constants import OUTPUT_SHAPE_ROUND, OUTPUT_SHAPE_SQUARE
from blockforge.conversion import ConversionDriver, ConversionOptions, FieldTypeRegistry


def convert_block(block: dict, options: ConversionOptions | None = None, **extension) -> dict:
    driver = ConversionDriver(field_registry=FieldTypeRegistry(), options=options or ConversionOptions())
    info = {"id": "ext", "name": "Ext", "blocks": [block], **extension}
    return driver.convert(info).category_info.blocks[0].block_json


class TestShapes:
    def test_command(self):
        block_json = convert_block({"opcode": "go", "blockType": "command", "text": "go"})

        assert block_json["type"] == "ext_go"
        assert block_json["outputShape"] == OUTPUT_SHAPE_SQUARE
        assert "previousStatement" in block_json and block_json["previousStatement"] is None
        assert "nextStatement" in block_json and block_json["nextStatement"] is None
        assert "output" not in block_json
        assert block_json["inputsInline"] is True
        assert block_json["checkboxInFlyout"] is True

    def test_terminal_command_has_no_next_statement(self):
        block_json = convert_block(
            {"opcode": "stop", "blockType": "command", "text": "stop", "isTerminal": True}
        )
        assert "previousStatement" in block_json
        assert "nextStatement" not in block_json

    def test_reporter(self):
        block_json = convert_block({"opcode": "value", "blockType": "reporter", "text": "value"})

        assert block_json["output"] == "String"
        assert block_json["outputShape"] == OUTPUT_SHAPE_ROUND
        assert "previousStatement" not in block_json
        assert "nextStatement" not in block_json

    def test_boolean(self):
        block_json = convert_block({"opcode": "isOn", "blockType": "Boolean", "text": "on?"})

        assert block_json["output"] == "Boolean"
        assert block_json["outputShape"] == OUTPUT_SHAPE_ROUND
        assert "previousStatement" not in block_json

    def test_hat(self):
        block_json = convert_block({"opcode": "whenPressed", "blockType": "hat", "text": "when pressed"})

        assert "nextStatement" in block_json
        assert "previousStatement" not in block_json
        assert "output" not in block_json

    def test_disable_monitor_drops_checkbox(self):
        block_json = convert_block(
            {"opcode": "value", "blockType": "reporter", "text": "value", "disableMonitor": True}
        )
        assert "checkboxInFlyout" not in block_json

    def test_category_colours(self):
        block_json = convert_block(
            {"opcode": "go", "blockType": "command", "text": "go"},
            color1="#111111",
            color2="#222222",
            color3="#333333",
        )
        assert block_json["category"] == "Ext"
        assert block_json["colour"] == "#111111"
        assert block_json["colourSecondary"] == "#222222"
        assert block_json["colourTertiary"] == "#333333"


class TestLines:
    def test_each_text_line_is_numbered_from_one(self):
        block_json = convert_block(
            {
                "opcode": "two",
                "blockType": "command",
                "text": ["set [A]", "and [B]"],
                "arguments": {"A": {"type": "number"}, "B": {"type": "number"}},
            }
        )

        assert block_json["message0"] == "set %1"
        assert block_json["args0"] == [{"type": "input_value", "name": "A"}]
        assert block_json["message1"] == "and %1"
        assert block_json["args1"] == [{"type": "input_value", "name": "B"}]

    def test_repeated_placeholder_gets_its_own_substitution(self):
        block_json = convert_block(
            {
                "opcode": "twice",
                "blockType": "command",
                "text": "[X] and [X]",
                "arguments": {"X": {"type": "string"}},
            }
        )
        assert block_json["message0"] == "%1 and %2"
        assert [arg["name"] for arg in block_json["args0"]] == ["X", "X"]

    def test_line_without_arguments_has_no_args_key(self):
        block_json = convert_block({"opcode": "go", "blockType": "command", "text": "go"})
        assert block_json["message0"] == "go"
        assert "args0" not in block_json


class TestIcons:
    def test_icon_with_text(self):
        block_json = convert_block(
            {
                "opcode": "say",
                "blockType": "command",
                "text": "say [TEXT]",
                "arguments": {"TEXT": {}},
                "blockIconURI": "icon.svg",
            }
        )

        assert block_json["message0"] == "%1 %2say %3"
        assert block_json["args0"][0] == {"type": "field_image", "src": "icon.svg", "width": 40, "height": 40}
        assert block_json["args0"][1] == {"type": "field_vertical_separator"}
        assert block_json["args0"][2] == {"type": "input_value", "name": "TEXT"}

    def test_icon_without_text_has_no_separator(self):
        block_json = convert_block({"opcode": "icon", "blockType": "command", "blockIconURI": "icon.svg"})

        assert block_json["message0"] == "%1"
        assert len(block_json["args0"]) == 1

    def test_extension_icon_is_fallback(self):
        block_json = convert_block(
            {"opcode": "go", "blockType": "command", "text": "go"}, blockIconURI="ext.svg"
        )
        assert block_json["args0"][0]["src"] == "ext.svg"

    def test_no_icon_no_scratch_extension(self):
        block_json = convert_block({"opcode": "go", "blockType": "command", "text": "go"})
        assert block_json["extensions"] == ["from_extension"]

    def test_icon_compat_always(self):
        block_json = convert_block(
            {"opcode": "go", "blockType": "command", "text": "go", "blockIconURI": "icon.svg"}
        )
        assert block_json["extensions"] == ["from_extension", "scratch_extension"]

    def test_icon_compat_never(self):
        block_json = convert_block(
            {"opcode": "go", "blockType": "command", "text": "go", "blockIconURI": "bad uri"},
            options=ConversionOptions(icon_compat="never"),
        )
        assert block_json["extensions"] == ["from_extension"]

    def test_icon_compat_invalid_only_flags_bad_uris(self):
        options = ConversionOptions(icon_compat="invalid")
        good = convert_block(
            {"opcode": "a", "blockType": "command", "blockIconURI": "data:image/png;base64,AAAA"},
            options=options,
        )
        bad = convert_block(
            {"opcode": "b", "blockType": "command", "blockIconURI": "invalid icon URI"},
            options=options,
        )

        assert good["extensions"] == ["from_extension"]
        assert bad["extensions"] == ["from_extension", "scratch_extension"]

    def test_custom_icon_check(self):
        options = ConversionOptions(icon_check=lambda uri: uri.startswith("legacy:"))
        block_json = convert_block(
            {"opcode": "a", "blockType": "command", "blockIconURI": "legacy:robot"}, options=options
        )
        assert "scratch_extension" in block_json["extensions"]


class TestBranches:
    def test_conditional_defaults_to_two_branches(self):
        block_json = convert_block(
            {
                "opcode": "ifElse",
                "blockType": "conditional",
                "text": "if [C]",
                "arguments": {"C": {"type": "Boolean"}},
            }
        )

        assert block_json["message0"] == "if %1"
        assert block_json["message1"] == "%1"
        assert block_json["args1"] == [{"type": "input_statement", "name": "SUBSTACK"}]
        assert block_json["message2"] == "%1"
        assert block_json["args2"] == [{"type": "input_statement", "name": "SUBSTACK2"}]
        assert "message3" not in block_json

    def test_single_branch_conditional(self):
        block_json = convert_block(
            {"opcode": "when", "blockType": "conditional", "text": "if", "branchCount": 1}
        )
        assert block_json["args1"][0]["name"] == "SUBSTACK"
        assert "message2" not in block_json

    def test_branch_lines_interleave_with_text(self):
        block_json = convert_block(
            {
                "opcode": "three",
                "blockType": "conditional",
                "branchCount": 3,
                "text": ["first", "second", "third"],
            }
        )

        messages = [block_json[f"message{i}"] for i in range(6)]
        assert messages == ["first", "%1", "second", "%1", "third", "%1"]
        assert block_json["args5"][0]["name"] == "SUBSTACK3"

    def test_loop_adds_arrow_after_branch(self):
        block_json = convert_block(
            {"opcode": "forever", "blockType": "loop", "text": "forever"},
            options=ConversionOptions(loop_arrow_uri="/media/repeat.svg"),
        )

        assert block_json["message0"] == "forever"
        assert block_json["args1"] == [{"type": "input_statement", "name": "SUBSTACK"}]
        assert block_json["lastDummyAlign2"] == "RIGHT"
        assert block_json["message2"] == "%1"
        assert block_json["args2"] == [
            {
                "type": "field_image",
                "src": "/media/repeat.svg",
                "width": 24,
                "height": 24,
                "alt": "*",
                "flip_rtl": True,
            }
        ]
        assert "nextStatement" in block_json
