"""shared constants for the block compiler"""

from enum import Enum


class BlockType(str, Enum):
    BOOLEAN = "Boolean"
    BUTTON = "button"
    COMMAND = "command"
    CONDITIONAL = "conditional"
    EVENT = "event"
    HAT = "hat"
    LOOP = "loop"
    REPORTER = "reporter"


class ArgumentType(str, Enum):
    ANGLE = "angle"
    BOOLEAN = "Boolean"
    COLOR = "color"
    IMAGE = "image"
    MATRIX = "matrix"
    NOTE = "note"
    NUMBER = "number"
    STRING = "string"


# output shape codes understood by the block editor
OUTPUT_SHAPE_HEXAGONAL = 1
OUTPUT_SHAPE_ROUND = 2
OUTPUT_SHAPE_SQUARE = 3

# sentinel used in a block list to separate groups of blocks
SEPARATOR = "---"
SEPARATOR_GAP = 36

DEFAULT_EXTENSION_COLORS = ("#0FBD8C", "#0DA57A", "#0B8E69")

# button callbacks the editor handles itself
SUPPORTED_BUTTON_CALLBACKS = frozenset({"MAKE_A_LIST", "MAKE_A_PROCEDURE", "MAKE_A_VARIABLE"})

BLOCK_ICON_SIZE = 40
INLINE_IMAGE_SIZE = 24

# event names published by the runtime
EXTENSION_ADDED = "EXTENSION_ADDED"
EXTENSION_FIELD_ADDED = "EXTENSION_FIELD_ADDED"
BLOCKSINFO_UPDATE = "BLOCKSINFO_UPDATE"
