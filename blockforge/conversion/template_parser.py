"""
block text lexer.

a block's text is one string or a list of strings (one per line). placeholders
are written as [NAME] and must name an entry of the block's argument mapping.
the parser only tokenizes; branch lines, icons and %N numbering are applied by
BlockJsonBuilder.
"""

import re
from enum import Enum
from typing import Any, Mapping, Sequence

from pydantic import BaseModel

from blockforge.conversion.messages import format_message
from blockforge.errors import MalformedTemplateError

PLACEHOLDER_PATTERN = re.compile(r"\[(.+?)]")
_UNSAFE_NAME_CHARS = re.compile(r'[<"&]')


class SegmentKind(str, Enum):
    LITERAL = "literal"
    PLACEHOLDER = "placeholder"


class Segment(BaseModel):
    model_config = {"frozen": True}

    kind: SegmentKind
    value: str

    @property
    def is_placeholder(self) -> bool:
        return self.kind == SegmentKind.PLACEHOLDER


TemplateLine = list[Segment]


def sanitize_placeholder(name: str) -> str:
    """placeholder names end up in XML attributes"""
    return _UNSAFE_NAME_CHARS.sub("_", name)


def tokenize_line(line: str) -> TemplateLine:
    segments: TemplateLine = []
    position = 0
    for match in PLACEHOLDER_PATTERN.finditer(line):
        if match.start() > position:
            segments.append(Segment(kind=SegmentKind.LITERAL, value=line[position : match.start()]))
        segments.append(
            Segment(kind=SegmentKind.PLACEHOLDER, value=sanitize_placeholder(match.group(1)))
        )
        position = match.end()
    if position < len(line):
        segments.append(Segment(kind=SegmentKind.LITERAL, value=line[position:]))
    return segments


def parse_template(
    text: Any | Sequence[Any],
    arguments: Mapping[str, Any],
    strict: bool = True,
) -> list[TemplateLine]:
    """
    split block text into lines of literal and placeholder segments.

    raises MalformedTemplateError for a placeholder with no matching argument
    unless strict is off.
    """
    lines = list(text) if isinstance(text, (list, tuple)) else [text]
    parsed: list[TemplateLine] = []

    for line_number, line in enumerate(lines):
        segments = tokenize_line(format_message(line))
        if strict:
            for segment in segments:
                if segment.is_placeholder and segment.value not in arguments:
                    raise MalformedTemplateError(
                        f"placeholder [{segment.value}] has no matching argument",
                        detail={
                            "placeholder": segment.value,
                            "line": line_number,
                            "arguments": sorted(arguments),
                        },
                    )
        parsed.append(segments)

    return parsed


def placeholder_names(lines: list[TemplateLine]) -> list[str]:
    """distinct placeholder names in order of first appearance"""
    names: list[str] = []
    for line in lines:
        for segment in line:
            if segment.is_placeholder and segment.value not in names:
                names.append(segment.value)
    return names
