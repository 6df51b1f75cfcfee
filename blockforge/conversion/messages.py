"""text helpers shared by the JSON and XML builders"""

from typing import Any
from xml.sax.saxutils import escape

from blockforge.entities import MessageDescriptor

_XML_ENTITIES = {"'": "&apos;", '"': "&quot;"}


def format_message(message: Any) -> str:
    """render display text, message descriptors and default values as plain text"""
    if message is None:
        return ""
    if isinstance(message, MessageDescriptor):
        return message.default
    if isinstance(message, dict) and "default" in message:
        return format_message(message["default"])
    if isinstance(message, bool):
        return "true" if message else "false"
    if isinstance(message, float) and message.is_integer():
        return str(int(message))
    return str(message)


def xml_escape(text: str) -> str:
    return escape(text, _XML_ENTITIES)
