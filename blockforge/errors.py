from typing import Any


class ConversionError(Exception):
    """structural problem in extension metadata that aborts conversion"""

    def __init__(self, message: str, detail: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or {}

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "detail": self.detail}


class MalformedTemplateError(ConversionError):
    """block text references an argument or menu that does not exist"""


class UnknownBlockTypeError(ConversionError):
    pass


class MissingFieldError(ConversionError):
    pass


class DuplicateExtensionError(Exception):
    """an extension with the same id is already registered"""


class ExtensionNotFoundError(Exception):
    pass
