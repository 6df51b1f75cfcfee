import logging
import re
from typing import Callable, Literal

from pydantic import BaseModel

logger = logging.getLogger(__name__)

IconCompatMode = Literal["always", "invalid", "never"]
ICON_COMPAT_MODES = ("always", "invalid", "never")

_DATA_IMAGE_URI = re.compile(r"^data:image/[\w.+-]+(;[\w=-]+)*(;base64)?,\S+$", re.IGNORECASE)
_HTTP_URI = re.compile(r"^https?://\S+$", re.IGNORECASE)
_IMAGE_PATH = re.compile(r"^[\w./~-]+\.(svg|png|jpe?g|gif|webp)$", re.IGNORECASE)


def is_wellformed_icon_uri(uri: str) -> bool:
    """embeddable image: data:image URI, http(s) URL or a path to an image file"""
    uri = uri.strip()
    return bool(_DATA_IMAGE_URI.match(uri) or _HTTP_URI.match(uri) or _IMAGE_PATH.match(uri))


class ConversionOptions(BaseModel):
    """compiler knobs; defaults come from config.settings"""

    icon_compat: IconCompatMode = "always"
    # overrides icon_compat when set: returns True if the icon needs the compat flag
    icon_check: Callable[[str], bool] | None = None
    strict_placeholders: bool = True
    loop_arrow_uri: str = "./static/blocks-media/repeat.svg"

    @classmethod
    def from_settings(cls) -> "ConversionOptions":
        from config import settings

        mode = settings.ICON_COMPAT
        if mode not in ICON_COMPAT_MODES:
            logger.warning(
                f"invalid BLOCKFORGE_ICON_COMPAT {mode!r}, expected one of "
                f"{', '.join(ICON_COMPAT_MODES)}; using 'always'"
            )
            mode = "always"
        return cls(
            icon_compat=mode,
            strict_placeholders=settings.STRICT_PLACEHOLDERS,
            loop_arrow_uri=settings.LOOP_ARROW_URI,
        )

    def icon_needs_compat(self, icon_uri: str) -> bool:
        if self.icon_check is not None:
            return self.icon_check(icon_uri)
        if self.icon_compat == "always":
            return True
        if self.icon_compat == "never":
            return False
        return not is_wellformed_icon_uri(icon_uri)
