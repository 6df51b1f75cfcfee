"""application settings loaded from environment variables"""

import os
from pathlib import Path


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings:
    def __init__(self) -> None:
        self.HOST = os.getenv("HOST", "0.0.0.0")
        self.PORT = int(os.getenv("PORT", "8000"))
        self.DEBUG = _env_bool("DEBUG", "false")

        # directory of extension metadata files registered at startup
        self.EXTENSIONS_PATH = Path(os.getenv("BLOCKFORGE_EXTENSIONS_PATH", "user_extensions"))
        self.HOT_RELOAD = _env_bool("BLOCKFORGE_HOT_RELOAD", "true")
        self.HOT_RELOAD_DEBOUNCE_MS = int(os.getenv("BLOCKFORGE_HOT_RELOAD_DEBOUNCE_MS", "500"))

        # compiler behaviour
        self.ICON_COMPAT = os.getenv("BLOCKFORGE_ICON_COMPAT", "always").lower()
        self.STRICT_PLACEHOLDERS = _env_bool("BLOCKFORGE_STRICT_PLACEHOLDERS", "true")
        self.LOOP_ARROW_URI = os.getenv(
            "BLOCKFORGE_LOOP_ARROW_URI", "./static/blocks-media/repeat.svg"
        )

    def ensure_extensions_dir(self) -> None:
        self.EXTENSIONS_PATH.mkdir(parents=True, exist_ok=True)


settings = Settings()
