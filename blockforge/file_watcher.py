"""
File watcher for hot reload of extension metadata.

Monitors the extensions directory and re-registers an extension with the
runtime when its metadata file is added or modified.
"""

import logging
import os
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Callable

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from blockforge.errors import ConversionError
from blockforge.library import EXTENSION_FILE_SUFFIXES

if TYPE_CHECKING:
    from blockforge.library import ExtensionLibrary
    from blockforge.runtime import ExtensionRuntime

logger = logging.getLogger(__name__)


class DebouncedHandler(FileSystemEventHandler):
    """file event handler with debouncing, so an editor save triggers one reload"""

    def __init__(
        self,
        callback: Callable[[Path, str], None],
        debounce_ms: int = 500,
    ):
        self.callback = callback
        self.debounce_ms = debounce_ms
        self._pending: dict[str, threading.Timer] = {}
        self._lock = threading.Lock()

    def _schedule_callback(self, path: Path, event_type: str) -> None:
        key = str(path)

        with self._lock:
            previous = self._pending.get(key)
            if previous is not None:
                previous.cancel()

            timer = threading.Timer(
                self.debounce_ms / 1000,
                self._execute_callback,
                args=(path, event_type),
            )
            timer.daemon = True
            self._pending[key] = timer
            timer.start()

    def _execute_callback(self, path: Path, event_type: str) -> None:
        with self._lock:
            self._pending.pop(str(path), None)

        try:
            self.callback(path, event_type)
        except Exception as e:
            logger.exception(f"error in file watcher callback: {e}")

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._schedule_callback(Path(str(event.src_path)), "created")

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._schedule_callback(Path(str(event.src_path)), "modified")

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._schedule_callback(Path(str(event.src_path)), "deleted")


class ExtensionFileHandler(DebouncedHandler):
    """registers or refreshes the extension described by a changed file"""

    def __init__(
        self,
        library: "ExtensionLibrary",
        runtime: "ExtensionRuntime",
        debounce_ms: int = 500,
    ):
        self.library = library
        self.runtime = runtime
        super().__init__(self._handle_change, debounce_ms)

    def _handle_change(self, path: Path, event_type: str) -> None:
        if path.suffix not in EXTENSION_FILE_SUFFIXES or path.name.startswith("_"):
            return

        logger.info(f"extension file {event_type}: {path}")

        if event_type == "deleted":
            # the editor has no way to drop a category, so the extension stays registered
            logger.info(f"{path.name} removed; its extension stays registered until restart")
            return

        try:
            metadata = self.library.load_file(path)
            self.runtime.load_extension(metadata)
        except (OSError, ValueError, yaml.YAMLError, ValidationError, ConversionError) as e:
            logger.warning(f"could not reload extension from {path}: {e}")


class ExtensionFileWatcher:
    """watches the extensions directory for changes"""

    def __init__(
        self,
        library: "ExtensionLibrary",
        runtime: "ExtensionRuntime",
        extensions_path: Path | None = None,
    ):
        self.library = library
        self.runtime = runtime
        self.extensions_path = extensions_path or library.extensions_dir
        self._observer: Observer | None = None

    @property
    def is_running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        hot_reload = os.getenv("BLOCKFORGE_HOT_RELOAD", "true").lower() == "true"
        if not hot_reload:
            logger.info("hot reload disabled")
            return

        if not self.extensions_path.exists():
            logger.info(f"{self.extensions_path} does not exist, not watching")
            return

        debounce_ms = int(os.getenv("BLOCKFORGE_HOT_RELOAD_DEBOUNCE_MS", "500"))
        self._observer = Observer()
        self._observer.schedule(
            ExtensionFileHandler(self.library, self.runtime, debounce_ms),
            str(self.extensions_path),
            recursive=False,
        )
        self._observer.start()
        logger.info(f"watching {self.extensions_path} for extension changes")

    def stop(self) -> None:
        if self._observer:
            self._observer.stop()
            self._observer.join(timeout=5)
            self._observer = None
            logger.info("extension file watcher stopped")
