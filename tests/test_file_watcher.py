"""
Tests for file watcher module: debouncing, start/stop, reload on file changes.
"""

import time
from pathlib import Path

from blockforge.conversion import ConversionDriver, ConversionOptions, FieldTypeRegistry
from blockforge.library import ExtensionLibrary
from blockforge.runtime import ExtensionRuntime

ROBOT_YAML = """
id: robot
name: Robot
blocks:
  - opcode: beep
    blockType: command
    text: beep
"""


def make_runtime() -> ExtensionRuntime:
    return ExtensionRuntime(
        driver=ConversionDriver(field_registry=FieldTypeRegistry(), options=ConversionOptions())
    )


class TestDebouncedHandler:
    def test_debounce_multiple_events(self):
        """multiple rapid events result in single callback"""
        from blockforge.file_watcher import DebouncedHandler

        call_count = 0

        def callback(path: Path, event_type: str):
            nonlocal call_count
            call_count += 1

        handler = DebouncedHandler(callback, debounce_ms=50)

        test_path = Path("/tmp/robot.yaml")
        handler._schedule_callback(test_path, "modified")
        handler._schedule_callback(test_path, "modified")
        handler._schedule_callback(test_path, "modified")

        time.sleep(0.15)
        assert call_count == 1

    def test_different_paths_not_debounced(self):
        """events for different paths fire independently"""
        from blockforge.file_watcher import DebouncedHandler

        paths_seen: list[str] = []

        def callback(path: Path, event_type: str):
            paths_seen.append(str(path))

        handler = DebouncedHandler(callback, debounce_ms=50)

        handler._schedule_callback(Path("/tmp/a.yaml"), "modified")
        handler._schedule_callback(Path("/tmp/b.yaml"), "modified")

        time.sleep(0.15)
        assert len(paths_seen) == 2


class TestExtensionFileHandler:
    def test_created_file_registers_extension(self, tmp_path):
        from blockforge.file_watcher import ExtensionFileHandler

        runtime = make_runtime()
        handler = ExtensionFileHandler(ExtensionLibrary(tmp_path), runtime, debounce_ms=10)

        path = tmp_path / "robot.yaml"
        path.write_text(ROBOT_YAML)
        handler._handle_change(path, "created")

        assert runtime.get_category("robot") is not None

    def test_modified_file_refreshes_extension(self, tmp_path):
        from blockforge.file_watcher import ExtensionFileHandler

        runtime = make_runtime()
        handler = ExtensionFileHandler(ExtensionLibrary(tmp_path), runtime, debounce_ms=10)
        path = tmp_path / "robot.yaml"
        path.write_text(ROBOT_YAML)
        handler._handle_change(path, "created")

        path.write_text(ROBOT_YAML.replace("beep", "buzz"))
        handler._handle_change(path, "modified")

        assert runtime.get_opcode_function("robot_buzz") == "buzz"
        assert runtime.get_opcode_function("robot_beep") is None

    def test_broken_file_keeps_previous_version(self, tmp_path):
        from blockforge.file_watcher import ExtensionFileHandler

        runtime = make_runtime()
        handler = ExtensionFileHandler(ExtensionLibrary(tmp_path), runtime, debounce_ms=10)
        path = tmp_path / "robot.yaml"
        path.write_text(ROBOT_YAML)
        handler._handle_change(path, "created")

        path.write_text(ROBOT_YAML.replace("blockType: command", "blockType: wobbly"))
        handler._handle_change(path, "modified")  # should not raise

        assert runtime.get_opcode_function("robot_beep") == "beep"

    def test_ignores_other_files(self, tmp_path):
        from blockforge.file_watcher import ExtensionFileHandler

        runtime = make_runtime()
        handler = ExtensionFileHandler(ExtensionLibrary(tmp_path), runtime, debounce_ms=10)
        path = tmp_path / "notes.txt"
        path.write_text("id: notes")
        handler._handle_change(path, "created")

        assert runtime.list_categories() == []


class TestExtensionFileWatcher:
    def test_watcher_starts_and_stops(self, tmp_path, monkeypatch):
        from blockforge.file_watcher import ExtensionFileWatcher

        monkeypatch.setenv("BLOCKFORGE_HOT_RELOAD", "true")

        watcher = ExtensionFileWatcher(ExtensionLibrary(tmp_path), make_runtime())

        watcher.start()
        assert watcher.is_running

        watcher.stop()
        assert not watcher.is_running

    def test_watcher_noop_when_disabled(self, tmp_path, monkeypatch):
        from blockforge.file_watcher import ExtensionFileWatcher

        monkeypatch.setenv("BLOCKFORGE_HOT_RELOAD", "false")

        watcher = ExtensionFileWatcher(ExtensionLibrary(tmp_path), make_runtime())

        watcher.start()
        assert not watcher.is_running

    def test_watcher_noop_when_directory_missing(self, tmp_path, monkeypatch):
        from blockforge.file_watcher import ExtensionFileWatcher

        monkeypatch.setenv("BLOCKFORGE_HOT_RELOAD", "true")

        watcher = ExtensionFileWatcher(
            ExtensionLibrary(tmp_path), make_runtime(), extensions_path=tmp_path / "missing"
        )
        watcher.start()
        assert not watcher.is_running

    def test_stop_when_not_started_is_noop(self, tmp_path):
        from blockforge.file_watcher import ExtensionFileWatcher

        watcher = ExtensionFileWatcher(ExtensionLibrary(tmp_path), make_runtime())
        watcher.stop()  # should not raise
        assert not watcher.is_running
