"""Shared test fixtures and helpers."""

import plistlib
import stat
import sys
import threading
from pathlib import Path

import pytest

from tweak_launcher import i18n

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="needs /bin/sh")


class MemoryStore:
    """In-memory tweak state store that records writes."""

    def __init__(self, states: dict[str, bool] | None = None):
        self.states = dict(states or {})
        self.writes: list[tuple[str, bool]] = []

    def get_enabled(self, name: str) -> bool | None:
        return self.states.get(name)

    def set_enabled(self, name: str, value: bool) -> None:
        self.writes.append((name, value))
        self.states[name] = value


class ChunkCollector:
    """Thread-safe on_chunk / on_log sink."""

    def __init__(self):
        self._lock = threading.Lock()
        self.items: list[str] = []

    def __call__(self, text: str) -> None:
        with self._lock:
            self.items.append(text)

    @property
    def text(self) -> str:
        with self._lock:
            return "".join(self.items)


def write_script(path: Path, body: str) -> Path:
    """Write an executable /bin/sh script."""
    path.write_text("#!/bin/sh\n" + body + "\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def create_bundle(
    root: Path,
    name: str = "Server.app",
    executable: str | None = "Server",
    create_executable: bool = True,
    info: dict | None = None,
) -> Path:
    """Create a minimal .app bundle with an Info.plist."""
    bundle = root / name
    contents = bundle / "Contents"
    (contents / "MacOS").mkdir(parents=True)

    if info is None:
        info = {"CFBundleName": name.removesuffix(".app")}
        if executable is not None:
            info["CFBundleExecutable"] = executable
    with open(contents / "Info.plist", "wb") as f:
        plistlib.dump(info, f)

    if executable and create_executable:
        write_script(contents / "MacOS" / executable, "echo bundled")
    return bundle


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def collector():
    return ChunkCollector()


@pytest.fixture(autouse=True)
def english():
    """Operator messages are asserted in English."""
    i18n.set_language("en")
    yield
    i18n.set_language("en")
