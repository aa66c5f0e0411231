"""Tweak catalog.

Scans a flat directory for injectable libraries and their optional
JSON sidecar files and merges in the persisted enabled flags.
"""

import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Protocol

from loguru import logger

from .errors import DiscoveryError

METADATA_SUFFIX = ".json"
METADATA_FIELDS = ("name", "version", "description", "author")


def _default_extensions() -> tuple[str, ...]:
    """Library suffixes the platform's dynamic loader can preload."""
    if sys.platform == "darwin":
        return (".dylib",)
    if sys.platform == "win32":
        return (".dll",)
    return (".so",)


LIBRARY_EXTENSIONS = _default_extensions()


class TweakStateStore(Protocol):
    """Persistence for per-tweak enabled flags, keyed by tweak name."""

    def get_enabled(self, name: str) -> bool | None: ...

    def set_enabled(self, name: str, value: bool) -> None: ...


@dataclass
class TweakDescriptor:
    """An injectable library plus its descriptive metadata."""

    name: str
    library_path: str  # Absolute path, fixed at discovery
    version: str | None = None
    description: str | None = None
    author: str | None = None
    enabled: bool = True

    def summary(self) -> list[str]:
        """Return the descriptive lines shown below the tweak name."""
        lines = []
        if self.version is not None:
            lines.append(f"Version: {self.version}")
        if self.description is not None:
            lines.append(self.description)
        if self.author is not None:
            lines.append(f"Author: {self.author}")
        return lines


def parse_metadata(data: bytes) -> dict[str, str]:
    """Parse a sidecar file into a flat string mapping.

    Raises ValueError unless the document is a JSON object whose values
    are all strings.
    """
    try:
        parsed = json.loads(data.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise ValueError(f"not UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"invalid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise ValueError("expected a JSON object")

    non_strings = sorted(k for k, v in parsed.items() if not isinstance(v, str))
    if non_strings:
        raise ValueError(f"non-string values for {', '.join(non_strings)}")

    return parsed


def _read_metadata(
    meta_file: Path, on_log: Callable[[str], None] | None
) -> dict[str, str]:
    try:
        data = meta_file.read_bytes()
    except FileNotFoundError:
        return {}
    except OSError as e:
        _warn_metadata(meta_file, e, on_log)
        return {}

    try:
        return parse_metadata(data)
    except ValueError as e:
        _warn_metadata(meta_file, e, on_log)
        return {}


def _warn_metadata(
    meta_file: Path, error: Exception, on_log: Callable[[str], None] | None
) -> None:
    message = f"Ignoring metadata {meta_file}: {error}"
    logger.warning(message)
    if on_log:
        on_log(message)


def _list_libraries(directory: Path, extensions: Iterable[str]) -> list[Path]:
    suffixes = set(extensions)
    try:
        with os.scandir(directory) as entries:
            return [
                Path(entry.path)
                for entry in entries
                if entry.is_file() and Path(entry.name).suffix in suffixes
            ]
    except OSError as e:
        raise DiscoveryError(str(directory), e) from e


def discover(
    directory: str | Path,
    store: TweakStateStore,
    *,
    extensions: Iterable[str] = LIBRARY_EXTENSIONS,
    on_log: Callable[[str], None] | None = None,
) -> list[TweakDescriptor]:
    """Build a fresh catalog snapshot from ``directory``.

    Raises DiscoveryError when the directory cannot be listed. Broken
    sidecar files only produce a warning; the tweak keeps the
    filename-derived defaults. Nothing is written to ``store``.
    """
    root = Path(directory).absolute()
    tweaks = []

    for library in _list_libraries(root, extensions):
        meta = _read_metadata(library.with_suffix(METADATA_SUFFIX), on_log)
        fields = {key: meta[key] for key in METADATA_FIELDS if key in meta}
        name = fields.pop("name", library.stem)

        # Tweaks are enabled unless explicitly disabled
        persisted = store.get_enabled(name)
        enabled = True if persisted is None else persisted

        tweaks.append(
            TweakDescriptor(
                name=name,
                library_path=str(library),
                enabled=enabled,
                **fields,
            )
        )

    tweaks.sort(key=lambda t: t.name)
    logger.debug(f"Discovered {len(tweaks)} tweak(s) in {root}")
    return tweaks


def enabled_libraries(tweaks: Iterable[TweakDescriptor]) -> list[str]:
    """Return the library paths of the enabled tweaks, in catalog order."""
    return [t.library_path for t in tweaks if t.enabled]
