"""Resolve a user-chosen path to the executable that should be launched."""

import os
import plistlib
from pathlib import Path
from xml.parsers.expat import ExpatError

from loguru import logger

from .errors import ResolutionError

INFO_PLIST = Path("Contents") / "Info.plist"
EXECUTABLE_DIR = Path("Contents") / "MacOS"
EXECUTABLE_KEY = "CFBundleExecutable"


def is_executable_file(path: str | Path) -> bool:
    """Check for a regular file with execute permission."""
    return os.path.isfile(path) and os.access(path, os.X_OK)


def _read_info_plist(bundle: Path) -> dict:
    plist_path = bundle / INFO_PLIST
    try:
        with open(plist_path, "rb") as f:
            info = plistlib.load(f)
    except OSError as e:
        raise ResolutionError(f"Failed to read Info.plist at {plist_path}: {e}") from e
    except (
        plistlib.InvalidFileException,
        ExpatError,
        ValueError,
        AttributeError,
        TypeError,
    ) as e:
        # plistlib lets some malformed values escape as AttributeError or TypeError
        raise ResolutionError(f"Failed to parse Info.plist at {plist_path}: {e}") from e

    if not isinstance(info, dict):
        raise ResolutionError(f"Info.plist at {plist_path} is not a dictionary")
    return info


def find_bundle_executable(bundle_path: str | Path) -> str:
    """Return the main executable declared by an application bundle."""
    bundle = Path(bundle_path)
    info = _read_info_plist(bundle)

    name = info.get(EXECUTABLE_KEY)
    if not isinstance(name, str) or not name:
        raise ResolutionError(f"{EXECUTABLE_KEY} not found in Info.plist")

    executable = bundle / EXECUTABLE_DIR / name
    if not executable.is_file():
        raise ResolutionError(f"Executable not found inside bundle: {executable}")
    return str(executable)


def resolve(user_path: str | Path) -> str:
    """Turn a direct executable or an application bundle into an executable path.

    A path that already is an executable file is returned unchanged; only
    otherwise is it treated as a bundle.
    """
    if is_executable_file(user_path):
        return str(user_path)

    executable = find_bundle_executable(user_path)
    logger.debug(f"Resolved bundle {user_path} to {executable}")
    return executable
