"""Configuration management for Tweak Launcher.

Holds the launcher settings and the persisted enabled flag of every tweak.
"""

import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger


def _get_config_dir() -> Path:
    """Get platform-specific config directory.

    - Windows: %APPDATA%/tweak-launcher
    - Linux/macOS: ~/.config/tweak-launcher
    """
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata) / "tweak-launcher"
        # Fallback if APPDATA not set
        return Path.home() / "AppData" / "Roaming" / "tweak-launcher"
    else:
        # Linux/macOS: Use XDG standard
        xdg_config = os.environ.get("XDG_CONFIG_HOME")
        if xdg_config:
            return Path(xdg_config) / "tweak-launcher"
        return Path.home() / ".config" / "tweak-launcher"


CONFIG_DIR = _get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.json"
DEFAULT_TWEAKS_DIR = CONFIG_DIR / "Patches"


@dataclass
class Config:
    """Launcher settings plus per-tweak enabled flags."""

    tweaks_dir: str = str(DEFAULT_TWEAKS_DIR)
    target_path: str = ""  # Resolved executable, empty = none selected

    # UI settings
    window_width: int = 600
    window_height: int = 750
    language: str = "en"  # UI language (en, de)

    # Tweak name -> enabled. Keyed by display name, so tweaks sharing
    # a name share their flag.
    tweak_states: dict[str, bool] = field(default_factory=dict)

    def get_enabled(self, name: str) -> bool | None:
        """Returns the persisted flag for a tweak, None if never set."""
        return self.tweak_states.get(name)

    def set_enabled(self, name: str, value: bool) -> None:
        """Records the enabled flag for a tweak."""
        self.tweak_states[name] = bool(value)

    def to_dict(self) -> dict:
        """Serializes the configuration to a dictionary."""
        return {
            "tweaks_dir": self.tweaks_dir,
            "target_path": self.target_path,
            "window_width": self.window_width,
            "window_height": self.window_height,
            "language": self.language,
            "tweak_states": dict(self.tweak_states),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Creates a Config from a dictionary, ignoring unknown keys."""
        states = data.get("tweak_states", {})
        if not isinstance(states, dict):
            states = {}

        return cls(
            tweaks_dir=data.get("tweaks_dir", str(DEFAULT_TWEAKS_DIR)),
            target_path=data.get("target_path", ""),
            window_width=data.get("window_width", 600),
            window_height=data.get("window_height", 750),
            language=data.get("language", "en"),
            tweak_states={
                str(k): v for k, v in states.items() if isinstance(v, bool)
            },
        )


def load_config(path: Path | None = None) -> Config:
    """Loads the configuration, falling back to defaults."""
    config_file = path or CONFIG_FILE

    if not config_file.exists():
        return Config()

    try:
        with open(config_file, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise TypeError("top level is not an object")
        return Config.from_dict(data)
    except OSError as e:
        logger.error(f"Error reading configuration file: {e}")
    except json.JSONDecodeError as e:
        logger.error(f"Error parsing configuration (invalid JSON): {e}")
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"Error processing configuration data: {e}")
    return Config()


def save_config(config: Config, path: Path | None = None):
    """Saves the configuration."""
    config_file = path or CONFIG_FILE
    config_file.parent.mkdir(parents=True, exist_ok=True)

    with open(config_file, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)
