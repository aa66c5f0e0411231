"""Tweak Launcher - launch an application with injected tweak libraries.

Discovers tweak libraries, resolves the target executable (directly or
from an application bundle), preloads the enabled tweaks through the
dynamic loader's environment variable and relays the target's output.

PySide6/Qt6 desktop front end plus a headless mode.
"""

__version__ = "1.0.0"
__author__ = "Tweak Launcher Team"

from .config import Config, load_config, save_config
from .environment import LaunchSpec, build_environment, prepare_launch
from .errors import DiscoveryError, LaunchError, LauncherError, ResolutionError
from .launcher import TweakLauncher
from .process_manager import ProcessHandle, launch
from .relay import OutputRelay, attach
from .target import resolve
from .tweaks import TweakDescriptor, discover

__all__ = [
    "Config",
    "load_config",
    "save_config",
    "LaunchSpec",
    "build_environment",
    "prepare_launch",
    "DiscoveryError",
    "LaunchError",
    "LauncherError",
    "ResolutionError",
    "TweakLauncher",
    "ProcessHandle",
    "launch",
    "OutputRelay",
    "attach",
    "resolve",
    "TweakDescriptor",
    "discover",
]
