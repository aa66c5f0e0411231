"""Launcher session: catalog, target selection and the running target.

Glue between the core modules and whatever front end drives them. All
operator messages go through ``on_log``; target output goes through
``on_chunk`` and is never mixed into the log.
"""

from collections.abc import Mapping
from typing import Callable, Optional

from loguru import logger

from . import process_manager
from .config import Config, save_config
from .environment import PATH_LIST_SEPARATOR, prepare_launch
from .errors import DiscoveryError, LaunchError, ResolutionError
from .i18n import tr
from .process_manager import ProcessHandle
from .relay import OutputRelay, attach
from .target import resolve
from .tweaks import TweakDescriptor, discover


class TweakLauncher:
    """Drives one target at a time with the currently enabled tweaks."""

    def __init__(
        self,
        config: Config,
        *,
        on_log: Optional[Callable[[str], None]] = None,
        on_chunk: Optional[Callable[[str], None]] = None,
        save: Callable[[Config], None] = save_config,
        base_environment: Optional[Mapping[str, str]] = None,
    ):
        self.config = config
        self.tweaks: list[TweakDescriptor] = []
        self.handle: Optional[ProcessHandle] = None
        self.relay: Optional[OutputRelay] = None
        self._on_log = on_log
        self._on_chunk = on_chunk
        self._save = save
        self._base_environment = base_environment

    def _log(self, message: str) -> None:
        logger.info(message)
        if self._on_log:
            self._on_log(message)

    def _deliver(self, text: str) -> None:
        if self._on_chunk:
            self._on_chunk(text)

    def refresh_tweaks(self) -> list[TweakDescriptor]:
        """Rebuild the catalog; a failed scan keeps the previous snapshot."""
        try:
            tweaks = discover(self.config.tweaks_dir, self.config, on_log=self._on_log)
        except DiscoveryError as e:
            self._log(tr("list_failed").format(error=e))
            return self.tweaks

        self.tweaks = tweaks
        logger.debug(f"Loaded {len(tweaks)} tweak(s) from {self.config.tweaks_dir}")
        return self.tweaks

    def set_tweak_enabled(self, tweak: TweakDescriptor, enabled: bool) -> None:
        """Toggle a tweak and persist the new state under its name."""
        tweak.enabled = enabled
        self.config.set_enabled(tweak.name, enabled)
        self._save(self.config)

    def select_target(self, path: str) -> Optional[str]:
        """Resolve a bundle or executable and remember it as the target."""
        try:
            executable = resolve(path)
        except ResolutionError as e:
            self._log(tr("resolve_failed").format(error=e))
            return None

        self.config.target_path = executable
        self._save(self.config)
        self._log(tr("target_selected").format(path=executable))
        return executable

    def is_running(self) -> bool:
        return self.handle is not None and self.handle.is_running()

    def launch(self) -> Optional[ProcessHandle]:
        """Start the target with the enabled tweaks injected.

        Returns the new handle, or None if nothing was started.
        """
        if not self.config.target_path:
            self._log(tr("no_target_selected"))
            return None

        if self.is_running():
            self._log(tr("already_running").format(pid=self.handle.pid))
            return None

        try:
            executable = resolve(self.config.target_path)
        except ResolutionError as e:
            self._log(tr("launch_failed").format(error=e))
            return None

        spec = prepare_launch(executable, self.tweaks, self._base_environment)
        if spec.injected_libraries:
            libraries = PATH_LIST_SEPARATOR.join(spec.injected_libraries)
            self._log(tr("injecting").format(libraries=libraries))
        else:
            self._log(tr("no_enabled_tweaks"))

        try:
            handle = process_manager.launch(spec)
        except LaunchError as e:
            self._log(tr("launch_failed").format(error=e))
            return None

        self.handle = handle
        self.relay = attach(handle, self._deliver, on_log=self._on_log)
        self._log(tr("launched").format(path=executable))
        return handle

    def stop(self) -> bool:
        """Terminate the running target, if any."""
        if not self.is_running():
            self._log(tr("target_not_running"))
            return False
        pid = self.handle.pid
        if not self.handle.terminate():
            self._log(tr("target_not_running"))
            return False
        self._log(tr("target_stopped").format(pid=pid))
        return True

    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        """Wait for the target to exit and its output to be fully relayed."""
        if self.handle is None:
            return None
        code = self.handle.wait(timeout)
        if self.relay is not None:
            self.relay.join(timeout)
        self._log(tr("target_exited").format(code=code))
        return code
