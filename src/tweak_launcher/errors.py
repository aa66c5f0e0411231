"""Exceptions raised by the launcher core."""


class LauncherError(Exception):
    """Base class for launcher failures."""


class DiscoveryError(LauncherError):
    """The tweak directory could not be listed."""

    def __init__(self, directory: str, os_error: OSError):
        super().__init__(f"Cannot read tweak directory {directory}: {os_error}")
        self.directory = directory
        self.os_error = os_error


class ResolutionError(LauncherError):
    """A target path does not lead to a runnable executable."""


class LaunchError(LauncherError):
    """The target executable could not be started."""

    def __init__(self, executable_path: str, os_error: BaseException):
        super().__init__(f"Cannot start {executable_path}: {os_error}")
        self.executable_path = executable_path
        self.os_error = os_error
