"""
Process supervision for the launched target.
Spawns the executable with the injection environment and owns its lifetime.
"""

import os
import signal
import subprocess
import time
from typing import IO, Optional

from loguru import logger

from .environment import LaunchSpec
from .errors import LaunchError


class ProcessHandle:
    """A running (or finished) target process and its output pipes."""

    def __init__(self, process: subprocess.Popen, spec: LaunchSpec):
        self._process = process
        self.spec = spec
        self.started_at = time.time()

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def executable_path(self) -> str:
        return self.spec.executable_path

    @property
    def stdout(self) -> IO[bytes]:
        return self._process.stdout

    @property
    def stderr(self) -> IO[bytes]:
        return self._process.stderr

    @property
    def returncode(self) -> Optional[int]:
        return self._process.returncode

    def poll(self) -> Optional[int]:
        """Return the exit code, or None while the process is alive."""
        return self._process.poll()

    def wait(self, timeout: Optional[float] = None) -> int:
        """Block until the process exits; raises subprocess.TimeoutExpired."""
        return self._process.wait(timeout=timeout)

    def is_running(self) -> bool:
        return self._process.poll() is None

    def terminate(self) -> bool:
        """Ask the target and its process group to stop (SIGTERM).

        Returns False if the process had already exited.
        """
        return self._signal(signal.SIGTERM)

    def kill(self) -> bool:
        """Force the target and its process group to stop."""
        return self._signal(getattr(signal, "SIGKILL", signal.SIGTERM))

    def _signal(self, sig: int) -> bool:
        if not self.is_running():
            return False
        try:
            if hasattr(os, "killpg"):
                os.killpg(os.getpgid(self.pid), sig)
            else:
                self._process.send_signal(sig)
        except ProcessLookupError:
            # Exited between poll() and the signal
            return False
        logger.debug(f"Sent signal {sig} to pid {self.pid}")
        return True

    def __repr__(self) -> str:
        return f"ProcessHandle(pid={self.pid}, executable={self.executable_path!r})"


def launch(spec: LaunchSpec) -> ProcessHandle:
    """Start the target described by ``spec`` without waiting for it.

    Raises LaunchError when the OS refuses to create the process.
    """
    try:
        process = subprocess.Popen(
            [spec.executable_path],
            env=spec.environment,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            bufsize=0,
            start_new_session=True,
        )
    except (OSError, subprocess.SubprocessError) as e:
        raise LaunchError(spec.executable_path, e) from e

    logger.info(f"Started {spec.executable_path} (pid {process.pid})")
    return ProcessHandle(process, spec)
