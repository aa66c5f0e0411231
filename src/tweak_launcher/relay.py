"""Relay the target's stdout and stderr to a consumer callback.

Each stream is drained by its own thread so a burst (or a stall) on one
never holds back the other. Chunk boundaries are whatever the OS read
returns; order is only preserved within a stream.
"""

import codecs
import os
import threading
from typing import IO, Callable, Optional

from loguru import logger

from .process_manager import ProcessHandle

CHUNK_SIZE = 4096
REPLACEMENT_CHAR = "\ufffd"
DECODE_ERRORS = "tweak_launcher.replace"

# Each drain decodes on its own thread
_replacements = threading.local()


def _replace_and_count(error: UnicodeDecodeError) -> tuple[str, int]:
    _replacements.count = getattr(_replacements, "count", 0) + 1
    return REPLACEMENT_CHAR, error.end


codecs.register_error(DECODE_ERRORS, _replace_and_count)


class _StreamDrain(threading.Thread):
    """Blocking read loop for a single pipe."""

    def __init__(
        self,
        label: str,
        stream: IO[bytes],
        on_chunk: Callable[[str], None],
        on_log: Optional[Callable[[str], None]],
    ):
        super().__init__(name=f"relay-{label}", daemon=True)
        self.label = label
        self.stream = stream
        self.on_chunk = on_chunk
        self.on_log = on_log
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors=DECODE_ERRORS)
        self._warned = False

    def run(self) -> None:
        fd = self.stream.fileno()
        try:
            while True:
                try:
                    data = os.read(fd, CHUNK_SIZE)
                except OSError as e:
                    logger.debug(f"{self.label} read ended: {e}")
                    break
                if not data:
                    break
                self._deliver(self._decode(data))
            self._deliver(self._decode(b"", final=True))
        finally:
            self.stream.close()
        logger.debug(f"{self.label} reached end of stream")

    def _decode(self, data: bytes, final: bool = False) -> str:
        _replacements.count = 0
        text = self._decoder.decode(data, final)
        if _replacements.count and not self._warned:
            self._warned = True
            message = f"Target {self.label} contained invalid UTF-8; replaced undecodable bytes"
            logger.warning(message)
            if self.on_log:
                self.on_log(message)
        return text

    def _deliver(self, text: str) -> None:
        if not text:
            return
        try:
            self.on_chunk(text)
        except Exception:
            # Keep draining, otherwise the child blocks on a full pipe
            logger.exception(f"Output consumer failed on {self.label} chunk")


class OutputRelay:
    """The pair of drains attached to one process handle."""

    def __init__(self, drains: list[_StreamDrain]):
        self._drains = drains

    def start(self) -> "OutputRelay":
        for drain in self._drains:
            drain.start()
        return self

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for both streams to close; True if they did within ``timeout``."""
        for drain in self._drains:
            drain.join(timeout)
        return not self.is_alive()

    def is_alive(self) -> bool:
        return any(drain.is_alive() for drain in self._drains)


def attach(
    handle: ProcessHandle,
    on_chunk: Callable[[str], None],
    *,
    on_log: Optional[Callable[[str], None]] = None,
) -> OutputRelay:
    """Start draining ``handle``'s stdout and stderr into ``on_chunk``.

    ``on_chunk`` is never called concurrently for the same stream but may
    run concurrently for stdout and stderr.
    """
    drains = [
        _StreamDrain(label, stream, on_chunk, on_log)
        for label, stream in (("stdout", handle.stdout), ("stderr", handle.stderr))
        if stream is not None
    ]
    return OutputRelay(drains).start()
