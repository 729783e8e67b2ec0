"""Run external commands and expose their output as byte streams."""

from __future__ import annotations

import io
import logging
import queue
import subprocess
import threading
from typing import List, Sequence, Union

from .exceptions import CommandError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192

_Item = Union[bytes, CommandError, None]


class CommandPipe(io.RawIOBase):
    """Raw stream fed by a background thread that owns the child process.

    The producer thread spawns the command, forwards every stdout chunk and
    then posts either ``None`` (clean exit) or a :class:`CommandError`. The
    error is raised by the read that reaches it, after all earlier output.
    """

    def __init__(self, args: Sequence[str]) -> None:
        super().__init__()
        self.args: List[str] = [str(arg) for arg in args]
        self._queue: "queue.Queue[_Item]" = queue.Queue()
        self._pending = b""
        self._finished = False
        self._error: CommandError | None = None
        self._abandoned = threading.Event()
        self._thread = threading.Thread(
            target=self._produce,
            name=f"hwreport-cmd-{self.args[0] if self.args else '?'}",
            daemon=True,
        )
        self._thread.start()

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:  # type: ignore[override]
        if not self._pending:
            if self._finished:
                if self._error is not None:
                    raise self._error
                return 0
            item = self._queue.get()
            if item is None:
                self._finished = True
                return 0
            if isinstance(item, CommandError):
                self._finished = True
                self._error = item
                raise item
            self._pending = item
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size

    def close(self) -> None:
        self._abandoned.set()
        self._pending = b""
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                break
        super().close()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the producer thread; return True once it has exited."""
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _produce(self) -> None:
        logger.debug("running %s", self.args)
        try:
            final = self._pump()
        except Exception as exc:
            final = CommandError(self.args, exc)
        self._queue.put(final)

    def _pump(self) -> CommandError | None:
        process = subprocess.Popen(
            self.args,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
        )
        with process:
            assert process.stdout is not None
            for chunk in iter(lambda: process.stdout.read1(CHUNK_SIZE), b""):
                if not self._abandoned.is_set():
                    self._queue.put(chunk)
        if process.returncode != 0:
            return CommandError(self.args, f"exit status {process.returncode}")
        return None


def run_command(args: Sequence[str]) -> io.BufferedReader:
    """Start ``args`` and return its stdout as a buffered, line-iterable stream."""
    return io.BufferedReader(CommandPipe(args))


def combined_output(args: Sequence[str]) -> bytes:
    """Run ``args`` to completion and return stdout and stderr interleaved."""
    command = [str(arg) for arg in args]
    try:
        result = subprocess.run(
            command,
            check=False,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
    except (OSError, ValueError) as exc:
        raise CommandError(command, exc) from exc
    if result.returncode != 0:
        raise CommandError(command, f"exit status {result.returncode}")
    return result.stdout
