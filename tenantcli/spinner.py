"""Busy indicator shown while a blocking API call is in flight."""

import sys
import threading
from typing import IO, Any, Callable, ContextManager, Optional

import click

BusyIndicator = Callable[[], ContextManager[Any]]

SPINNER_FRAMES = ["|", "/", "-", "\\"]


class Spinner:
    """Context manager that animates a spinner on stderr until the block exits.

    The animation only runs when the stream is a terminal, so piped output and
    tests stay clean. Leaving the block always stops the thread and clears the
    line, whether the block returned, raised, or was interrupted.
    """

    def __init__(
        self,
        message: str = "Loading...",
        stream: Optional[IO[str]] = None,
        interval: float = 0.1,
    ) -> None:
        self.message = message
        self.stream = stream if stream is not None else sys.stderr
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _is_tty(self) -> bool:
        isatty = getattr(self.stream, "isatty", None)
        return bool(isatty and isatty())

    def _spin(self) -> None:
        index = 0
        while not self._stop.is_set():
            frame = SPINNER_FRAMES[index % len(SPINNER_FRAMES)]
            click.echo(f"\r{frame} {self.message}", file=self.stream, nl=False)
            index += 1
            self._stop.wait(self.interval)

    def __enter__(self) -> "Spinner":
        if self._is_tty():
            self._stop.clear()
            self._thread = threading.Thread(target=self._spin, daemon=True)
            self._thread.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join()
        self._thread = None
        # clear the spinner line
        click.echo("\r" + " " * (len(self.message) + 2) + "\r", file=self.stream, nl=False)


def waiting() -> Spinner:
    """Return the default busy indicator."""
    return Spinner()
