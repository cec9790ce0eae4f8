"""
Thread-safe rendering of KEEP/DELETE lines.
"""

import threading
from typing import IO, Optional

import click

DELETE_FORMAT = "[DELETE] {function}:{version}"
KEEP_FORMAT = "[KEEP]   {function}:{version}"


class Reporter:
    """Writes one line per classified version; safe to call from workers."""

    def __init__(self, stream: Optional[IO[str]] = None):
        self.stream = stream
        self.deleted_count = 0
        self.kept_count = 0
        self._lock = threading.Lock()

    def deleted(self, function: str, version: str) -> None:
        with self._lock:
            self.deleted_count += 1
            click.echo(DELETE_FORMAT.format(function=function, version=version), file=self.stream)

    def kept(self, function: str, version: str) -> None:
        with self._lock:
            self.kept_count += 1
            click.echo(KEEP_FORMAT.format(function=function, version=version), file=self.stream)
