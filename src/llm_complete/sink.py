"""Destinations for decoded text fragments."""

from __future__ import annotations

import sys
from typing import Protocol, TextIO


class OutputSink(Protocol):
    """Receives text fragments as soon as they are decoded."""

    def emit(self, fragment: str) -> None: ...


class StreamSink:
    """Write fragments to a text stream, flushing after each one."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    def emit(self, fragment: str) -> None:
        self._stream.write(fragment)
        self._stream.flush()


class CollectingSink:
    """Keep fragments in memory."""

    def __init__(self) -> None:
        self.fragments: list[str] = []

    def emit(self, fragment: str) -> None:
        self.fragments.append(fragment)

    @property
    def text(self) -> str:
        return "".join(self.fragments)
