#!/usr/bin/env python3

from collections.abc import Iterable, Iterator


class LineAssembler():
    """Splits a stream of text chunks into complete, stripped lines.

    Anything after the last newline is kept until the next chunk arrives. The
    buffer is not capped, so a board that never sends a newline grows it
    without bound.
    """

    def __init__(self) -> None:
        self._buffer = ''

    @property
    def pending(self) -> str:
        return self._buffer

    def feed(self, chunk: str) -> list[str]:
        self._buffer += chunk

        lines = []
        while (line_end := self._buffer.find('\n')) != -1:
            lines.append(self._buffer[:line_end].strip())
            self._buffer = self._buffer[line_end + 1:]

        return lines

    def clear(self) -> None:
        self._buffer = ''


def iter_lines(chunks: Iterable[str], assembler: LineAssembler | None = None) -> Iterator[str]:
    if assembler is None:
        assembler = LineAssembler()

    for chunk in chunks:
        yield from assembler.feed(chunk)
