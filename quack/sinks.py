from __future__ import annotations

from typing import List, Optional, TextIO


class BufferSink:
    """Collects interpreter output in memory."""

    def __init__(self):
        self._chunks: List[str] = []
        self.closed = False
        self.close_count = 0

    def write(self, text: str) -> None:
        self._chunks.append(text)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.close_count += 1

    def getvalue(self) -> str:
        return "".join(self._chunks)


class StreamSink:
    """Writes interpreter output straight through to a text stream.

    The stream is flushed on close and only closed when `owns_stream` is
    set, so wrapping ``sys.stdout`` never closes it.
    """

    def __init__(self, stream: TextIO, owns_stream: bool = False):
        self.stream = stream
        self.owns_stream = owns_stream
        self.closed = False

    @classmethod
    def open(cls, path: str, encoding: Optional[str] = "utf-8") -> "StreamSink":
        return cls(open(path, "w", encoding=encoding, newline=""), owns_stream=True)

    def write(self, text: str) -> None:
        self.stream.write(text)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.stream.flush()
        if self.owns_stream:
            self.stream.close()

    def getvalue(self) -> Optional[str]:
        return None


__all__ = ["BufferSink", "StreamSink"]
