"""Fan-out sink: duplicate every record to the rotating writer and the console."""

import sys
from typing import BinaryIO


class ConsoleWriter:
    """Writes bytes unmodified to standard output (or a given binary stream)."""

    def __init__(self, stream: BinaryIO | None = None):
        self._stream = stream

    def write(self, data: bytes) -> int:
        # sys.stdout is looked up per write so redirection is honored
        stream = self._stream if self._stream is not None else sys.stdout.buffer
        stream.write(data)
        stream.flush()
        return len(data)


class FanoutSink:
    """Writes each payload to every writer in order.

    Stops at the first writer that raises. ``close()`` only closes writers
    that own a resource; the console is left open.
    """

    def __init__(self, *writers):
        self._writers = list(writers)

    @property
    def writers(self) -> list:
        return list(self._writers)

    def write(self, data: bytes) -> int:
        for w in self._writers:
            w.write(data)
        return len(data)

    def close(self):
        for w in self._writers:
            if not isinstance(w, ConsoleWriter) and hasattr(w, "close"):
                w.close()
