"""Newline-delimited record reader.

Records are separated by a single ``\\n`` byte which is not part of the
record. Bytes left unterminated when the pipe closes form a final record.
"""

from __future__ import annotations

from core.constants import TEXT_LINE_DELIMITER
from records.pipe_stream import PipeStream
from records.record_reader import RecordReader


class TextLineReader(RecordReader):
    """Split a pipe stream on newline bytes."""

    def __init__(self, stream: PipeStream) -> None:
        super().__init__(stream)
        self._buffer = bytearray()
        self._scan_from = 0
        self._exhausted = False

    def read_record(self) -> bytes | None:
        while True:
            newline_index = self._buffer.find(TEXT_LINE_DELIMITER, self._scan_from)
            if newline_index >= 0:
                record = bytes(self._buffer[:newline_index])
                del self._buffer[: newline_index + 1]
                self._scan_from = 0
                return record
            if self._exhausted:
                return self._take_trailing_line()
            self._scan_from = len(self._buffer)
            chunk = self._stream.read_chunk()
            if chunk:
                self._buffer.extend(chunk)
            else:
                self._exhausted = True

    def _take_trailing_line(self) -> bytes | None:
        if not self._buffer:
            return None
        record = bytes(self._buffer)
        self._buffer.clear()
        self._scan_from = 0
        return record
