"""RecordIO reader for MXNet/dmlc framed records.

Each part is an 8 byte header (``uint32`` magic, ``uint32`` flag and
length), the payload, and zero padding to a 4 byte boundary. The upper
3 bits of the second word are a continuation flag: 0 for a whole record,
1, 2 and 3 for the first, middle and last parts of a split record. Writers
split records where the payload contains the magic marker, so the marker is
restored between parts.
"""

from __future__ import annotations

import struct

from core.constants import (
    RECORDIO_ALIGNMENT,
    RECORDIO_HEADER_SIZE,
    RECORDIO_LENGTH_BITS,
    RECORDIO_MAGIC,
)
from records.record_reader import RecordReader

_LENGTH_MASK = (1 << RECORDIO_LENGTH_BITS) - 1
_MAGIC_BYTES = struct.pack("<I", RECORDIO_MAGIC)
_FLAG_WHOLE = 0
_FLAG_FIRST = 1
_FLAG_MIDDLE = 2
_FLAG_LAST = 3


class RecordIOReader(RecordReader):
    """Decode magic-prefixed, 4 byte aligned RecordIO frames."""

    def read_record(self) -> bytes | None:
        record_offset = self._stream.offset
        header = self._stream.read_exactly(RECORDIO_HEADER_SIZE)
        if not header:
            return None
        flag, payload = self._read_part(header, record_offset)
        if flag == _FLAG_WHOLE:
            return payload
        if flag != _FLAG_FIRST:
            raise self._decode_error(
                f"unexpected continuation flag {flag} at start of record", record_offset
            )
        parts = [payload]
        while flag != _FLAG_LAST:
            part_offset = self._stream.offset
            header = self._read_frame_part(RECORDIO_HEADER_SIZE, "part header", record_offset)
            flag, payload = self._read_part(header, part_offset)
            if flag not in (_FLAG_MIDDLE, _FLAG_LAST):
                raise self._decode_error(
                    f"unexpected continuation flag {flag} inside split record", part_offset
                )
            parts.append(payload)
        return _MAGIC_BYTES.join(parts)

    def _read_part(self, header: bytes, part_offset: int) -> tuple[int, bytes]:
        """Validate one part header and read its payload and padding."""
        if len(header) != RECORDIO_HEADER_SIZE:
            raise self._decode_error(
                f"truncated header: expected {RECORDIO_HEADER_SIZE} bytes, got {len(header)}",
                part_offset,
            )
        magic, length_and_flag = struct.unpack("<II", header)
        if magic != RECORDIO_MAGIC:
            raise self._decode_error(
                f"invalid magic number {magic:#010x}, expected {RECORDIO_MAGIC:#010x}",
                part_offset,
            )
        flag = length_and_flag >> RECORDIO_LENGTH_BITS
        length = length_and_flag & _LENGTH_MASK
        payload = self._read_frame_part(length, "payload", part_offset)
        padding = -length % RECORDIO_ALIGNMENT
        self._read_frame_part(padding, "padding", part_offset)
        return flag, payload
