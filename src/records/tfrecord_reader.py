"""TFRecord reader.

Each record is framed as::

    uint64 length (little endian)
    uint32 masked_crc32c(length)
    byte   data[length]
    uint32 masked_crc32c(data)
"""

from __future__ import annotations

import struct

import google_crc32c

from core.constants import (
    TFRECORD_CRC_MASK_DELTA,
    TFRECORD_CRC_SIZE,
    TFRECORD_LENGTH_SIZE,
)
from records.record_reader import RecordReader

_UINT32_MASK = 0xFFFFFFFF
_HEADER_SIZE = TFRECORD_LENGTH_SIZE + TFRECORD_CRC_SIZE


def masked_crc32c(data: bytes) -> int:
    """Return the TFRecord masked CRC32C of ``data``."""
    crc = google_crc32c.value(data)
    rotated = ((crc >> 15) | (crc << 17)) & _UINT32_MASK
    return (rotated + TFRECORD_CRC_MASK_DELTA) & _UINT32_MASK


class TFRecordReader(RecordReader):
    """Decode length-prefixed, checksummed TFRecord frames."""

    def read_record(self) -> bytes | None:
        record_offset = self._stream.offset
        header = self._stream.read_exactly(_HEADER_SIZE)
        if not header:
            return None
        if len(header) != _HEADER_SIZE:
            raise self._decode_error(
                f"truncated header: expected {_HEADER_SIZE} bytes, got {len(header)}",
                record_offset,
            )
        length_bytes = header[:TFRECORD_LENGTH_SIZE]
        (length_crc,) = struct.unpack("<I", header[TFRECORD_LENGTH_SIZE:])
        self._verify_crc(length_bytes, length_crc, "length", record_offset)
        (length,) = struct.unpack("<Q", length_bytes)
        payload = self._read_frame_part(length, "payload", record_offset)
        footer = self._read_frame_part(TFRECORD_CRC_SIZE, "payload checksum", record_offset)
        (payload_crc,) = struct.unpack("<I", footer)
        self._verify_crc(payload, payload_crc, "payload", record_offset)
        return payload

    def _verify_crc(self, data: bytes, expected: int, field: str, record_offset: int) -> None:
        actual = masked_crc32c(data)
        if actual != expected:
            raise self._decode_error(
                f"{field} checksum mismatch: expected {expected:#010x}, computed {actual:#010x}",
                record_offset,
            )
