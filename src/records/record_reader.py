"""Record reader capability.

This module defines the shared reader contract and the truncation and
diagnostic helpers used by every framing variant.
"""

from __future__ import annotations

from core.errors import PipeModeDecodeError
from records.pipe_stream import PipeStream


class RecordReader:
    """Decode records one at a time from a single pipe stream."""

    def __init__(self, stream: PipeStream) -> None:
        self._stream = stream

    @property
    def pipe_path(self) -> str:
        return self._stream.pipe_path

    @property
    def closed(self) -> bool:
        return self._stream.closed

    def read_record(self) -> bytes | None:
        """Decode the next record.

        Returns:
            One record, or None on a clean end of stream.

        Raises:
            PipeModeDecodeError: If the stream violates the record framing.
            PipeModeIOError: If the pipe cannot be read.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release the underlying pipe."""
        self._stream.close()

    def _read_frame_part(self, size: int, part_name: str, record_offset: int) -> bytes:
        """Read a mandatory part of a record, failing on truncation."""
        payload = self._stream.read_exactly(size)
        if len(payload) != size:
            raise self._decode_error(
                f"truncated {part_name}: expected {size} bytes, got {len(payload)}",
                record_offset,
            )
        return payload

    def _decode_error(self, detail: str, record_offset: int) -> PipeModeDecodeError:
        return PipeModeDecodeError(
            f"Corrupt record in pipe {self._stream.pipe_path} at byte offset "
            f"{record_offset}: {detail}."
        )
