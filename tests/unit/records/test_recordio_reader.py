"""Unit tests for RecordIO decoding."""

from __future__ import annotations

from pathlib import Path
import struct

import pytest

from core.constants import RECORDIO_MAGIC
from core.errors import PipeModeDecodeError
from records.pipe_stream import PipeStream
from records.recordio_reader import RecordIOReader
from tests.framing import recordio_part, start_fifo_writer


def _reader_for(tmp_path: Path, content: bytes) -> RecordIOReader:
    pipe_path = tmp_path / "train_0"
    pipe_path.write_bytes(content)
    return RecordIOReader(PipeStream(str(pipe_path)))


def test_reads_records_and_skips_padding(tmp_path: Path) -> None:
    """Padding bytes should never appear in decoded records."""
    reader = _reader_for(tmp_path, recordio_part(b"abcde") + recordio_part(b"xyz"))

    records = [reader.read_record(), reader.read_record(), reader.read_record()]

    assert records == [b"abcde", b"xyz", None]


def test_aligned_payload_has_no_padding(tmp_path: Path) -> None:
    """A payload of a multiple of four bytes should be followed by the next header."""
    reader = _reader_for(tmp_path, recordio_part(b"abcd") + recordio_part(b"efgh"))

    records = [reader.read_record(), reader.read_record()]

    assert records == [b"abcd", b"efgh"]


def test_invalid_magic_raises(tmp_path: Path) -> None:
    """A corrupted magic marker should be a decode fault."""
    reader = _reader_for(tmp_path, recordio_part(b"abcde", magic=0xDEADBEEF))

    with pytest.raises(PipeModeDecodeError) as error_info:
        reader.read_record()

    assert "invalid magic number" in str(error_info.value)


def test_truncated_header_raises(tmp_path: Path) -> None:
    """A stream closing inside a header is a fault."""
    reader = _reader_for(tmp_path, recordio_part(b"abcde") + struct.pack("<I", RECORDIO_MAGIC))
    reader.read_record()

    with pytest.raises(PipeModeDecodeError):
        reader.read_record()

    assert True


def test_truncated_padding_raises(tmp_path: Path) -> None:
    """A stream closing inside the padding is a fault."""
    reader = _reader_for(tmp_path, recordio_part(b"abcde")[:-1])

    with pytest.raises(PipeModeDecodeError) as error_info:
        reader.read_record()

    assert "truncated padding" in str(error_info.value)


def test_reassembles_split_record_with_magic(tmp_path: Path) -> None:
    """Split parts should be joined with the magic marker restored."""
    content = (
        recordio_part(b"head", flag=1)
        + recordio_part(b"mid", flag=2)
        + recordio_part(b"tail", flag=3)
        + recordio_part(b"next")
    )
    reader = _reader_for(tmp_path, content)
    magic = struct.pack("<I", RECORDIO_MAGIC)

    records = [reader.read_record(), reader.read_record()]

    assert records == [b"head" + magic + b"mid" + magic + b"tail", b"next"]


def test_continuation_without_start_raises(tmp_path: Path) -> None:
    """A middle part with no first part is a framing violation."""
    reader = _reader_for(tmp_path, recordio_part(b"mid", flag=2))

    with pytest.raises(PipeModeDecodeError):
        reader.read_record()

    assert True


def test_split_record_cut_before_last_part_raises(tmp_path: Path) -> None:
    """A split record whose last part never arrives is truncated."""
    reader = _reader_for(tmp_path, recordio_part(b"head", flag=1))

    with pytest.raises(PipeModeDecodeError) as error_info:
        reader.read_record()

    assert "truncated part header" in str(error_info.value)


def test_reads_records_from_fifo_with_partial_writes(tmp_path: Path) -> None:
    """Records delivered a few bytes at a time should decode whole."""
    fifo_path = tmp_path / "train_0"
    content = recordio_part(b"alpha") + recordio_part(b"beta")
    writer = start_fifo_writer(fifo_path, content, chunk_size=3)
    reader = RecordIOReader(PipeStream(str(fifo_path)))

    records = [reader.read_record(), reader.read_record(), reader.read_record()]
    writer.join(timeout=5)

    assert records == [b"alpha", b"beta", None]
