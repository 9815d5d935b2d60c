"""Shared record framing and pipe helpers for tests."""

from __future__ import annotations

import os
from pathlib import Path
import struct
import threading
import time

from core.constants import RECORDIO_MAGIC
from records.tfrecord_reader import masked_crc32c


def tfrecord_frame(payload: bytes) -> bytes:
    """Frame one payload as a TFRecord."""
    length_bytes = struct.pack("<Q", len(payload))
    return (
        length_bytes
        + struct.pack("<I", masked_crc32c(length_bytes))
        + payload
        + struct.pack("<I", masked_crc32c(payload))
    )


def recordio_part(payload: bytes, flag: int = 0, magic: int = RECORDIO_MAGIC) -> bytes:
    """Frame one RecordIO part with its padding."""
    header = struct.pack("<II", magic, (flag << 29) | len(payload))
    return header + payload + b"\x00" * (-len(payload) % 4)


def start_fifo_writer(
    fifo_path: Path,
    content: bytes,
    chunk_size: int = 1,
    delay_seconds: float = 0.0,
) -> threading.Thread:
    """Create a FIFO and feed it from a thread in small chunks.

    Args:
        fifo_path: Path of the FIFO to create.
        content: Bytes to write before closing the write end.
        chunk_size: Bytes per write call.
        delay_seconds: Pause between write calls.

    Returns:
        Started writer thread.
    """
    if not fifo_path.exists():
        os.mkfifo(fifo_path)

    def _write() -> None:
        with open(fifo_path, "wb", buffering=0) as fifo:
            for offset in range(0, len(content), chunk_size):
                fifo.write(content[offset : offset + chunk_size])
                if delay_seconds:
                    time.sleep(delay_seconds)

    writer = threading.Thread(target=_write, daemon=True)
    writer.start()
    return writer


def start_idle_fifo_writer(fifo_path: Path, release: threading.Event) -> threading.Thread:
    """Create a FIFO and hold its write end open without writing.

    Args:
        fifo_path: Path of the FIFO to create.
        release: Event that lets the writer close the write end.

    Returns:
        Started writer thread.
    """
    if not fifo_path.exists():
        os.mkfifo(fifo_path)

    def _hold() -> None:
        with open(fifo_path, "wb", buffering=0):
            release.wait(timeout=10)

    writer = threading.Thread(target=_hold, daemon=True)
    writer.start()
    return writer
