"""Blocking byte stream over one named pipe.

This module owns the raw file handle for a single pipe. It loops over
partial reads so that callers always receive whole byte ranges, and waits
on a wake-up pipe next to the data pipe so that ``close()`` from another
thread interrupts a blocked read.
"""

from __future__ import annotations

import io
import os
from pathlib import Path
import select
import threading
import time

from core.errors import PipeModeIOError
from core.types import ReaderOptions


class PipeStream:
    """Lazily opened, non-seekable byte stream bound to one pipe path."""

    def __init__(self, pipe_path: str, options: ReaderOptions | None = None) -> None:
        self._pipe_path = pipe_path
        self._options = options or ReaderOptions()
        self._handle: io.FileIO | None = None
        self._wake_reader: int | None = None
        self._wake_writer: int | None = None
        self._io_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._closed = False
        self._offset = 0

    @property
    def pipe_path(self) -> str:
        return self._pipe_path

    @property
    def offset(self) -> int:
        """Number of bytes consumed from the pipe so far."""
        return self._offset

    @property
    def closed(self) -> bool:
        return self._closed

    def read_exactly(self, size: int) -> bytes:
        """Read ``size`` bytes, looping over partial reads.

        Args:
            size: Number of bytes requested.

        Returns:
            Exactly ``size`` bytes, or fewer only when the pipe closed.

        Raises:
            PipeModeIOError: If the pipe cannot be opened or read, or the
                stream is closed while the read is in flight.
        """
        if size <= 0:
            return b""
        with self._io_lock:
            try:
                handle = self._ensure_open()
                chunks: list[bytes] = []
                remaining = size
                while remaining > 0:
                    chunk = self._raw_read(handle, remaining)
                    if not chunk:
                        break
                    chunks.append(chunk)
                    remaining -= len(chunk)
                return b"".join(chunks)
            finally:
                if self._closed:
                    self._release_handles()

    def read_chunk(self) -> bytes:
        """Read whatever the pipe delivers next, up to the configured read size.

        Returns:
            Non-empty bytes, or ``b""`` when the pipe closed.

        Raises:
            PipeModeIOError: If the pipe cannot be opened or read, or the
                stream is closed while the read is in flight.
        """
        with self._io_lock:
            try:
                handle = self._ensure_open()
                return self._raw_read(handle, self._options.read_size)
            finally:
                if self._closed:
                    self._release_handles()

    def close(self) -> None:
        """Close the stream; safe to call from another thread.

        A read blocked on the pipe is woken and fails with
        ``PipeModeIOError``. When a read is in flight, the reading thread
        releases the handle on its way out.
        """
        with self._state_lock:
            if self._closed:
                return
            self._closed = True
            if self._wake_writer is not None:
                os.write(self._wake_writer, b"\0")
        if self._io_lock.acquire(blocking=False):
            try:
                self._release_handles()
            finally:
                self._io_lock.release()

    def _raw_read(self, handle: io.FileIO, size: int) -> bytes:
        try:
            self._wait_readable(handle)
            chunk = handle.read(min(size, self._options.read_size))
        except (OSError, ValueError) as error:
            raise PipeModeIOError(
                f"Failed to read pipe {self._pipe_path} at byte offset {self._offset}: "
                f"{error}."
            ) from error
        if self._closed:
            raise self._closed_error()
        if chunk is None:
            raise PipeModeIOError(
                f"Failed to read pipe {self._pipe_path}: handle is non-blocking."
            )
        self._offset += len(chunk)
        return chunk

    def _wait_readable(self, handle: io.FileIO) -> None:
        """Block until the pipe has data or end of stream, or close() is called."""
        wake_reader = self._wake_reader
        ready, _, _ = select.select([handle.fileno(), wake_reader], [], [])
        if wake_reader in ready or self._closed:
            raise self._closed_error()

    def _ensure_open(self) -> io.FileIO:
        if self._closed:
            raise self._closed_error()
        if self._handle is None:
            self._wait_for_pipe()
            try:
                handle = io.FileIO(self._pipe_path, "rb")
            except OSError as error:
                raise PipeModeIOError(
                    f"Failed to open pipe {self._pipe_path}: {error}."
                ) from error
            wake_reader, wake_writer = os.pipe()
            with self._state_lock:
                self._handle = handle
                self._wake_reader = wake_reader
                self._wake_writer = wake_writer
            if self._closed:
                raise PipeModeIOError(
                    f"Failed to open pipe {self._pipe_path}: stream was closed."
                )
        return self._handle

    def _release_handles(self) -> None:
        """Close the pipe handle and wake-up pipe. Caller holds the I/O lock."""
        with self._state_lock:
            handle, self._handle = self._handle, None
            wake_fds = [fd for fd in (self._wake_reader, self._wake_writer) if fd is not None]
            self._wake_reader = None
            self._wake_writer = None
        if handle is not None:
            handle.close()
        for wake_fd in wake_fds:
            os.close(wake_fd)

    def _closed_error(self) -> PipeModeIOError:
        return PipeModeIOError(
            f"Failed to read pipe {self._pipe_path} at byte offset {self._offset}: "
            "stream was closed."
        )

    def _wait_for_pipe(self) -> None:
        """Block until the pipe exists or the open timeout expires."""
        pipe_path = Path(self._pipe_path)
        deadline = time.monotonic() + self._options.open_timeout_seconds
        while not pipe_path.exists():
            if self._closed or time.monotonic() >= deadline:
                raise PipeModeIOError(
                    f"Failed to open pipe {self._pipe_path}: path does not exist after "
                    f"waiting {self._options.open_timeout_seconds:g}s. "
                    "Check the channel name and channel directory."
                )
            time.sleep(self._options.open_poll_interval_seconds)
