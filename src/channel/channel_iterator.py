"""Single-pipe record iterator.

This module drives one record reader for one epoch and translates its
outcomes into typed pull results for the caller.
"""

from __future__ import annotations

import threading
from typing import Iterator

from core.errors import PipeModeError, PipeModeIOError
from core.logging_config import get_logger
from core.types import (
    EndOfStream,
    PipeFault,
    PipeRecord,
    PullResult,
    ReaderOptions,
    parse_record_format,
)
from records.pipe_stream import PipeStream
from records.reader_factory import create_record_reader

_LOGGER = get_logger(__name__)


class ChannelIterator:
    """Serialized record pulls over exactly one pipe."""

    def __init__(
        self,
        record_format: str,
        pipe_path: str,
        options: ReaderOptions | None = None,
        name: str | None = None,
    ) -> None:
        self._record_format = parse_record_format(record_format)
        self._pipe_path = pipe_path
        self._name = name or f"PipeMode-{pipe_path}"
        self._reader = create_record_reader(self._record_format, PipeStream(pipe_path, options))
        self._lock = threading.Lock()
        self._outcome: EndOfStream | PipeFault | None = None
        self._records_read = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def pipe_path(self) -> str:
        return self._pipe_path

    @property
    def records_read(self) -> int:
        return self._records_read

    @property
    def exhausted(self) -> bool:
        """Whether a terminal end or fault has been reached."""
        return self._outcome is not None

    @property
    def closed(self) -> bool:
        """Whether the underlying pipe stream has been released."""
        return self._reader.closed

    def pull(self) -> PullResult:
        """Decode the next record of the pipe.

        Returns:
            The next record, ``EndOfStream`` once the pipe is drained, or a
            ``PipeFault`` carrying the decode or I/O error. End and fault are
            terminal and returned again by every later call.
        """
        with self._lock:
            if self._outcome is not None:
                return self._outcome
            try:
                record = self._reader.read_record()
            except PipeModeError as error:
                return self._finish_with_fault(error)
            except (OSError, ValueError) as error:
                return self._finish_with_fault(
                    PipeModeIOError(f"Failed to read pipe {self._pipe_path}: {error}.")
                )
            if record is None:
                return self._finish_with_end()
            self._records_read += 1
            return PipeRecord(data=record)

    def close(self) -> None:
        """Close the pipe; an in-flight or later pull reports a fault."""
        self._reader.close()

    def __iter__(self) -> Iterator[bytes]:
        """Yield record bytes until the pipe is drained.

        Raises:
            PipeModeError: The fault that terminated the pipe.
        """
        while True:
            result = self.pull()
            if isinstance(result, PipeRecord):
                yield result.data
            elif isinstance(result, PipeFault):
                raise result.error
            else:
                return

    def __enter__(self) -> "ChannelIterator":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _finish_with_end(self) -> EndOfStream:
        outcome = EndOfStream()
        self._outcome = outcome
        self._reader.close()
        _LOGGER.info(
            "pipe_drained",
            iterator=self._name,
            pipe_path=self._pipe_path,
            record_format=self._record_format,
            records=self._records_read,
        )
        return outcome

    def _finish_with_fault(self, error: PipeModeError) -> PipeFault:
        outcome = PipeFault(error=error)
        self._outcome = outcome
        self._reader.close()
        _LOGGER.warning(
            "pipe_fault",
            iterator=self._name,
            pipe_path=self._pipe_path,
            error_type=type(error).__name__,
            error=str(error),
            records=self._records_read,
        )
        return outcome
