"""Shared typed models.

This module defines immutable data models used by the reader, channel,
and serving layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union, cast

from core.constants import (
    DEFAULT_OPEN_POLL_INTERVAL_SECONDS,
    DEFAULT_OPEN_TIMEOUT_SECONDS,
    DEFAULT_READ_SIZE,
    SUPPORTED_RECORD_FORMATS,
)
from core.errors import PipeModeConfigError, PipeModeError

RecordFormat = Literal["RecordIO", "TFRecord", "TextLine"]


def parse_record_format(raw_value: str) -> RecordFormat:
    """Validate a record format name.

    Args:
        raw_value: Format name such as ``TFRecord``.

    Returns:
        Matching record format.

    Raises:
        PipeModeConfigError: If the name is not a supported format.
    """
    if raw_value not in SUPPORTED_RECORD_FORMATS:
        supported = ", ".join(SUPPORTED_RECORD_FORMATS)
        raise PipeModeConfigError(
            f"Invalid record format: '{raw_value}'. Use one of: {supported}."
        )
    return cast(RecordFormat, raw_value)


@dataclass(frozen=True)
class ReaderOptions:
    """Pipe reading options.

    Attributes:
        read_size: Maximum bytes requested per raw read.
        open_timeout_seconds: How long to wait for a pipe to appear.
        open_poll_interval_seconds: Delay between existence checks.
    """

    read_size: int = DEFAULT_READ_SIZE
    open_timeout_seconds: float = DEFAULT_OPEN_TIMEOUT_SECONDS
    open_poll_interval_seconds: float = DEFAULT_OPEN_POLL_INTERVAL_SECONDS


@dataclass(frozen=True)
class PipeRecord:
    """One decoded record handed to the consumer.

    Attributes:
        data: Opaque record bytes.
    """

    data: bytes


@dataclass(frozen=True)
class EndOfStream:
    """Clean end of the current pipe."""


@dataclass(frozen=True)
class PipeFault:
    """Terminal failure of the current pipe.

    Attributes:
        error: Decode or I/O error with path and offset context.
    """

    error: PipeModeError


PullResult = Union[PipeRecord, EndOfStream, PipeFault]
