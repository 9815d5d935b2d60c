"""Runtime configuration model for PipeMode.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_CHANNEL_DIR,
    DEFAULT_OPEN_TIMEOUT_SECONDS,
    DEFAULT_READ_SIZE,
    DEFAULT_RECORD_FORMAT,
    DEFAULT_STATE_DIR,
)
from core.errors import PipeModeConfigError
from core.types import ReaderOptions, RecordFormat, parse_record_format


@dataclass(frozen=True)
class PipeModeConfig:
    """Validated runtime configuration.

    Attributes:
        state_dir: Directory holding persisted pipe indices.
        channel_dir: Directory where the channel FIFOs are created.
        record_format: Default record encoding of channel pipes.
        read_size: Maximum bytes requested per raw pipe read.
        open_timeout_seconds: How long to wait for a pipe to appear.
    """

    state_dir: Path
    channel_dir: Path
    record_format: RecordFormat
    read_size: int
    open_timeout_seconds: float

    @classmethod
    def from_env(cls, record_format: str | None = None) -> "PipeModeConfig":
        """Build config from process environment variables.

        Args:
            record_format: Optional record format that takes precedence over
                PIPEMODE_RECORD_FORMAT, which is then not read.

        Returns:
            A validated config object.

        Raises:
            PipeModeConfigError: If environment values are invalid.
        """
        state_dir_value = os.getenv("PIPEMODE_STATE_DIR", str(DEFAULT_STATE_DIR))
        channel_dir_value = os.getenv("PIPEMODE_CHANNEL_DIR", str(DEFAULT_CHANNEL_DIR))
        if record_format is None:
            record_format = os.getenv("PIPEMODE_RECORD_FORMAT", DEFAULT_RECORD_FORMAT)
        parsed_format = parse_record_format(record_format)
        read_size = _parse_read_size(os.getenv("PIPEMODE_READ_SIZE", str(DEFAULT_READ_SIZE)))
        open_timeout = _parse_open_timeout(
            os.getenv("PIPEMODE_OPEN_TIMEOUT", str(DEFAULT_OPEN_TIMEOUT_SECONDS))
        )
        return cls(
            state_dir=Path(state_dir_value).expanduser(),
            channel_dir=Path(channel_dir_value).expanduser(),
            record_format=parsed_format,
            read_size=read_size,
            open_timeout_seconds=open_timeout,
        )

    def reader_options(self) -> ReaderOptions:
        """Build reader options from this config."""
        return ReaderOptions(
            read_size=self.read_size,
            open_timeout_seconds=self.open_timeout_seconds,
        )


def _parse_read_size(raw_value: str) -> int:
    """Parse the read size environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Positive read size in bytes.

    Raises:
        PipeModeConfigError: If value is not a positive integer.
    """
    try:
        read_size = int(raw_value)
    except ValueError as error:
        raise PipeModeConfigError(
            "Invalid PIPEMODE_READ_SIZE value: "
            f"expected integer, got '{raw_value}'. "
            "Set PIPEMODE_READ_SIZE to a positive byte count."
        ) from error
    if read_size < 1:
        raise PipeModeConfigError(
            f"Invalid PIPEMODE_READ_SIZE value {read_size}: expected value >= 1."
        )
    return read_size


def _parse_open_timeout(raw_value: str) -> float:
    """Parse the pipe open timeout environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Non-negative timeout in seconds.

    Raises:
        PipeModeConfigError: If value is not a non-negative number.
    """
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise PipeModeConfigError(
            "Invalid PIPEMODE_OPEN_TIMEOUT value: "
            f"expected number of seconds, got '{raw_value}'."
        ) from error
    if timeout < 0:
        raise PipeModeConfigError(
            f"Invalid PIPEMODE_OPEN_TIMEOUT value {timeout}: expected value >= 0."
        )
    return timeout
