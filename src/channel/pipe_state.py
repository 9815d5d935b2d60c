"""Persistent pipe index state.

This module stores the next pipe index per channel so that iterator
minting resumes at the same shard across process restarts.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
import tempfile
import threading

from core.constants import PIPE_STATE_FILE_SUFFIX
from core.errors import PipeModeConfigError, PipeModeStateError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


class PipeStateStore:
    """Filesystem-backed next-pipe-index counter for one channel."""

    def __init__(self, state_directory: Path, channel_name: str) -> None:
        _validate_channel_name(channel_name)
        self._state_directory = Path(state_directory).expanduser()
        self._channel_name = channel_name
        self._lock = threading.Lock()
        try:
            self._state_directory.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise PipeModeConfigError(
                f"Failed to create pipe state directory {self._state_directory}: {error}. "
                "Provide a writable state directory."
            ) from error
        self._next_index = self._read_index()

    @property
    def state_path(self) -> Path:
        return self._state_directory / f"{self._channel_name}{PIPE_STATE_FILE_SUFFIX}"

    def current(self) -> int:
        """Return the index of the next pipe to open."""
        with self._lock:
            return self._next_index

    def advance(self) -> int:
        """Increment and persist the next pipe index.

        Returns:
            The new next pipe index.

        Raises:
            PipeModeStateError: If the new index cannot be written durably.
        """
        with self._lock:
            return self._advance_locked()

    def _advance_locked(self) -> int:
        next_index = self._next_index + 1
        self._write_index(next_index)
        self._next_index = next_index
        _LOGGER.info(
            "pipe_state_advanced",
            channel=self._channel_name,
            next_pipe_index=next_index,
        )
        return next_index

    def _read_index(self) -> int:
        """Read the persisted index, defaulting to zero when absent."""
        state_path = self.state_path
        if not state_path.exists():
            return 0
        try:
            payload = json.loads(state_path.read_text(encoding="utf-8"))
            next_index = payload["next_pipe_index"]
        except (OSError, json.JSONDecodeError, KeyError, TypeError) as error:
            raise PipeModeConfigError(
                f"Failed to read pipe state at {state_path}: {error}. "
                "Restore or delete the state file before reading the channel."
            ) from error
        if not isinstance(next_index, int) or isinstance(next_index, bool) or next_index < 0:
            raise PipeModeConfigError(
                f"Invalid pipe state at {state_path}: expected non-negative integer "
                f"next_pipe_index, got {next_index!r}."
            )
        return next_index

    def _write_index(self, next_index: int) -> None:
        """Replace the state file atomically with the new index."""
        state_path = self.state_path
        payload = {"channel": self._channel_name, "next_pipe_index": next_index}
        temp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self._state_directory,
                prefix=f".{self._channel_name}.",
                suffix=".tmp",
                delete=False,
            ) as temp_file:
                temp_name = temp_file.name
                temp_file.write(json.dumps(payload, indent=2) + "\n")
                temp_file.flush()
                os.fsync(temp_file.fileno())
            os.replace(temp_name, state_path)
        except OSError as error:
            if temp_name is not None and os.path.exists(temp_name):
                os.unlink(temp_name)
            raise PipeModeStateError(
                f"Failed to persist pipe index {next_index} for channel "
                f"'{self._channel_name}' at {state_path}: {error}. "
                "Fix the state directory before minting further iterators."
            ) from error


def _validate_channel_name(channel_name: str) -> None:
    """Reject channel names that would place state outside its directory.

    Raises:
        PipeModeConfigError: If the name is not a plain file name.
    """
    separators = [separator for separator in ("/", os.sep, os.altsep) if separator]
    if (
        not channel_name
        or channel_name in (".", "..")
        or any(separator in channel_name for separator in separators)
    ):
        raise PipeModeConfigError(
            f"Invalid channel name '{channel_name}': expected a plain file name "
            "without path separators."
        )
