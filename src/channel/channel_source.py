"""Reusable channel configuration that mints per-epoch iterators.

Each call to ``new_iterator`` binds an iterator to the pipe at the
persisted next index and then advances that index.
"""

from __future__ import annotations

from pathlib import Path
import threading

from channel.channel_iterator import ChannelIterator
from channel.pipe_path import build_pipe_path
from channel.pipe_state import PipeStateStore
from core.config import PipeModeConfig
from core.errors import PipeModeStateError
from core.logging_config import get_logger
from core.types import ReaderOptions, RecordFormat, parse_record_format

_LOGGER = get_logger(__name__)


class ChannelSource:
    """Mint record iterators over the successive pipes of one channel."""

    def __init__(
        self,
        record_format: str,
        state_directory: str | Path,
        channel: str,
        channel_directory: str | Path,
        options: ReaderOptions | None = None,
    ) -> None:
        """Create a channel source.

        Args:
            record_format: One of ``RecordIO``, ``TFRecord``, ``TextLine``.
            state_directory: Directory holding the persisted pipe index.
            channel: Channel name used in pipe file names.
            channel_directory: Directory where channel pipes are created.
            options: Optional pipe reading options.

        Raises:
            PipeModeConfigError: If the format is unknown or the state
                location is unreadable.
        """
        self._record_format = parse_record_format(record_format)
        self._channel = channel
        self._channel_directory = str(channel_directory)
        self._options = options or ReaderOptions()
        self._state = PipeStateStore(Path(state_directory), channel)
        self._mint_lock = threading.Lock()

    @classmethod
    def from_config(cls, channel: str, config: PipeModeConfig | None = None) -> "ChannelSource":
        """Build a channel source from runtime configuration.

        Args:
            channel: Channel name.
            config: Optional runtime configuration; read from env if omitted.

        Returns:
            Configured channel source.
        """
        resolved = config or PipeModeConfig.from_env()
        return cls(
            record_format=resolved.record_format,
            state_directory=resolved.state_dir,
            channel=channel,
            channel_directory=resolved.channel_dir,
            options=resolved.reader_options(),
        )

    @property
    def channel(self) -> str:
        return self._channel

    @property
    def record_format(self) -> RecordFormat:
        return self._record_format

    def current_pipe_index(self) -> int:
        """Return the index the next minted iterator will read."""
        return self._state.current()

    def new_iterator(self) -> ChannelIterator:
        """Bind an iterator to the next pipe and advance the pipe index.

        The index is advanced only after the iterator was constructed, so a
        construction failure leaves the same pipe for the next attempt.

        Returns:
            Iterator over the pipe at the previous next index.

        Raises:
            PipeModeStateError: If the advanced index cannot be persisted.
        """
        with self._mint_lock:
            pipe_index = self._state.current()
            pipe_path = build_pipe_path(self._channel_directory, self._channel, pipe_index)
            iterator = ChannelIterator(
                self._record_format,
                pipe_path,
                options=self._options,
                name=f"PipeMode-{self._channel}-{pipe_index}",
            )
            try:
                self._state.advance()
            except PipeModeStateError:
                iterator.close()
                raise
        _LOGGER.info(
            "pipe_iterator_created",
            channel=self._channel,
            pipe_index=pipe_index,
            pipe_path=pipe_path,
            record_format=self._record_format,
        )
        return iterator
