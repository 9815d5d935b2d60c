"""Pipe naming convention for channel shards."""

from __future__ import annotations

from core.constants import PIPE_NAME_SEPARATOR
from core.errors import PipeModeConfigError


def build_pipe_path(channel_directory: str, channel_name: str, pipe_index: int) -> str:
    """Return the filesystem path of the Nth pipe of a channel.

    Args:
        channel_directory: Directory holding the channel FIFOs.
        channel_name: Channel name, e.g. ``train``.
        pipe_index: Zero-based pipe index.

    Returns:
        Path such as ``/opt/ml/input/data/train_3``.

    Raises:
        PipeModeConfigError: If the pipe index is negative.
    """
    if pipe_index < 0:
        raise PipeModeConfigError(
            f"Invalid pipe index {pipe_index} for channel '{channel_name}': expected value >= 0."
        )
    directory = channel_directory if channel_directory.endswith("/") else channel_directory + "/"
    return f"{directory}{channel_name}{PIPE_NAME_SEPARATOR}{pipe_index}"
