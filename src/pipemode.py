"""Public SDK surface for PipeMode.

This module provides a stable import path for training code.
It re-exports the channel source, iterator, and typed result models.
"""

from __future__ import annotations

from channel.channel_iterator import ChannelIterator
from channel.channel_source import ChannelSource
from channel.pipe_path import build_pipe_path
from channel.pipe_state import PipeStateStore
from core.config import PipeModeConfig
from core.errors import (
    PipeModeConfigError,
    PipeModeDecodeError,
    PipeModeDependencyError,
    PipeModeError,
    PipeModeIOError,
    PipeModeStateError,
)
from core.types import (
    EndOfStream,
    PipeFault,
    PipeRecord,
    PullResult,
    ReaderOptions,
    RecordFormat,
)
from serve.torch_dataset import create_pytorch_dataloader, create_pytorch_dataset

__all__ = [
    "ChannelIterator",
    "ChannelSource",
    "EndOfStream",
    "PipeFault",
    "PipeModeConfig",
    "PipeModeConfigError",
    "PipeModeDecodeError",
    "PipeModeDependencyError",
    "PipeModeError",
    "PipeModeIOError",
    "PipeModeStateError",
    "PipeRecord",
    "PipeStateStore",
    "PullResult",
    "ReaderOptions",
    "RecordFormat",
    "build_pipe_path",
    "create_pytorch_dataloader",
    "create_pytorch_dataset",
]
