"""PyTorch integration for PipeMode channels.

This module wraps a channel source in an ``IterableDataset`` where each
pass over the dataset reads the next pipe of the channel.
"""

from __future__ import annotations

from typing import Any, Iterator

from channel.channel_source import ChannelSource
from core.errors import PipeModeDependencyError


def create_pytorch_dataset(source: ChannelSource) -> Any:
    """Create a PyTorch iterable dataset over successive channel pipes.

    Args:
        source: Channel source that mints one iterator per epoch.

    Returns:
        ``torch.utils.data.IterableDataset`` yielding record bytes.

    Raises:
        PipeModeDependencyError: If torch is unavailable.
    """
    torch = _import_torch()

    class ChannelRecordDataset(torch.utils.data.IterableDataset):
        """Iterable dataset that drains one pipe per iteration."""

        def __init__(self, channel_source: ChannelSource) -> None:
            super().__init__()
            self.channel_source = channel_source

        def __iter__(self) -> Iterator[bytes]:
            with self.channel_source.new_iterator() as iterator:
                yield from iterator

    return ChannelRecordDataset(source)


def create_pytorch_dataloader(source: ChannelSource, batch_size: int | None = None) -> Any:
    """Create a PyTorch DataLoader over successive channel pipes.

    Args:
        source: Channel source that mints one iterator per epoch.
        batch_size: Records per batch, or None to yield single records.

    Returns:
        torch.utils.data.DataLoader instance.

    Raises:
        PipeModeDependencyError: If torch is unavailable.
    """
    torch = _import_torch()
    dataset = create_pytorch_dataset(source)
    return torch.utils.data.DataLoader(
        dataset,
        batch_size=batch_size,
        collate_fn=_collate_records if batch_size is not None else None,
    )


def _collate_records(batch: list[bytes]) -> list[bytes]:
    """Keep batched records as a list of opaque byte strings."""
    return list(batch)


def _import_torch() -> Any:
    try:
        import torch
    except ImportError as error:
        raise PipeModeDependencyError(
            "PyTorch dataset integration requires torch, but it is not installed. "
            "Install torch to stream PipeMode channels into training."
        ) from error
    return torch
