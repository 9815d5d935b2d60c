"""Unit tests for channel sources and pipe sequencing."""

from __future__ import annotations

from pathlib import Path

import pytest

from channel.channel_source import ChannelSource
from channel.pipe_state import PipeStateStore
from core.config import PipeModeConfig
from core.errors import PipeModeConfigError, PipeModeStateError
from core.types import EndOfStream, PipeRecord, ReaderOptions
from tests.framing import tfrecord_frame


def _source(tmp_path: Path, record_format: str = "TextLine") -> ChannelSource:
    return ChannelSource(
        record_format,
        tmp_path / "state",
        "data",
        tmp_path / "ch",
        options=ReaderOptions(open_timeout_seconds=0),
    )


def test_invalid_record_format_fails_at_construction(tmp_path: Path) -> None:
    """Unknown formats should be rejected before any iterator exists."""
    with pytest.raises(PipeModeConfigError):
        _source(tmp_path, record_format="CSV")

    assert not (tmp_path / "state").exists()


def test_tfrecord_scenario_yields_records_then_end(tmp_path: Path) -> None:
    """The first iterator should read pipe zero of the channel."""
    channel_dir = tmp_path / "ch"
    channel_dir.mkdir()
    (channel_dir / "data_0").write_bytes(tfrecord_frame(b"alpha") + tfrecord_frame(b"beta"))
    iterator = _source(tmp_path, record_format="TFRecord").new_iterator()

    results = [iterator.pull() for _ in range(4)]

    assert results == [
        PipeRecord(data=b"alpha"),
        PipeRecord(data=b"beta"),
        EndOfStream(),
        EndOfStream(),
    ]


def test_minting_resolves_contiguous_pipe_indices(tmp_path: Path) -> None:
    """Each drained epoch should read the next pipe in order."""
    channel_dir = tmp_path / "ch"
    channel_dir.mkdir()
    for pipe_index in range(3):
        (channel_dir / f"data_{pipe_index}").write_bytes(f"epoch-{pipe_index}\n".encode())
    source = _source(tmp_path)

    epochs = [list(source.new_iterator()) for _ in range(3)]

    assert epochs == [[b"epoch-0"], [b"epoch-1"], [b"epoch-2"]] and source.current_pipe_index() == 3


def test_minting_names_iterator_after_pipe(tmp_path: Path) -> None:
    """Iterators should carry the channel and pipe index they were bound to."""
    source = _source(tmp_path)
    source.new_iterator()

    iterator = source.new_iterator()

    assert iterator.name == "PipeMode-data-1" and iterator.pipe_path.endswith("/ch/data_1")


def test_restart_resumes_at_persisted_index(tmp_path: Path) -> None:
    """A rebuilt source should mint from the persisted index, not zero."""
    source = _source(tmp_path)
    for _ in range(5):
        source.new_iterator()

    restarted = _source(tmp_path)
    iterator = restarted.new_iterator()

    assert iterator.pipe_path.endswith("data_5") and restarted.current_pipe_index() == 6


def test_state_failure_propagates_from_minting(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """An unpersisted advance should fail the minting call."""
    source = _source(tmp_path)

    def _fail_advance(self: PipeStateStore) -> int:
        raise PipeModeStateError("disk full")

    monkeypatch.setattr(PipeStateStore, "advance", _fail_advance)

    with pytest.raises(PipeModeStateError):
        source.new_iterator()

    assert source.current_pipe_index() == 0


def test_from_config_uses_configured_locations(tmp_path: Path) -> None:
    """Config-driven sources should read pipes from the configured directory."""
    channel_dir = tmp_path / "input"
    channel_dir.mkdir()
    (channel_dir / "train_0").write_bytes(b"x\ny\n")
    config = PipeModeConfig(
        state_dir=tmp_path / "state",
        channel_dir=channel_dir,
        record_format="TextLine",
        read_size=3,
        open_timeout_seconds=0,
    )

    records = list(ChannelSource.from_config("train", config).new_iterator())

    assert records == [b"x", b"y"]
