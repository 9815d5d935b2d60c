"""Drain command wiring for PipeMode CLI."""

from __future__ import annotations

import argparse
import sys
from typing import Any

from channel.channel_source import ChannelSource
from core.config import PipeModeConfig
from core.constants import SUPPORTED_RECORD_FORMATS
from core.errors import PipeModeError
from core.types import PipeFault, PipeRecord


def add_drain_command(subparsers: Any) -> None:
    """Register drain subcommand."""
    parser = subparsers.add_parser(
        "drain",
        help="Read the next pipe of a channel to its end",
    )
    parser.add_argument("--channel", required=True, help="Channel name")
    parser.add_argument(
        "--record-format",
        choices=SUPPORTED_RECORD_FORMATS,
        help="Override PIPEMODE_RECORD_FORMAT for this command",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Print every record as UTF-8 text",
    )


def run_drain_command(config: PipeModeConfig, args: argparse.Namespace) -> int:
    """Mint one iterator, drain it, and print a summary."""
    try:
        source = ChannelSource.from_config(args.channel, config)
        pipe_index = source.current_pipe_index()
        iterator = source.new_iterator()
    except PipeModeError as error:
        print(f"drain_error={error}", file=sys.stderr)
        return 1
    record_count = 0
    byte_count = 0
    with iterator:
        while True:
            result = iterator.pull()
            if isinstance(result, PipeFault):
                print(f"drain_error={result.error}", file=sys.stderr)
                return 1
            if not isinstance(result, PipeRecord):
                break
            record_count += 1
            byte_count += len(result.data)
            if args.show:
                print(result.data.decode("utf-8", errors="replace"))
    print(f"pipe_index={pipe_index}")
    print(f"records={record_count}")
    print(f"bytes={byte_count}")
    return 0
