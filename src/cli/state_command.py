"""State command wiring for PipeMode CLI."""

from __future__ import annotations

import argparse
import sys
from typing import Any

from channel.pipe_state import PipeStateStore
from core.config import PipeModeConfig
from core.errors import PipeModeError


def add_state_command(subparsers: Any) -> None:
    """Register state subcommand."""
    parser = subparsers.add_parser("state", help="Show the next pipe index of a channel")
    parser.add_argument("--channel", required=True, help="Channel name")


def run_state_command(config: PipeModeConfig, args: argparse.Namespace) -> int:
    """Print the persisted next pipe index."""
    try:
        store = PipeStateStore(config.state_dir, args.channel)
    except PipeModeError as error:
        print(f"state_error={error}", file=sys.stderr)
        return 1
    print(f"channel={args.channel}")
    print(f"next_pipe_index={store.current()}")
    print(f"state_path={store.state_path}")
    return 0
