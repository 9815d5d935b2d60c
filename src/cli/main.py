"""PipeMode CLI entry points.
This module exposes commands for draining channel pipes and inspecting state.
It maps argparse commands onto channel source calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from cli.drain_command import add_drain_command, run_drain_command
from cli.state_command import add_state_command, run_state_command
from core.config import PipeModeConfig
from core.errors import PipeModeConfigError


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="pipemode", description="PipeMode channel CLI")
    parser.add_argument("--state-dir", help="Override PIPEMODE_STATE_DIR for this command")
    parser.add_argument("--channel-dir", help="Override PIPEMODE_CHANNEL_DIR for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    add_drain_command(subparsers)
    add_state_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the PipeMode CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args)
    except PipeModeConfigError as error:
        parser.error(str(error))
    if args.command == "drain":
        return run_drain_command(config, args)
    if args.command == "state":
        return run_state_command(config, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(args: argparse.Namespace) -> PipeModeConfig:
    """Build runtime config with optional command-line overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Configured runtime config.
    """
    config = PipeModeConfig.from_env(record_format=getattr(args, "record_format", None))
    if args.state_dir:
        config = replace(config, state_dir=Path(args.state_dir).expanduser())
    if args.channel_dir:
        config = replace(config, channel_dir=Path(args.channel_dir).expanduser())
    return config
