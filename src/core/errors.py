"""PipeMode exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class PipeModeError(Exception):
    """Base exception for all PipeMode failures."""


class PipeModeConfigError(PipeModeError):
    """Raised for invalid channel or runtime configuration."""


class PipeModeDecodeError(PipeModeError):
    """Raised when record framing or checksums are violated."""


class PipeModeIOError(PipeModeError):
    """Raised when a pipe cannot be opened or read."""


class PipeModeStateError(PipeModeError):
    """Raised when the pipe index cannot be durably advanced."""


class PipeModeDependencyError(PipeModeError):
    """Raised when an optional runtime dependency is missing."""
