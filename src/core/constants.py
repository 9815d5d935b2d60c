"""Core constants used across PipeMode modules.

This module centralizes wire-format markers and runtime defaults.
Keeping values here avoids magic literals in reader logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_STATE_DIR = Path("/opt/ml/pipe_state")
DEFAULT_CHANNEL_DIR = Path("/opt/ml/input/data")
DEFAULT_RECORD_FORMAT = "RecordIO"
SUPPORTED_RECORD_FORMATS = ("RecordIO", "TFRecord", "TextLine")
DEFAULT_READ_SIZE = 65536
DEFAULT_OPEN_TIMEOUT_SECONDS = 120.0
DEFAULT_OPEN_POLL_INTERVAL_SECONDS = 0.1
PIPE_NAME_SEPARATOR = "_"
PIPE_STATE_FILE_SUFFIX = ".pipestate.json"
TEXT_LINE_DELIMITER = b"\n"
TFRECORD_LENGTH_SIZE = 8
TFRECORD_CRC_SIZE = 4
TFRECORD_CRC_MASK_DELTA = 0xA282EAD8
RECORDIO_MAGIC = 0xCED7230A
RECORDIO_HEADER_SIZE = 8
RECORDIO_LENGTH_BITS = 29
RECORDIO_ALIGNMENT = 4
