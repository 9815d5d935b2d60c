"""Format dispatch for record readers."""

from __future__ import annotations

from core.types import RecordFormat
from records.pipe_stream import PipeStream
from records.record_reader import RecordReader
from records.recordio_reader import RecordIOReader
from records.text_line_reader import TextLineReader
from records.tfrecord_reader import TFRecordReader

_READER_TYPES: dict[RecordFormat, type[RecordReader]] = {
    "RecordIO": RecordIOReader,
    "TFRecord": TFRecordReader,
    "TextLine": TextLineReader,
}


def create_record_reader(record_format: RecordFormat, stream: PipeStream) -> RecordReader:
    """Build the reader for a record format.

    Args:
        record_format: Validated record encoding.
        stream: Pipe stream the reader takes ownership of.

    Returns:
        Concrete record reader bound to the stream.
    """
    return _READER_TYPES[record_format](stream)
