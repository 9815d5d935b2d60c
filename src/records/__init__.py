"""Record framing readers.

This module decodes RecordIO, TFRecord, and newline-delimited records
from blocking pipe streams into opaque byte strings.
"""
