"""Error taxonomy for parsing, processing and external decoding."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    NOT_RIFF = "not_riff"
    NOT_WAVE = "not_wave"
    CHUNK_OVERFLOW = "chunk_overflow"
    TRUNCATED_CHUNK = "truncated_chunk"
    DATA_BEFORE_FORMAT = "data_before_format"
    MISSING_FORMAT = "missing_format"
    MALFORMED_HEADER = "malformed_header"
    UNSUPPORTED_FORMAT = "unsupported_format"
    MISSING_EXTENSION = "missing_extension"
    MALFORMED_EXTENSION = "malformed_extension"
    EMPTY_EXTENSION = "empty_extension"
    UNSUPPORTED_BITS_PER_SAMPLE = "unsupported_bits_per_sample"
    MISMATCHED_VALID_BITS = "mismatched_valid_bits"
    UNSUPPORTED_SUB_FORMAT = "unsupported_sub_format"
    INCOMPATIBLE_CHANNEL_COUNTS = "incompatible_channel_counts"
    DECODE_FAILED = "decode_failed"


class WaveError(Exception):
    """Base class for every error raised by wavparser."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class ParsingError(WaveError, ValueError):
    """Raised when a byte source is not a well-formed RIFF/WAVE file."""


class UnsupportedError(WaveError, NotImplementedError):
    """Raised for well-formed headers describing layouts the codec does not handle."""


class MergeError(WaveError, ValueError):
    """Raised when two documents cannot be mixed together."""


class DecodeError(WaveError, RuntimeError):
    """Raised when the external compressed-audio decoder fails."""
