"""RIFF/WAVE reading, writing and basic signal processing."""

from wavparser.codec import AudioFormat, FormatCode, build_wave_bytes, read_wave
from wavparser.config import PARSER_VERSION, ReaderConfig, WriterConfig
from wavparser.document import WaveDocument
from wavparser.errors import DecodeError, ErrorKind, MergeError, ParsingError, UnsupportedError, WaveError
from wavparser.flac import is_flac_available
from wavparser.processing import MergeAlgorithm, add_silence, change_sample_rate, change_volume, merge

__version__ = PARSER_VERSION

__all__ = [
    "AudioFormat",
    "DecodeError",
    "ErrorKind",
    "FormatCode",
    "MergeAlgorithm",
    "MergeError",
    "ParsingError",
    "ReaderConfig",
    "UnsupportedError",
    "WaveDocument",
    "WaveError",
    "WriterConfig",
    "__version__",
    "add_silence",
    "build_wave_bytes",
    "is_flac_available",
    "change_sample_rate",
    "change_volume",
    "merge",
    "read_wave",
]
