"""RIFF/WAVE binary codec."""

from wavparser.codec.header import IEEE_FLOAT, PCM, AudioFormat, FormatCode, FormatHeader, parse_format_chunk
from wavparser.codec.reader import ParsedWave, read_wave
from wavparser.codec.samples import SUPPORTED_BITS_PER_SAMPLE, decode_samples, encode_samples
from wavparser.codec.writer import build_wave_bytes

__all__ = [
    "AudioFormat",
    "FormatCode",
    "FormatHeader",
    "IEEE_FLOAT",
    "PCM",
    "ParsedWave",
    "SUPPORTED_BITS_PER_SAMPLE",
    "build_wave_bytes",
    "decode_samples",
    "encode_samples",
    "parse_format_chunk",
    "read_wave",
]
