"""Per-bit-depth sample decode/encode for interleaved WAVE data blocks."""

from __future__ import annotations

import struct

from wavparser.codec.header import FormatCode
from wavparser.errors import ErrorKind, ParsingError

SUPPORTED_BITS_PER_SAMPLE = (8, 16, 24, 32, 64)

# Positive and negative full-scale magnitudes per integer depth.
_INT_LIMITS: dict[int, tuple[int, int]] = {
    bits: ((1 << (bits - 1)) - 1, 1 << (bits - 1)) for bits in SUPPORTED_BITS_PER_SAMPLE
}
_INT_STRUCT_CODES = {16: "h", 32: "i", 64: "q"}
_FLOAT_STRUCT_CODES = {32: "f", 64: "d"}


def sample_width(bits_per_sample: int) -> int:
    if bits_per_sample not in SUPPORTED_BITS_PER_SAMPLE:
        raise ParsingError(
            ErrorKind.UNSUPPORTED_BITS_PER_SAMPLE,
            f"bits per sample {bits_per_sample} is not supported",
        )
    return bits_per_sample // 8


def normalize_int(value: int, bits_per_sample: int) -> float:
    positive, negative = _INT_LIMITS[bits_per_sample]
    if value >= 0:
        return value / positive
    return value / negative


def quantize(sample: float, bits_per_sample: int) -> int:
    positive, negative = _INT_LIMITS[bits_per_sample]
    clipped = clip(sample)
    scale = positive if clipped >= 0.0 else negative
    value = int(round(clipped * scale))
    return min(max(value, -negative), positive)


def decode_samples(
    raw: bytes,
    encoding: FormatCode,
    bits_per_sample: int,
    channel_count: int,
    block_align: int,
) -> list[list[float]]:
    """Decode a ``data`` payload into one list of normalized floats per channel.

    ``block_align`` may exceed the tight frame width; the excess bytes of every
    frame are skipped. A trailing partial frame is ignored.
    """
    width = sample_width(bits_per_sample)
    if encoding is FormatCode.IEEE_FLOAT and bits_per_sample not in _FLOAT_STRUCT_CODES:
        raise ParsingError(
            ErrorKind.UNSUPPORTED_BITS_PER_SAMPLE,
            f"IEEE float samples must be 32 or 64 bits, got {bits_per_sample}",
        )

    frame_width = channel_count * width
    frame_count = len(raw) // block_align
    packed = _strip_frame_padding(raw, frame_count, frame_width, block_align)

    if encoding is FormatCode.IEEE_FLOAT:
        values = _unpack_floats(packed, bits_per_sample)
    else:
        values = [normalize_int(value, bits_per_sample) for value in _unpack_ints(packed, bits_per_sample)]

    return [values[channel::channel_count] for channel in range(channel_count)]


def encode_samples(channels: list[list[float]], bits_per_sample: int) -> bytes:
    """Encode channels as interleaved little-endian integer PCM frames."""
    if bits_per_sample not in SUPPORTED_BITS_PER_SAMPLE:
        raise ValueError(f"cannot encode {bits_per_sample}-bit samples")

    interleaved = [quantize(sample, bits_per_sample) for frame in zip(*channels) for sample in frame]
    if bits_per_sample == 8:
        return bytes(value + 128 for value in interleaved)
    if bits_per_sample == 24:
        return b"".join(value.to_bytes(3, "little", signed=True) for value in interleaved)
    code = _INT_STRUCT_CODES[bits_per_sample]
    return struct.pack(f"<{len(interleaved)}{code}", *interleaved)


def _strip_frame_padding(raw: bytes, frame_count: int, frame_width: int, block_align: int) -> bytes:
    if block_align == frame_width:
        return raw[: frame_count * frame_width]
    return b"".join(
        raw[start : start + frame_width] for start in range(0, frame_count * block_align, block_align)
    )


def _unpack_ints(packed: bytes, bits_per_sample: int) -> list[int]:
    if bits_per_sample == 8:
        return [byte - 128 for byte in packed]
    if bits_per_sample == 24:
        return [int.from_bytes(packed[offset : offset + 3], "little", signed=True) for offset in range(0, len(packed), 3)]
    code = _INT_STRUCT_CODES[bits_per_sample]
    count = len(packed) // (bits_per_sample // 8)
    return list(struct.unpack(f"<{count}{code}", packed))


def _unpack_floats(packed: bytes, bits_per_sample: int) -> list[float]:
    code = _FLOAT_STRUCT_CODES[bits_per_sample]
    count = len(packed) // (bits_per_sample // 8)
    return [clip(value) for value in struct.unpack(f"<{count}{code}", packed)]


def clip(value: float) -> float:
    if value > 1.0:
        return 1.0
    if value < -1.0:
        return -1.0
    return value
