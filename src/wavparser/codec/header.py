"""``fmt `` chunk interpretation and the resolved audio format."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from uuid import UUID

from wavparser.errors import ErrorKind, ParsingError, UnsupportedError

_BASE_HEADER = struct.Struct("<HHIIHH")
_EXTENSION = struct.Struct("<HI16s")
_EXTENSION_SIZE = _EXTENSION.size


class FormatCode(IntEnum):
    PCM = 0x0001
    IEEE_FLOAT = 0x0003
    EXTENSIBLE = 0xFFFE


@dataclass(frozen=True, slots=True)
class AudioFormat:
    """Format tag as declared in the header, plus the sub-format it wraps.

    ``sub_format`` and ``sub_format_guid`` are only set for ``EXTENSIBLE``.
    """

    code: FormatCode
    sub_format: FormatCode | None = None
    sub_format_guid: UUID | None = None

    @staticmethod
    def extensible(guid: UUID) -> AudioFormat:
        sub_code = int.from_bytes(guid.bytes_le[:2], "little")
        if sub_code not in (FormatCode.PCM, FormatCode.IEEE_FLOAT):
            raise UnsupportedError(
                ErrorKind.UNSUPPORTED_SUB_FORMAT,
                f"extensible sub format 0x{sub_code:04x} is not supported",
            )
        return AudioFormat(FormatCode.EXTENSIBLE, FormatCode(sub_code), guid)

    @property
    def encoding(self) -> FormatCode:
        if self.code is FormatCode.EXTENSIBLE and self.sub_format is not None:
            return self.sub_format
        return self.code


PCM = AudioFormat(FormatCode.PCM)
IEEE_FLOAT = AudioFormat(FormatCode.IEEE_FLOAT)


@dataclass(frozen=True, slots=True)
class FormatHeader:
    audio_format: AudioFormat
    channel_count: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    channel_mask: int | None = None


def parse_format_chunk(payload: bytes) -> FormatHeader:
    """Interpret a ``fmt `` chunk payload.

    The extensible sub-format GUID is resolved here, once, so codec selection
    downstream only has to look at ``AudioFormat.encoding``.
    """
    if len(payload) < _BASE_HEADER.size:
        raise ParsingError(
            ErrorKind.MALFORMED_HEADER,
            f"fmt chunk holds {len(payload)} bytes, at least {_BASE_HEADER.size} expected",
        )

    raw_code, channel_count, sample_rate, byte_rate, block_align, bits_per_sample = _BASE_HEADER.unpack_from(payload)
    try:
        code = FormatCode(raw_code)
    except ValueError:
        raise ParsingError(
            ErrorKind.UNSUPPORTED_FORMAT,
            f"unsupported wave format 0x{raw_code:04x}",
        ) from None

    if channel_count == 0 or sample_rate == 0:
        raise ParsingError(ErrorKind.MALFORMED_HEADER, "fmt chunk declares zero channels or zero sample rate")
    if bits_per_sample % 8 == 0 and block_align < channel_count * bits_per_sample // 8:
        raise ParsingError(
            ErrorKind.MALFORMED_HEADER,
            f"block align {block_align} is smaller than one frame of {channel_count}x{bits_per_sample} bits",
        )

    header = FormatHeader(
        audio_format=AudioFormat(code),
        channel_count=channel_count,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        block_align=block_align,
        bits_per_sample=bits_per_sample,
    )

    header_left = len(payload) - _BASE_HEADER.size
    if header_left == 0:
        if code is FormatCode.EXTENSIBLE:
            raise ParsingError(ErrorKind.MISSING_EXTENSION, "extensible fmt chunk has no extension block")
        return header

    if header_left < 2:
        raise ParsingError(ErrorKind.MALFORMED_EXTENSION, "fmt chunk extension size field is truncated")
    (extra_size,) = struct.unpack_from("<H", payload, _BASE_HEADER.size)
    if extra_size != header_left - 2:
        raise ParsingError(
            ErrorKind.MALFORMED_EXTENSION,
            f"fmt extension declares {extra_size} bytes but {header_left - 2} are present",
        )

    if extra_size == 0:
        if code is FormatCode.EXTENSIBLE:
            raise ParsingError(ErrorKind.EMPTY_EXTENSION, "extensible fmt chunk has an empty extension block")
        return header

    if extra_size < _EXTENSION_SIZE:
        if code is FormatCode.EXTENSIBLE:
            raise ParsingError(
                ErrorKind.MALFORMED_EXTENSION,
                f"extensible fmt extension needs {_EXTENSION_SIZE} bytes, got {extra_size}",
            )
        return header

    valid_bits, channel_mask, guid_bytes = _EXTENSION.unpack_from(payload, _BASE_HEADER.size + 2)
    if valid_bits != bits_per_sample:
        raise UnsupportedError(
            ErrorKind.MISMATCHED_VALID_BITS,
            f"valid bits per sample {valid_bits} differs from container bits per sample {bits_per_sample}",
        )

    audio_format = header.audio_format
    if code is FormatCode.EXTENSIBLE:
        audio_format = AudioFormat.extensible(UUID(bytes_le=guid_bytes))

    return FormatHeader(
        audio_format=audio_format,
        channel_count=channel_count,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        block_align=block_align,
        bits_per_sample=bits_per_sample,
        channel_mask=channel_mask,
    )
