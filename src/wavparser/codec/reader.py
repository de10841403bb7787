"""RIFF container walk: validates chunk bounds and dispatches ``fmt ``/``data``."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import BinaryIO

from wavparser.codec.header import FormatHeader, parse_format_chunk
from wavparser.codec.samples import decode_samples
from wavparser.errors import ErrorKind, ParsingError

logger = logging.getLogger(__name__)

_CHUNK_HEADER = struct.Struct("<4sI")


@dataclass(slots=True)
class ParsedWave:
    header: FormatHeader
    channels: list[list[float]]
    start_data_offset: int


def read_wave(source: BinaryIO) -> ParsedWave:
    """Parse a RIFF/WAVE file starting at the current position of ``source``.

    ``source`` must be seekable. It is left open; closing it is the caller's
    responsibility.
    """
    start = source.tell()
    if source.read(4) != b"RIFF":
        raise ParsingError(ErrorKind.NOT_RIFF, "this is not a RIFF file")
    riff_size_raw = source.read(4)
    if len(riff_size_raw) < 4:
        raise ParsingError(ErrorKind.TRUNCATED_CHUNK, "RIFF header is truncated")
    (riff_size,) = struct.unpack("<I", riff_size_raw)
    if source.read(4) != b"WAVE":
        raise ParsingError(ErrorKind.NOT_WAVE, "this is not a WAVE file")

    bound = start + riff_size + 8
    header: FormatHeader | None = None
    channels: list[list[float]] | None = None
    start_data_offset = 0

    last_chunk = False
    while not last_chunk:
        chunk_id, chunk_size = _read_chunk_header(source)
        payload_start = source.tell()
        chunk_end = payload_start + chunk_size
        if chunk_end > bound:
            raise ParsingError(
                ErrorKind.CHUNK_OVERFLOW,
                f"chunk {chunk_id!r} ends at byte {chunk_end}, past the RIFF bound {bound}",
            )
        last_chunk = chunk_end == bound

        if chunk_id == b"fmt ":
            header = parse_format_chunk(_read_exact(source, chunk_size, chunk_id))
            logger.debug(
                "fmt chunk: format=%s channels=%d rate=%d bits=%d block_align=%d",
                header.audio_format.encoding.name,
                header.channel_count,
                header.sample_rate,
                header.bits_per_sample,
                header.block_align,
            )
        elif chunk_id == b"data":
            if header is None:
                raise ParsingError(ErrorKind.DATA_BEFORE_FORMAT, "data chunk found before fmt chunk")
            start_data_offset = payload_start
            channels = _read_data(source, header, chunk_size)
        else:
            logger.debug("skipping chunk %r (%d bytes)", chunk_id, chunk_size)

        source.seek(chunk_end)

    if header is None:
        raise ParsingError(ErrorKind.MISSING_FORMAT, "RIFF file has no fmt chunk")
    if channels is None:
        channels = _read_data_payload(b"", header)

    return ParsedWave(header=header, channels=channels, start_data_offset=start_data_offset)


def _read_chunk_header(source: BinaryIO) -> tuple[bytes, int]:
    raw = source.read(_CHUNK_HEADER.size)
    if len(raw) < _CHUNK_HEADER.size:
        raise ParsingError(ErrorKind.TRUNCATED_CHUNK, "stream ended inside a chunk header")
    chunk_id, chunk_size = _CHUNK_HEADER.unpack(raw)
    return chunk_id, chunk_size


def _read_exact(source: BinaryIO, size: int, chunk_id: bytes) -> bytes:
    raw = source.read(size)
    if len(raw) < size:
        raise ParsingError(ErrorKind.TRUNCATED_CHUNK, f"stream ended inside chunk {chunk_id!r}")
    return raw


def _read_data_payload(raw: bytes, header: FormatHeader) -> list[list[float]]:
    return decode_samples(
        raw,
        header.audio_format.encoding,
        header.bits_per_sample,
        header.channel_count,
        header.block_align,
    )


def _read_data(source: BinaryIO, header: FormatHeader, chunk_size: int) -> list[list[float]]:
    channels = _read_data_payload(source.read(chunk_size), header)

    declared_frames = chunk_size // header.block_align
    present_frames = len(channels[0]) if channels else 0
    if present_frames < declared_frames:
        logger.warning(
            "data chunk declares %d frames but only %d are present; padding with silence",
            declared_frames,
            present_frames,
        )
        for channel in channels:
            channel.extend([0.0] * (declared_frames - present_frames))
    return channels
