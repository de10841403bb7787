"""RIFF/WAVE serialization: ``fmt ``, ``LIST``/``INFO`` and ``data`` chunks."""

from __future__ import annotations

import struct

from wavparser.codec.header import FormatCode
from wavparser.codec.samples import encode_samples
from wavparser.config import WriterConfig


def build_wave_bytes(
    channels: list[list[float]],
    sample_rate: int,
    bits_per_sample: int,
    config: WriterConfig | None = None,
) -> bytes:
    settings = config or WriterConfig()
    channel_count = len(channels)
    block_align = channel_count * bits_per_sample // 8

    fmt_chunk = _chunk(
        b"fmt ",
        struct.pack(
            "<HHIIHH",
            FormatCode.PCM,
            channel_count,
            sample_rate,
            sample_rate * block_align,
            block_align,
            bits_per_sample,
        ),
    )
    info_chunk = _chunk(b"LIST", b"INFO" + _chunk(b"ISFT", _zstring(settings.software_tag)))
    data_chunk = _chunk(b"data", encode_samples(channels, bits_per_sample))

    body = fmt_chunk + info_chunk + data_chunk
    return b"RIFF" + struct.pack("<I", len(body) + 4) + b"WAVE" + body


def _chunk(chunk_id: bytes, payload: bytes) -> bytes:
    return chunk_id + struct.pack("<I", len(payload)) + payload


def _zstring(text: str) -> bytes:
    encoded = text.encode("ascii") + b"\x00"
    if len(encoded) % 2:
        encoded += b"\x00"
    return encoded
