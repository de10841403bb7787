"""FLAC decoding through libsndfile (python-soundfile)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from wavparser.errors import DecodeError, ErrorKind, ParsingError

SUPPORTED_FLAC_BITS = (16, 24)

_SUBTYPE_BITS = {
    "PCM_S8": 8,
    "PCM_16": 16,
    "PCM_24": 24,
    "PCM_32": 32,
}


@dataclass(slots=True)
class FlacStream:
    sample_rate: int
    channel_count: int
    bits_per_sample: int
    samples: list[list[int]]


def is_flac_available() -> bool:
    """Whether libsndfile can be loaded; WAVE parsing works without it."""
    try:
        import soundfile  # noqa: F401
    except (ImportError, OSError):
        return False
    return True


def load_flac(path: str | Path) -> FlacStream:
    """Decode a FLAC file into signed integers at its declared bit depth."""
    import soundfile as sf

    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(str(file_path))

    try:
        info = sf.info(str(file_path))
    except RuntimeError as exc:
        raise DecodeError(ErrorKind.DECODE_FAILED, f"FLAC open failed: {exc}") from exc

    bits_per_sample = _SUBTYPE_BITS.get(info.subtype)
    if bits_per_sample not in SUPPORTED_FLAC_BITS:
        raise ParsingError(
            ErrorKind.UNSUPPORTED_BITS_PER_SAMPLE,
            f"FLAC subtype {info.subtype} is not supported, only 16/24-bit streams are",
        )

    try:
        data, sample_rate = sf.read(str(file_path), dtype="int32", always_2d=True)
    except RuntimeError as exc:
        raise DecodeError(ErrorKind.DECODE_FAILED, f"FLAC decode failed: {exc}") from exc

    # libsndfile left-justifies every depth into the int32 range.
    shifted = data >> (32 - bits_per_sample)
    return FlacStream(
        sample_rate=int(sample_rate),
        channel_count=int(info.channels),
        bits_per_sample=bits_per_sample,
        samples=shifted.T.tolist(),
    )
