"""Wave document: decoded sample matrix plus format metadata."""

from __future__ import annotations

import io
import math
from dataclasses import dataclass, field
from datetime import timedelta
from fractions import Fraction
from pathlib import Path
from typing import BinaryIO

from wavparser.codec.header import PCM, AudioFormat
from wavparser.codec.reader import ParsedWave, read_wave
from wavparser.codec.samples import SUPPORTED_BITS_PER_SAMPLE, normalize_int
from wavparser.codec.writer import build_wave_bytes
from wavparser.config import ReaderConfig, WriterConfig
from wavparser.flac import load_flac
from wavparser.processing.generate import add_silence
from wavparser.processing.merge import MergeAlgorithm, merge
from wavparser.processing.resample import change_sample_rate
from wavparser.processing.volume import change_volume

_MICROSECONDS_PER_SECOND = 1_000_000


@dataclass(slots=True)
class WaveDocument:
    channels: list[list[float]] = field(default_factory=lambda: [[], []], repr=False)
    sample_rate: int = 44_100
    bits_per_sample: int = 16
    audio_format: AudioFormat = PCM
    block_align: int = 4
    start_data_offset: int = 0

    def __post_init__(self) -> None:
        if not self.channels:
            raise ValueError("a wave document needs at least one channel")
        if self.sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        if self.bits_per_sample not in SUPPORTED_BITS_PER_SAMPLE:
            raise ValueError(f"unsupported bits_per_sample: {self.bits_per_sample}")
        length = len(self.channels[0])
        if any(len(channel) != length for channel in self.channels):
            raise ValueError("all channels must hold the same number of samples")

    # Loading

    @staticmethod
    def from_bytes(data: bytes, config: ReaderConfig | None = None) -> WaveDocument:
        return WaveDocument.from_stream(io.BytesIO(data), config)

    @staticmethod
    def from_stream(stream: BinaryIO, config: ReaderConfig | None = None) -> WaveDocument:
        document = WaveDocument._from_parsed(read_wave(stream))
        return document._conform(config)

    @staticmethod
    def from_path(path: str | Path, config: ReaderConfig | None = None) -> WaveDocument:
        file_path = Path(path)
        settings = config or ReaderConfig()
        if file_path.suffix.lower() == ".flac":
            return WaveDocument._from_flac(file_path)._conform(settings)
        if settings.read_entire:
            return WaveDocument.from_bytes(file_path.read_bytes(), settings)
        with file_path.open("rb") as stream:
            return WaveDocument.from_stream(stream, settings)

    @staticmethod
    def _from_parsed(parsed: ParsedWave) -> WaveDocument:
        header = parsed.header
        return WaveDocument(
            channels=parsed.channels,
            sample_rate=header.sample_rate,
            bits_per_sample=header.bits_per_sample,
            audio_format=header.audio_format,
            block_align=header.block_align,
            start_data_offset=parsed.start_data_offset,
        )

    @staticmethod
    def _from_flac(path: Path) -> WaveDocument:
        stream = load_flac(path)
        bits = stream.bits_per_sample
        return WaveDocument(
            channels=[[normalize_int(value, bits) for value in channel] for channel in stream.samples],
            sample_rate=stream.sample_rate,
            bits_per_sample=bits,
            block_align=stream.channel_count * bits // 8,
        )

    def _conform(self, config: ReaderConfig | None) -> WaveDocument:
        if config is None or config.target_sample_rate is None:
            return self
        return self.change_sample_rate(config.target_sample_rate)

    # Saving

    def to_bytes(self, config: WriterConfig | None = None) -> bytes:
        return build_wave_bytes(self.channels, self.sample_rate, self.bits_per_sample, config)

    def save(self, path: str | Path, config: WriterConfig | None = None) -> Path:
        target = Path(path)
        target.write_bytes(self.to_bytes(config))
        return target

    # Derived properties

    @property
    def channel_count(self) -> int:
        return len(self.channels)

    @property
    def samples_count(self) -> int:
        return len(self.channels[0])

    @property
    def duration(self) -> timedelta:
        return self.span_for_samples(self.samples_count)

    def span_for_samples(self, samples_count: int) -> timedelta:
        microseconds = round(Fraction(samples_count * _MICROSECONDS_PER_SECOND, self.sample_rate))
        return timedelta(microseconds=microseconds)

    def floor_samples_count(self, span: timedelta | float) -> int:
        if isinstance(span, timedelta):
            microseconds = span // timedelta(microseconds=1)
            return microseconds * self.sample_rate // _MICROSECONDS_PER_SECOND
        return math.floor(span * self.sample_rate)

    # Copies

    def clone(self) -> WaveDocument:
        return self.with_samples([list(channel) for channel in self.channels])

    def with_samples(self, channels: list[list[float]], sample_rate: int | None = None) -> WaveDocument:
        """Copy the metadata around a new sample matrix.

        ``channels`` is taken as is; callers pass freshly built lists.
        """
        block_align = self.block_align
        if len(channels) != self.channel_count:
            block_align = len(channels) * self.bits_per_sample // 8
        return WaveDocument(
            channels=channels,
            sample_rate=sample_rate or self.sample_rate,
            bits_per_sample=self.bits_per_sample,
            audio_format=self.audio_format,
            block_align=block_align,
            start_data_offset=self.start_data_offset,
        )

    # Processing

    def change_volume(self, change_db: float) -> WaveDocument:
        return change_volume(self, change_db)

    def change_sample_rate(self, new_sample_rate: int) -> WaveDocument:
        return change_sample_rate(self, new_sample_rate)

    def merge(self, other: WaveDocument, algorithm: MergeAlgorithm = MergeAlgorithm.AVERAGE) -> WaveDocument:
        return merge(self, other, algorithm)

    def add_silence(self, duration: timedelta | float) -> WaveDocument:
        return add_silence(self, duration)

    def __str__(self) -> str:
        text = f"{self.sample_rate}Hz {self.channel_count} channels, {self.bits_per_sample} bits"
        if self.samples_count > 0:
            text += f", duration: {self.duration}"
        return text
