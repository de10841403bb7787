"""dB gain applied per sample with hard clipping."""

from __future__ import annotations

from typing import TYPE_CHECKING

from wavparser.codec.samples import clip

if TYPE_CHECKING:
    from wavparser.document import WaveDocument


def change_volume(document: WaveDocument, change_db: float) -> WaveDocument:
    gain = db_to_gain(change_db)
    channels = [change_volume_samples(channel, gain) for channel in document.channels]
    return document.with_samples(channels)


def change_volume_samples(samples: list[float], gain: float) -> list[float]:
    return [clip(sample * gain) for sample in samples]


def db_to_gain(db: float) -> float:
    return 10 ** (db / 20.0)
