"""Signal generators."""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wavparser.document import WaveDocument


def add_silence(document: WaveDocument, duration: timedelta | float) -> WaveDocument:
    samples_count = document.floor_samples_count(duration)
    if samples_count < 0:
        raise ValueError("silence duration must not be negative")
    silence = [0.0] * samples_count
    return document.with_samples([channel + silence for channel in document.channels])
