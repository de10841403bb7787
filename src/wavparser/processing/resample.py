"""Rational sample-rate conversion with linear interpolation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wavparser.processing.rational import RateRatio, StepEntry, build_step_table

if TYPE_CHECKING:
    from wavparser.document import WaveDocument

logger = logging.getLogger(__name__)


def change_sample_rate(document: WaveDocument, new_sample_rate: int) -> WaveDocument:
    if new_sample_rate <= 0:
        raise ValueError(f"sample rate must be positive, got {new_sample_rate}")
    if new_sample_rate == document.sample_rate:
        return document.clone()

    ratio = RateRatio.between(document.sample_rate, new_sample_rate)
    table = build_step_table(ratio)
    logger.debug(
        "resampling %d Hz -> %d Hz (step_out=%d, step_in=%d)",
        document.sample_rate,
        new_sample_rate,
        ratio.step_out,
        ratio.step_in,
    )
    channels = [resample_channel(channel, ratio, table) for channel in document.channels]
    return document.with_samples(channels, sample_rate=new_sample_rate)


def resample_channel(
    samples: list[float],
    ratio: RateRatio,
    table: tuple[StepEntry, ...] | None = None,
) -> list[float]:
    """Resample one channel.

    Every ``step_out`` input samples yield ``step_in`` output samples; the
    result is cut to ``ceil(len(samples) * step_in / step_out)``.
    """
    if not samples:
        return []
    if table is None:
        table = build_step_table(ratio)

    step_out = ratio.step_out
    fill_value = samples[-1]
    padding = -len(samples) % step_out
    # One extra guard sample so the last stride can look one step ahead.
    padded = samples + [fill_value] * (padding + 1)

    out: list[float] = []
    for start in range(0, len(padded) - 1, step_out):
        out.append(padded[start])
        for entry in table[1:]:
            index = start + entry.offset
            v1 = padded[index]
            v2 = padded[index + 1]
            if v1 == v2:
                out.append(v1)
                continue
            out.append((1.0 - entry.frac) * v1 + entry.frac * v2)

    del out[ratio.output_length(len(samples)) :]
    return out
