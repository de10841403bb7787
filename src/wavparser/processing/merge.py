"""Mixing two documents into one with channel and sample-rate reconciliation."""

from __future__ import annotations

import math
from enum import Enum
from typing import TYPE_CHECKING

from wavparser.codec.samples import clip
from wavparser.errors import ErrorKind, MergeError
from wavparser.processing.resample import change_sample_rate

if TYPE_CHECKING:
    from wavparser.document import WaveDocument


class MergeAlgorithm(str, Enum):
    AVERAGE = "average"
    AVERAGE_X2 = "average_x2"
    SUM = "sum"


def merge(
    first: WaveDocument,
    second: WaveDocument,
    algorithm: MergeAlgorithm = MergeAlgorithm.AVERAGE,
) -> WaveDocument:
    """Mix ``second`` into ``first``; neither input is modified.

    The lower-rate input is upsampled to the higher rate. A mono input is
    broadcast against every channel of the other one.
    """
    algorithm = MergeAlgorithm(algorithm)
    if first.sample_rate < second.sample_rate:
        first = change_sample_rate(first, second.sample_rate)
    elif second.sample_rate < first.sample_rate:
        second = change_sample_rate(second, first.sample_rate)

    pairs = _channel_pairs(first.channel_count, second.channel_count)
    channels = [merge_samples(first.channels[left], second.channels[right], algorithm) for left, right in pairs]
    return first.with_samples(channels)


def merge_samples(
    stream1: list[float],
    stream2: list[float],
    algorithm: MergeAlgorithm = MergeAlgorithm.AVERAGE,
) -> list[float]:
    if algorithm is MergeAlgorithm.AVERAGE:
        return _merge_average(stream1, stream2)
    if algorithm is MergeAlgorithm.AVERAGE_X2:
        return [clip(value * 2.0) for value in _merge_average(stream1, stream2)]
    if algorithm is MergeAlgorithm.SUM:
        return _merge_sum(stream1, stream2)
    raise ValueError(f"unsupported merge algorithm '{algorithm}'")


def _channel_pairs(first_count: int, second_count: int) -> list[tuple[int, int]]:
    if first_count == second_count:
        return [(index, index) for index in range(first_count)]
    if first_count == 1:
        return [(0, index) for index in range(second_count)]
    if second_count == 1:
        return [(index, 0) for index in range(first_count)]
    raise MergeError(
        ErrorKind.INCOMPATIBLE_CHANNEL_COUNTS,
        f"file 1 has {first_count} channels, file 2 has {second_count} channels; can't merge",
    )


def _merge_average(stream1: list[float], stream2: list[float]) -> list[float]:
    merged = [(v1 + v2) * 0.5 for v1, v2 in zip(stream1, stream2)]
    overlap = len(merged)
    tail = stream1[overlap:] if len(stream1) > overlap else stream2[overlap:]
    merged.extend(value * 0.5 for value in tail)
    return merged


def _merge_sum(stream1: list[float], stream2: list[float]) -> list[float]:
    merged: list[float] = []
    for v1, v2 in zip(stream1, stream2):
        value = v1 + v2
        # Saturating sum: pull toward zero by the product magnitude.
        value -= _sign(value) * abs(v1 * v2)
        merged.append(value)
    overlap = len(merged)
    tail = stream1[overlap:] if len(stream1) > overlap else stream2[overlap:]
    merged.extend(tail)
    return merged


def _sign(value: float) -> float:
    if value == 0.0:
        return 0.0
    return math.copysign(1.0, value)
