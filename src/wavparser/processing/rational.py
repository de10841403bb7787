"""Exact rational step computation for sample-rate conversion."""

from __future__ import annotations

import math
from dataclasses import dataclass


def greatest_common_divisor(a: int, b: int) -> int:
    if a <= 0 or b <= 0:
        raise ValueError("gcd operands must be positive")
    return math.gcd(a, b)


def least_common_multiple(a: int, b: int) -> int:
    return a // greatest_common_divisor(a, b) * b


@dataclass(frozen=True, slots=True)
class RateRatio:
    """Input/output strides sharing a common time base.

    Every ``step_out`` input samples correspond to exactly ``step_in`` output
    samples.
    """

    step_out: int
    step_in: int

    @staticmethod
    def between(from_rate: int, to_rate: int) -> RateRatio:
        common = least_common_multiple(from_rate, to_rate)
        return RateRatio(step_out=common // to_rate, step_in=common // from_rate)

    def output_length(self, input_length: int) -> int:
        return -(-input_length * self.step_in // self.step_out)


@dataclass(frozen=True, slots=True)
class StepEntry:
    offset: int
    frac: float


def build_step_table(ratio: RateRatio) -> tuple[StepEntry, ...]:
    entries: list[StepEntry] = []
    for j in range(ratio.step_in):
        offset, remainder = divmod(j * ratio.step_out, ratio.step_in)
        entries.append(StepEntry(offset=offset, frac=remainder / ratio.step_in))
    return tuple(entries)
