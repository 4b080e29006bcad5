"""Quadrature encoder bookkeeping."""

from __future__ import annotations

import math
from typing import Callable

__all__ = ["Encoder"]


def _to_i16(value: int) -> int:
    return ((value + 0x8000) & 0xFFFF) - 0x8000


class Encoder:
    """Turns a wrapping 16-bit hardware counter into position and velocity.

    ``counter`` is called once per update and returns the raw counter value.
    """

    def __init__(self, counter: Callable[[], int], counts_per_rev: int = 400) -> None:
        self._counter = counter
        self.counts_per_rev = counts_per_rev
        self.count = 0
        self.velocity_rpm = 0.0
        self.position_rad = 0.0
        self._prev_count = 0
        self._prev_reading = 0

    def update(self, period_s: float) -> None:
        """Read the counter and update velocity (rpm) and position (rad)."""
        reading = _to_i16(self._counter())
        self.count += _to_i16(reading - self._prev_reading)
        self._prev_reading = reading

        revs_per_s = (self.count - self._prev_count) / period_s / self.counts_per_rev
        self.velocity_rpm = 60.0 * revs_per_s
        self.position_rad += 2.0 * math.pi * revs_per_s * period_s
        self._prev_count = self.count