"""Online S-curve (jerk-limited) motion profile interpolator.

Each call to :meth:`SCurveInterpolator.interpolate` advances the profile by
one sampling period. The profile is always computed as a positive segment;
negative moves are mirrored on output.
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from enum import Enum
from typing import List, TextIO

__all__ = ["InterpolationStatus", "InterpolationOutput", "SCurveInterpolator"]

_EPSILON = 1e-6


class InterpolationStatus(Enum):
    """State of the interpolator."""

    DONE = 0
    BUSY = 1
    ERROR = 2


@dataclass(frozen=True)
class InterpolationOutput:
    """Interpolated position and its derivatives for the current step."""

    pos: float = 0.0
    vel: float = 0.0
    acc: float = 0.0
    jerk: float = 0.0


@dataclass
class _Target:
    dist: float = 0.0
    vel_start: float = 0.0
    vel_end: float = 0.0
    vel_max: float = 0.0
    pos_offset: float = 0.0
    vel_min: float = 0.0
    acc_start: float = 0.0
    acc_end: float = 0.0
    acc_max: float = 0.0
    acc_min: float = 0.0
    jerk_max: float = 0.0
    jerk_min: float = 0.0
    dir: float = 1.0


def _limited(value: float, limit: float) -> float:
    """Fall back to ``limit`` when ``value`` is too small or above it."""
    if value <= _EPSILON or value > limit:
        return limit
    return value


def _fmin(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return min(a, b)


def _fmax(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return max(a, b)


def _sqrt(value: float) -> float:
    return math.sqrt(value) if value >= 0.0 else math.nan


def _periods(value: float) -> int:
    """Whole number of sampling periods, saturating at zero."""
    if math.isnan(value) or value <= 0.0:
        return 0
    if math.isinf(value):
        return sys.maxsize
    return int(value)


class SCurveInterpolator:
    """Generates a jerk-limited velocity profile step by step."""

    def __init__(
        self,
        vel_limit: float,
        acc_limit: float,
        jerk_limit: float,
        sampling_time: float,
    ) -> None:
        self.vel_limit = vel_limit
        self.acc_limit = acc_limit
        self.jerk_limit = jerk_limit
        self.sampling_time = sampling_time

        self._status = InterpolationStatus.DONE
        self._target = _Target()

        self._pos = 0.0
        self._dist = 0.0
        self._vel = 0.0
        self._acc = 0.0
        self._jerk = 0.0
        self._ta: List[float] = [0.0, 0.0]
        self._tb: List[float] = [0.0, 0.0]
        self._td: List[float] = [0.0, 0.0]
        self._h = 0.0
        self._steps = 0
        self._dec_start_period = 0
        self._dec_right_away = False
        self._pos_end = 0.0

    @property
    def status(self) -> InterpolationStatus:
        """Current interpolation status."""
        return self._status

    @property
    def output(self) -> InterpolationOutput:
        """Interpolated values in the real direction of motion."""
        d = self._target.dir
        return InterpolationOutput(
            pos=self._pos * d,
            vel=self._vel * d,
            acc=self._acc * d,
            jerk=self._jerk * d,
        )

    def set_target(
        self,
        pos_offset: float,
        displacement: float,
        vel_start: float,
        vel_end: float,
        vel_max_magnitude: float,
    ) -> None:
        """Start a new segment of ``displacement`` from the current state.

        A zero displacement (outside of a stop) or a zero maximum velocity is
        ignored.
        """
        t = self.sampling_time

        if (displacement == 0.0 and not self._dec_right_away) or vel_max_magnitude == 0.0:
            return

        vel_max = _limited(abs(vel_max_magnitude), self.vel_limit)
        acc_max = _limited(vel_max / t / 100.0, self.acc_limit)
        jerk_max = _limited(acc_max / t / 10.0, self.jerk_limit)

        target = self._target
        dir_prev = target.dir
        direction = 1.0 if displacement >= 0.0 else -1.0
        target.dir = direction

        if self._dec_right_away:
            displacement = 0.0

        # Keep the new segment's start velocity continuous with the previous
        # one, taking the previous segment's mirroring into account.
        if self._vel != 0.0:
            vel_start = -self._vel if dir_prev < 0.0 else self._vel

        if direction < 0.0:
            self._pos_end = -self._pos_end
            pos_offset = -pos_offset

        target.pos_offset = pos_offset
        target.dist = direction * displacement
        target.vel_start = direction * vel_start
        target.vel_end = direction * vel_end
        target.vel_max = vel_max
        target.vel_min = -vel_max
        target.acc_start = 0.0
        target.acc_end = 0.0
        target.acc_max = acc_max
        target.acc_min = -acc_max
        target.jerk_max = jerk_max
        target.jerk_min = -jerk_max

        self._vel = target.vel_start
        self._acc = target.acc_start

        # An unfinished segment (stopped midway) keeps its travelled distance
        # so the position does not jump.
        if self._status is InterpolationStatus.DONE:
            self._dist = 0.0

        self._status = InterpolationStatus.BUSY
        self._dec_start_period = 0

    def interpolate(self) -> None:
        """Advance the profile by one sampling period."""
        if self._status is InterpolationStatus.DONE:
            return
        self._calculate_dec_distance()
        self._generate_jerk_acc_vel_segment()
        self._generate_jerk_dec_segment()
        self._integrate()

    def stop(self) -> None:
        """Decelerate to standstill right away from the current state."""
        self._dec_right_away = True
        self.set_target(0.0, 0.0, self._vel * self._target.dir, 0.0, self.vel_limit)

    def write_record(self, file: TextIO) -> None:
        """Write one tab-separated line of the current internal state."""
        d = self._target.dir
        values = (
            self._pos * d,
            self._vel * d,
            self._acc * d,
            self._jerk * d,
            self._ta[0],
            self._tb[0],
            self._td[0],
            self._h * d,
        )
        file.write("\t".join(str(v) for v in values) + "\n")

    def _calculate_dec_distance(self) -> None:
        target = self._target
        if self._vel < target.vel_end:
            return

        vel_end = target.vel_end
        acc_end = target.acc_end
        acc_min = target.acc_min
        jerk_max = target.jerk_max
        jerk_min = target.jerk_min
        vel_cur = self._vel
        acc_cur = self._acc

        ta = (acc_min - acc_cur) / jerk_min
        tb = (acc_end - acc_min) / jerk_max
        td = (
            (vel_end - vel_cur) / acc_min
            + ta * (acc_min - acc_cur) / (2.0 * acc_min)
            + tb * (acc_min - acc_end) / (2.0 * acc_min)
        )

        if td < ta + tb:
            term1 = acc_cur * acc_cur * jerk_max - jerk_min * (
                acc_end * acc_end + 2.0 * jerk_max * (vel_cur - vel_end)
            )
            term2 = jerk_max - jerk_min
            root = _sqrt(term2 * term1)
            ta = -acc_cur / jerk_min + root / (-term2 * jerk_min)
            tb = acc_end / jerk_max + root / (term2 * jerk_max)
            td = ta + tb

        td_square = td * td
        hk = (
            0.5 * acc_cur * td_square
            + (1.0 / 6.0)
            * (jerk_min * ta * (3.0 * td_square - 3.0 * td * ta + ta * ta) + jerk_max * tb**3)
            + td * vel_cur
        )

        self._ta[0] = max(ta, 0.0) if not math.isnan(ta) else ta
        self._tb[0] = max(tb, 0.0) if not math.isnan(tb) else tb
        self._td[0] = max(td, 0.0) if not math.isnan(td) else td
        self._h = hk

    def _generate_jerk_acc_vel_segment(self) -> None:
        target = self._target
        if self._h >= target.dist - self._dist or self._dec_right_away:
            return

        t = self.sampling_time
        vel_max = target.vel_max
        acc_max = target.acc_max
        vel_cur = self._vel
        acc_cur = self._acc

        end_vel_cur = vel_cur - acc_cur * acc_cur / (2.0 * target.jerk_min)
        if end_vel_cur < vel_max and acc_cur < acc_max:
            self._jerk = _fmin(target.jerk_max, (acc_max - acc_cur) / t)
        elif end_vel_cur < vel_max and acc_cur >= acc_max:
            self._acc = acc_max
            self._jerk = 0.0
        elif end_vel_cur >= vel_max and acc_cur > 0.0:
            self._jerk = _fmax(target.jerk_min, -acc_cur / t)
        elif end_vel_cur >= vel_max and acc_cur <= 0.0:
            self._acc = 0.0
            self._jerk = 0.0

    def _generate_jerk_dec_segment(self) -> None:
        target = self._target
        if self._h < target.dist - self._dist and not self._dec_right_away:
            return

        if self._dec_start_period == 0:
            self._dec_start_period = self._steps
            self._ta[1] = self._ta[0]
            self._tb[1] = self._tb[0]
            self._td[1] = self._td[0]

        t = self.sampling_time
        first_end = _periods(self._ta[1] / t)
        second_end = _periods((self._td[1] - self._tb[1]) / t)
        third_end = _periods(self._td[1] / t)

        elapsed = self._steps - self._dec_start_period
        if 0 <= elapsed <= first_end:
            self._jerk = _fmax(target.jerk_min, (target.acc_min - self._acc) / t)
        elif first_end <= elapsed <= second_end:
            self._jerk = 0.0
            self._acc = target.acc_min
        elif second_end <= elapsed <= third_end:
            self._jerk = _fmin(target.jerk_max, (target.acc_end - self._acc) / t)
        else:
            self._vel = target.vel_end
            self._acc = 0.0
            self._jerk = 0.0
            self._status = InterpolationStatus.DONE
            self._dec_start_period = 0
            self._dec_right_away = False

    def _integrate(self) -> None:
        t = self.sampling_time
        acc_next = self._acc + t * self._jerk
        vel_next = self._vel + (t / 2.0) * (self._acc + acc_next)
        dist_next = self._dist + (t / 2.0) * (self._vel + vel_next)

        self._acc = acc_next
        self._vel = vel_next
        self._dist = dist_next
        self._pos = self._target.pos_offset + self._pos_end + dist_next
        self._steps += 1

        if self._status is InterpolationStatus.DONE:
            self._pos_end = self._target.dir * self._pos