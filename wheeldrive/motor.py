"""Brushless DC motor driven by PWM with a closed velocity loop."""

from __future__ import annotations

import math
import time
from typing import List

from .encoder import Encoder
from .pid import Pid

__all__ = ["OutputPin", "PwmChannel", "BldcMotor"]

_BRAKE_PULSE_S = 2e-6
_DUTY_MAX = 255


class OutputPin:
    """A digital output line that remembers every level it was driven to."""

    def __init__(self, high: bool = True) -> None:
        self.is_high = high
        self.history: List[bool] = [high]

    def set_high(self) -> None:
        """Drive the line high."""
        self._drive(True)

    def set_low(self) -> None:
        """Drive the line low."""
        self._drive(False)

    def _drive(self, level: bool) -> None:
        self.is_high = level
        self.history.append(level)


class PwmChannel:
    """One PWM output channel."""

    def __init__(self) -> None:
        self.active_low = False
        self.enabled = False
        self.duty_percent = 0


class BldcMotor:
    """Motor whose speed is set by PWM duty, with direction and brake lines.

    The PWM output is active low: 0 % duty is full speed.
    """

    def __init__(
        self,
        encoder: Encoder,
        pwm: PwmChannel,
        dir_pin: OutputPin,
        brake_pin: OutputPin,
        pid: Pid,
        period_s: float,
    ) -> None:
        pwm.active_low = True
        pwm.enabled = True
        self.encoder = encoder
        self.pid = pid
        self.pwm = pwm
        self.dir_pin = dir_pin
        self.brake_pin = brake_pin
        self.period_s = period_s
        self.brake_applied = False
        self.target_velocity_rpm = 0.0

    def set_target_velocity(self, target_velocity_rpm: float) -> None:
        """Set the velocity, in rpm, that the control loop tracks."""
        self.target_velocity_rpm = target_velocity_rpm
        self.pid.set_target_velocity(target_velocity_rpm)

    def brake_on(self) -> None:
        """Pulse the brake and direction lines low to engage the brake."""
        self.brake_pin.set_low()
        self.dir_pin.set_low()
        time.sleep(_BRAKE_PULSE_S)
        self.brake_pin.set_high()
        self.dir_pin.set_high()

    def run_pid_velocity_control(self) -> None:
        """Measure the speed, run the PID loop and update the outputs."""
        self.encoder.update(self.period_s)
        effort = self.pid.run(self.encoder.velocity_rpm, self.period_s)
        direction = 1.0 if effort >= 0.0 else -1.0

        duty = _saturated_duty(effort * direction * 100.0)
        if direction < 0.0:
            self.dir_pin.set_high()
        else:
            self.dir_pin.set_low()

        if self.target_velocity_rpm == 0.0:
            if not self.brake_applied:
                self.brake_applied = True
                self.brake_on()
            duty = 0
        else:
            self.brake_pin.set_high()
            self.brake_applied = False

        self.pwm.duty_percent = duty


def _saturated_duty(value: float) -> int:
    if math.isnan(value) or value <= 0.0:
        return 0
    if value >= _DUTY_MAX:
        return _DUTY_MAX
    return int(value)