"""PID controller for wheel velocity."""

from __future__ import annotations

__all__ = ["Pid"]


class Pid:
    """Velocity PID controller whose output is clamped to ``±output_limit``."""

    def __init__(self, kp: float, ki: float, kd: float, output_limit: float) -> None:
        self.kp = kp
        self.ki = ki
        self.kd = kd
        self.output_limit = output_limit
        self.target_velocity_rpm = 0.0
        self.error = 0.0
        self.prev_error = 0.0
        self.accumulated_error = 0.0

    def set_target_velocity(self, target_velocity_rpm: float) -> None:
        """Set the velocity the controller drives towards."""
        self.target_velocity_rpm = target_velocity_rpm

    def run(self, act_velocity_rpm: float, period_s: float) -> float:
        """Advance one control period and return the clamped control effort."""
        self.prev_error = self.error
        self.error = self.target_velocity_rpm - act_velocity_rpm
        self.accumulated_error += self.error * period_s

        effort = (
            self.kp * self.error
            + self.ki * self.accumulated_error
            + self.kd * (self.error - self.prev_error) / period_s
        )
        return max(-self.output_limit, min(self.output_limit, effort))