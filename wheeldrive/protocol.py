"""Messages exchanged between the host and the drive controller."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

__all__ = [
    "ControlMode",
    "MotorId",
    "PositionCommand",
    "Halt",
    "VelocityCommand",
    "MotorCommand",
    "MotorProcessData",
    "Mpu6050MotionData",
    "BufferFullError",
]


class ControlMode(Enum):
    """Operating mode reported by a motor controller."""

    POSITION = "Position"
    VELOCITY = "Velocity"
    STAND_STILL = "StandStill"

    def __str__(self) -> str:
        return self.value


class MotorId(Enum):
    """Which wheel a message refers to."""

    LEFT = "Left"
    RIGHT = "Right"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PositionCommand:
    """Move by ``displacement`` rad at up to ``vel_max`` rpm, ending at ``vel_end`` rpm."""

    displacement: float = 0.0
    vel_max: float = 0.0
    vel_end: float = 0.0


@dataclass(frozen=True)
class Halt:
    """Stop the motor as soon as possible."""


@dataclass(frozen=True)
class VelocityCommand:
    """Drive the motor at ``velocity`` rpm."""

    velocity: float


MotorCommand = Union[Halt, VelocityCommand, PositionCommand]


@dataclass
class MotorProcessData:
    """Snapshot of one motor's measured and interpolated state."""

    control_mode_display: ControlMode = ControlMode.VELOCITY
    actual_pos: float = 0.0
    actual_vel: float = 0.0
    intp_pos: float = 0.0
    intp_vel: float = 0.0
    intp_acc: float = 0.0
    intp_jerk: float = 0.0


@dataclass
class Mpu6050MotionData:
    """Scaled accelerometer and gyroscope readings."""

    acc_x: float = 0.0
    acc_y: float = 0.0
    acc_z: float = 0.0
    g_x: float = 0.0
    g_y: float = 0.0
    g_z: float = 0.0


class BufferFullError(Exception):
    """The command buffer of a motor has no room for another command."""

    def __init__(self, motor_id: MotorId) -> None:
        super().__init__(f"command buffer of the {motor_id} motor is full")
        self.motor_id = motor_id