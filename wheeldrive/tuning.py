"""Shared data types of the tuning tool."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .protocol import ControlMode, MotorProcessData

__all__ = [
    "DEFAULT_CONTROL_MODE",
    "DEFAULT_GRAPH_SIZE",
    "ErrorType",
    "ProfileData",
    "ProfileDataType",
]

DEFAULT_CONTROL_MODE = ControlMode.VELOCITY
DEFAULT_GRAPH_SIZE = 600


class ErrorType(Enum):
    """Kinds of error the tuning tool reports to the user."""

    NONE = "None"
    START_ERROR = "StartError"
    STOP_ERROR = "StopError"
    MODE_SWITCH_TIMEOUT = "ModeSwitchTimeout"
    PARSE_COMMAND_ERROR = "ParseCommandError"
    COMMUNICATION_ERROR = "CommunicationError"


class ProfileDataType(Enum):
    """One plottable quantity of a :class:`ProfileData` sample."""

    INTP_POS = "intp_pos"
    INTP_VEL = "intp_vel"
    INTP_ACC = "intp_acc"
    INTP_JERK = "intp_jerk"
    ACT_POS = "act_pos"
    ACT_VEL = "act_vel"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ProfileData:
    """Interpolated and measured motion values of one sample."""

    intp_pos: float = 0.0
    intp_vel: float = 0.0
    intp_acc: float = 0.0
    intp_jerk: float = 0.0
    act_pos: float = 0.0
    act_vel: float = 0.0

    @classmethod
    def from_motor_data(cls, motor_data: MotorProcessData) -> "ProfileData":
        """Take the plottable values out of a motor process data message."""
        return cls(
            intp_pos=motor_data.intp_pos,
            intp_vel=motor_data.intp_vel,
            intp_acc=motor_data.intp_acc,
            intp_jerk=motor_data.intp_jerk,
            act_pos=motor_data.actual_pos,
            act_vel=motor_data.actual_vel,
        )

    def value(self, data_type: ProfileDataType) -> float:
        """The value of the given quantity."""
        return getattr(self, data_type.value)