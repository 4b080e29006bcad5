"""Per-wheel motion controller: command queue, halting and interpolation."""

from __future__ import annotations

from collections import deque
from enum import Enum, auto
from typing import Deque, Optional, Protocol

from .motor import BldcMotor
from .protocol import (
    ControlMode,
    Halt,
    MotorCommand,
    MotorProcessData,
    PositionCommand,
    VelocityCommand,
)
from .s_curve import InterpolationStatus, SCurveInterpolator
from .units import rad_s_to_rpm, rpm_to_rad_s

__all__ = ["MOTION_CMD_QUEUE_SIZE", "Motion"]

# Smaller than the incoming channel so a Halt always finds room there.
MOTION_CMD_QUEUE_SIZE = 32

_VELOCITY_READY_ERROR_RPM = 60.0


class _CommandSource(Protocol):
    def try_next(self) -> Optional[MotorCommand]: ...


class _HaltState(Enum):
    IDLE = auto()
    IGNITE = auto()
    RUNNING = auto()
    FINISHED = auto()


class Motion:
    """Runs one motor from queued commands, once per control period."""

    def __init__(
        self,
        interpolator: SCurveInterpolator,
        motor: BldcMotor,
        commands: _CommandSource,
    ) -> None:
        self.interpolator = interpolator
        self.motor = motor
        self.control_mode = ControlMode.VELOCITY
        self._commands = commands
        self._queue: Deque[MotorCommand] = deque()
        self._halt_state = _HaltState.IDLE

    def __len__(self) -> int:
        return len(self._queue)

    def read_cmd_from_queue(self) -> None:
        """Move at most one command from the source into the local queue."""
        if self.is_queue_full():
            return
        command = self._commands.try_next()
        if command is None:
            return
        if isinstance(command, Halt):
            self._queue.clear()
        self._queue.append(command)

    def is_queue_full(self) -> bool:
        """Whether the local command queue has no room left."""
        return len(self._queue) >= MOTION_CMD_QUEUE_SIZE

    def process_data(self) -> MotorProcessData:
        """Current measured and interpolated state of the motor."""
        out = self.interpolator.output
        return MotorProcessData(
            control_mode_display=self.control_mode,
            actual_pos=self.motor.encoder.position_rad,
            actual_vel=self.motor.encoder.velocity_rpm,
            intp_pos=out.pos,
            intp_vel=out.vel,
            intp_acc=out.acc,
            intp_jerk=out.jerk,
        )

    def run(self) -> None:
        """Apply the next command if possible and run one control period."""
        if self._queue:
            command = self._queue[0]
            ready = isinstance(command, PositionCommand) and self._ready() or not isinstance(
                command, PositionCommand
            )
            if ready and self._halt_state is _HaltState.IDLE:
                self._apply(command)
                self._queue.popleft()

        self._process_halt()

        if (
            self.control_mode is ControlMode.POSITION
            and self.interpolator.status is not InterpolationStatus.DONE
        ):
            self.interpolator.interpolate()
            self.motor.set_target_velocity(rad_s_to_rpm(self.interpolator.output.vel))

        self.motor.run_pid_velocity_control()

    def _apply(self, command: MotorCommand) -> None:
        if isinstance(command, Halt):
            self._halt_state = _HaltState.IGNITE
            if self.control_mode is ControlMode.POSITION:
                self.interpolator.stop()
            elif self.control_mode is ControlMode.VELOCITY:
                self.motor.set_target_velocity(0.0)
        elif isinstance(command, PositionCommand):
            self.control_mode = ControlMode.POSITION
            self._set_pos_command(command)
        elif isinstance(command, VelocityCommand):
            self.control_mode = ControlMode.VELOCITY
            self.motor.set_target_velocity(command.velocity)

    def _process_halt(self) -> None:
        if self._halt_state is _HaltState.IGNITE:
            self._halt_state = _HaltState.RUNNING
        elif self._halt_state is _HaltState.RUNNING:
            if self._ready():
                self._halt_state = _HaltState.FINISHED
        elif self._halt_state is _HaltState.FINISHED:
            self._halt_state = _HaltState.IDLE
            self.control_mode = ControlMode.STAND_STILL

    def _set_pos_command(self, command: PositionCommand) -> None:
        encoder = self.motor.encoder
        pos_offset = encoder.position_rad - self.interpolator.output.pos
        self.interpolator.set_target(
            pos_offset,
            command.displacement,
            rpm_to_rad_s(encoder.velocity_rpm),
            rpm_to_rad_s(command.vel_end),
            rpm_to_rad_s(command.vel_max),
        )

    def _ready(self) -> bool:
        if self.control_mode is ControlMode.POSITION:
            return self.interpolator.status is InterpolationStatus.DONE
        if self.control_mode is ControlMode.VELOCITY:
            return abs(self.motor.pid.error) <= _VELOCITY_READY_ERROR_RPM
        return True