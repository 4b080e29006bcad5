"""Command routing, the periodic motion step and connection supervision."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Optional, Tuple

from .motion import Motion
from .protocol import (
    BufferFullError,
    Halt,
    MotorCommand,
    MotorId,
    MotorProcessData,
    PositionCommand,
)

__all__ = [
    "CHANNEL_SIZE",
    "CommandChannel",
    "MotorStatus",
    "CommandHandler",
    "ConnectionMonitor",
    "motion_step",
]

CHANNEL_SIZE = 48

_log = logging.getLogger(__name__)


class CommandChannel:
    """Bounded first-in first-out channel of motor commands."""

    def __init__(self, capacity: int = CHANNEL_SIZE) -> None:
        self.capacity = capacity
        self._items: Deque[MotorCommand] = deque()

    def __len__(self) -> int:
        return len(self._items)

    def try_publish(self, command: MotorCommand) -> bool:
        """Append ``command`` if there is room; return whether it was accepted."""
        if len(self._items) >= self.capacity:
            return False
        self._items.append(command)
        return True

    def try_next(self) -> Optional[MotorCommand]:
        """Take the oldest command, or ``None`` if the channel is empty."""
        return self._items.popleft() if self._items else None


@dataclass(frozen=True)
class MotorStatus:
    """State published by the motion step for one motor."""

    motor_id: MotorId
    is_queue_full: bool
    process_data: MotorProcessData


class CommandHandler:
    """Accepts commands from the host and forwards them to a motor's channel.

    ``left_status`` and ``right_status`` return the latest status of each motor.
    """

    def __init__(
        self,
        left_channel: CommandChannel,
        right_channel: CommandChannel,
        left_status: Callable[[], MotorStatus],
        right_status: Callable[[], MotorStatus],
    ) -> None:
        self._routes = {
            MotorId.LEFT: (left_channel, left_status),
            MotorId.RIGHT: (right_channel, right_status),
        }

    def handle(self, motor_id: MotorId, command: MotorCommand) -> None:
        """Forward ``command``; raise :class:`BufferFullError` if it cannot be queued.

        Position commands are refused while the motor's own queue is full;
        velocity and halt commands only need room in the channel.
        """
        channel, status = self._routes[motor_id]
        if isinstance(command, PositionCommand) and status().is_queue_full:
            raise BufferFullError(motor_id)
        if not channel.try_publish(command):
            raise BufferFullError(motor_id)


class ConnectionMonitor:
    """Halts both motors when publishing to a previously connected host times out."""

    def __init__(self, left_channel: CommandChannel, right_channel: CommandChannel) -> None:
        self._channels = (left_channel, right_channel)
        self.connected = False

    def record(self, timed_out: bool) -> bool:
        """Record the outcome of a publish; return whether the motors were halted."""
        if not timed_out:
            self.connected = True
            return False
        if not self.connected:
            return False
        self.connected = False
        for channel in self._channels:
            channel.try_publish(Halt())
        _log.warning("connection is lost, halt motors")
        return True


def motion_step(left: Motion, right: Motion) -> Tuple[MotorStatus, MotorStatus]:
    """Run one control period for both wheels and return their statuses."""
    left.read_cmd_from_queue()
    right.read_cmd_from_queue()
    left.run()
    right.run()
    return (
        MotorStatus(MotorId.LEFT, left.is_queue_full(), left.process_data()),
        MotorStatus(MotorId.RIGHT, right.is_queue_full(), right.process_data()),
    )