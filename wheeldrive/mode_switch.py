"""State machine that switches the drive between control modes.

A switch first brings the motor to standstill and then requests the
target mode, waiting each time for the motor to report the new mode.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from .protocol import ControlMode, MotorProcessData
from .tuning import DEFAULT_CONTROL_MODE, ErrorType

__all__ = ["ModeSwitchError", "ModeSwitch"]

_log = logging.getLogger(__name__)


class ModeSwitchError(Exception):
    """A mode switch failed; it stays failed until :meth:`ModeSwitch.reset`."""

    def __init__(self, error_type: ErrorType) -> None:
        super().__init__(f"mode switch failed: {error_type.value}")
        self.error_type = error_type


class _State(Enum):
    IDLE = auto()
    START = auto()
    WAIT = auto()
    DONE = auto()
    ERROR = auto()


@dataclass
class _Step:
    mode: ControlMode
    state: _State = _State.IDLE
    started: float = 0.0


class ModeSwitch:
    """Drives a switch to a target control mode, with a per-step timeout."""

    def __init__(self, timeout_s: float = 6.0) -> None:
        self.timeout_s = timeout_s
        self.prev_mode = DEFAULT_CONTROL_MODE
        self._steps: List[_Step] = []
        self._ignited = False
        self._output: Optional[ControlMode] = DEFAULT_CONTROL_MODE

    def is_finished(self) -> bool:
        """Whether no switch is in progress."""
        return not self._steps

    def reset(self) -> None:
        """Abandon any switch; the output mode becomes standstill."""
        self._steps.clear()
        self._ignited = False
        self._output = ControlMode.STAND_STILL

    def ignite(self, target_mode: ControlMode) -> None:
        """Start switching to ``target_mode`` unless a switch is running or not needed."""
        if self._ignited:
            return
        if self._output is target_mode:
            return
        self._ignited = True
        self._steps = [_Step(target_mode), _Step(ControlMode.STAND_STILL)]

    def process(self, motor_data: MotorProcessData) -> ControlMode:
        """Advance the switch by one step and return the mode to command.

        Raises :class:`ModeSwitchError` once a step has timed out.
        """
        if self._steps:
            step = self._steps[-1]
            reported = motor_data.control_mode_display
            _log.debug("process, %s, %s, %s", step.mode, reported, step.state.name)

            if step.state is _State.IDLE:
                step.state = _State.DONE if step.mode is reported else _State.START
            elif step.state is _State.START:
                if self._output is not None:
                    self.prev_mode = self._output
                self._output = step.mode
                step.state = _State.WAIT
                step.started = time.monotonic()
            elif step.state is _State.WAIT:
                if time.monotonic() - step.started >= self.timeout_s:
                    self._output = None
                    step.state = _State.ERROR
                elif step.mode is reported:
                    step.state = _State.DONE
            elif step.state is _State.DONE:
                self._steps.pop()
                self.prev_mode = reported
                if not self._steps:
                    self._ignited = False

        if self._output is None:
            raise ModeSwitchError(ErrorType.MODE_SWITCH_TIMEOUT)
        return self._output