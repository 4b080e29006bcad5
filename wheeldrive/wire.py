"""Compact binary encoding of the protocol messages.

Enum variants are written as varint indices, floats as little-endian
32-bit values, and tuples as their fields one after another.
"""

from __future__ import annotations

import struct
from typing import Callable, Optional, Sequence, Tuple, TypeVar

from .protocol import (
    BufferFullError,
    ControlMode,
    Halt,
    MotorCommand,
    MotorId,
    MotorProcessData,
    Mpu6050MotionData,
    PositionCommand,
    VelocityCommand,
)

__all__ = [
    "DecodeError",
    "encode_set_motor_command",
    "decode_set_motor_command",
    "encode_command_result",
    "decode_command_result",
    "encode_motor_data",
    "decode_motor_data",
    "encode_mpu6050_data",
    "decode_mpu6050_data",
]

_F32 = struct.Struct("<f")
_MOTOR_IDS: Tuple[MotorId, ...] = tuple(MotorId)
_CONTROL_MODES: Tuple[ControlMode, ...] = tuple(ControlMode)
_U32_MAX = 0xFFFFFFFF

T = TypeVar("T")


class DecodeError(ValueError):
    """The bytes do not hold a valid message."""


def _varint(value: int) -> bytes:
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _f32(*values: float) -> bytes:
    return b"".join(_F32.pack(v) for v in values)


def _variant(choices: Sequence[object], item: object) -> bytes:
    return _varint(choices.index(item))


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def _byte(self) -> int:
        if self._pos >= len(self._data):
            raise DecodeError("unexpected end of data")
        byte = self._data[self._pos]
        self._pos += 1
        return byte

    def varint(self) -> int:
        result = 0
        for shift in range(0, 35, 7):
            byte = self._byte()
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                if result > _U32_MAX:
                    raise DecodeError("varint out of range")
                return result
        raise DecodeError("varint too long")

    def f32(self) -> float:
        end = self._pos + _F32.size
        if end > len(self._data):
            raise DecodeError("unexpected end of data")
        (value,) = _F32.unpack_from(self._data, self._pos)
        self._pos = end
        return value

    def choice(self, choices: Sequence[T], what: str) -> T:
        index = self.varint()
        if index >= len(choices):
            raise DecodeError(f"unknown {what} variant {index}")
        return choices[index]

    def finish(self) -> None:
        if self._pos != len(self._data):
            raise DecodeError(f"{len(self._data) - self._pos} trailing bytes")


def _decode(data: bytes, read: Callable[[_Reader], T]) -> T:
    reader = _Reader(data)
    value = read(reader)
    reader.finish()
    return value


def _encode_command(command: MotorCommand) -> bytes:
    if isinstance(command, Halt):
        return _varint(0)
    if isinstance(command, VelocityCommand):
        return _varint(1) + _f32(command.velocity)
    if isinstance(command, PositionCommand):
        return _varint(2) + _f32(command.displacement, command.vel_max, command.vel_end)
    raise TypeError(f"not a motor command: {command!r}")


def _read_command(reader: _Reader) -> MotorCommand:
    tag = reader.varint()
    if tag == 0:
        return Halt()
    if tag == 1:
        return VelocityCommand(reader.f32())
    if tag == 2:
        return PositionCommand(reader.f32(), reader.f32(), reader.f32())
    raise DecodeError(f"unknown motor command variant {tag}")


def encode_set_motor_command(motor_id: MotorId, command: MotorCommand) -> bytes:
    """Encode a set-motor-command request."""
    return _variant(_MOTOR_IDS, motor_id) + _encode_command(command)


def decode_set_motor_command(data: bytes) -> Tuple[MotorId, MotorCommand]:
    """Decode a set-motor-command request into ``(motor_id, command)``."""

    def read(reader: _Reader) -> Tuple[MotorId, MotorCommand]:
        motor_id = reader.choice(_MOTOR_IDS, "motor id")
        return motor_id, _read_command(reader)

    return _decode(data, read)


def encode_command_result(error: Optional[BufferFullError]) -> bytes:
    """Encode the reply to a command: success for ``None``, otherwise the error."""
    if error is None:
        return _varint(0)
    return _varint(1) + _varint(0) + _variant(_MOTOR_IDS, error.motor_id)


def decode_command_result(data: bytes) -> None:
    """Decode a command reply, raising :class:`BufferFullError` if it reports one."""

    def read(reader: _Reader) -> Optional[BufferFullError]:
        tag = reader.varint()
        if tag == 0:
            return None
        if tag != 1:
            raise DecodeError(f"unknown result variant {tag}")
        kind = reader.varint()
        if kind != 0:
            raise DecodeError(f"unknown command error variant {kind}")
        return BufferFullError(reader.choice(_MOTOR_IDS, "motor id"))

    error = _decode(data, read)
    if error is not None:
        raise error


def encode_motor_data(motor_id: MotorId, data: MotorProcessData) -> bytes:
    """Encode a motor process data topic message."""
    return (
        _variant(_MOTOR_IDS, motor_id)
        + _variant(_CONTROL_MODES, data.control_mode_display)
        + _f32(
            data.actual_pos,
            data.actual_vel,
            data.intp_pos,
            data.intp_vel,
            data.intp_acc,
            data.intp_jerk,
        )
    )


def decode_motor_data(data: bytes) -> Tuple[MotorId, MotorProcessData]:
    """Decode a motor process data topic message into ``(motor_id, data)``."""

    def read(reader: _Reader) -> Tuple[MotorId, MotorProcessData]:
        motor_id = reader.choice(_MOTOR_IDS, "motor id")
        mode = reader.choice(_CONTROL_MODES, "control mode")
        values = [reader.f32() for _ in range(6)]
        return motor_id, MotorProcessData(mode, *values)

    return _decode(data, read)


def encode_mpu6050_data(data: Mpu6050MotionData) -> bytes:
    """Encode an inertial sensor topic message."""
    return _f32(data.acc_x, data.acc_y, data.acc_z, data.g_x, data.g_y, data.g_z)


def decode_mpu6050_data(data: bytes) -> Mpu6050MotionData:
    """Decode an inertial sensor topic message."""
    return _decode(data, lambda reader: Mpu6050MotionData(*(reader.f32() for _ in range(6))))