import struct

import pytest

from wheeldrive.protocol import (
    BufferFullError,
    ControlMode,
    Halt,
    MotorId,
    MotorProcessData,
    Mpu6050MotionData,
    PositionCommand,
    VelocityCommand,
)
from wheeldrive.wire import (
    DecodeError,
    decode_command_result,
    decode_motor_data,
    decode_mpu6050_data,
    decode_set_motor_command,
    encode_command_result,
    encode_motor_data,
    encode_mpu6050_data,
    encode_set_motor_command,
)


def test_halt_left_bytes():
    assert encode_set_motor_command(MotorId.LEFT, Halt()) == b"\x00\x00"


def test_velocity_command_layout():
    encoded = encode_set_motor_command(MotorId.RIGHT, VelocityCommand(500.0))
    assert encoded[:2] == bytes([1, 1])
    assert encoded[2:] == struct.pack("<f", 500.0)


@pytest.mark.parametrize(
    "motor_id, command",
    [
        (MotorId.LEFT, Halt()),
        (MotorId.RIGHT, VelocityCommand(-250.5)),
        (MotorId.LEFT, PositionCommand(1.5, 500.0, 0.25)),
    ],
)
def test_set_motor_command_round_trip(motor_id, command):
    assert decode_set_motor_command(encode_set_motor_command(motor_id, command)) == (
        motor_id,
        command,
    )


def test_ok_result_bytes():
    assert encode_command_result(None) == b"\x00"
    assert decode_command_result(b"\x00") is None


def test_buffer_full_result_bytes():
    assert encode_command_result(BufferFullError(MotorId.RIGHT)) == b"\x01\x00\x01"


@pytest.mark.parametrize("motor_id", list(MotorId))
def test_buffer_full_result_raises(motor_id):
    with pytest.raises(BufferFullError) as info:
        decode_command_result(encode_command_result(BufferFullError(motor_id)))
    assert info.value.motor_id is motor_id


def test_motor_data_round_trip():
    data = MotorProcessData(ControlMode.STAND_STILL, 1.0, -2.5, 3.25, 0.5, -0.125, 8.0)
    assert decode_motor_data(encode_motor_data(MotorId.RIGHT, data)) == (MotorId.RIGHT, data)


def test_motor_data_length():
    encoded = encode_motor_data(MotorId.LEFT, MotorProcessData())
    assert len(encoded) == 2 + 6 * 4


def test_mpu_round_trip():
    data = Mpu6050MotionData(0.5, -1.0, 1.0, 2.0, -4.0, 0.0)
    assert decode_mpu6050_data(encode_mpu6050_data(data)) == data


def test_unknown_command_variant():
    with pytest.raises(DecodeError):
        decode_set_motor_command(bytes([0, 7]))


def test_unknown_motor_id():
    with pytest.raises(DecodeError):
        decode_set_motor_command(bytes([2, 0]))


def test_truncated_data():
    encoded = encode_set_motor_command(MotorId.LEFT, PositionCommand(1.0, 2.0, 3.0))
    with pytest.raises(DecodeError):
        decode_set_motor_command(encoded[:-1])


def test_trailing_bytes_rejected():
    with pytest.raises(DecodeError):
        decode_mpu6050_data(encode_mpu6050_data(Mpu6050MotionData()) + b"\x00")


def test_empty_result_rejected():
    with pytest.raises(DecodeError):
        decode_command_result(b"")


def test_encoding_non_command_fails():
    with pytest.raises(TypeError):
        encode_set_motor_command(MotorId.LEFT, "halt")