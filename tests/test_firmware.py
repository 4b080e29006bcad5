import pytest

from wheeldrive.encoder import Encoder
from wheeldrive.firmware import (
    CHANNEL_SIZE,
    CommandChannel,
    CommandHandler,
    ConnectionMonitor,
    MotorStatus,
    motion_step,
)
from wheeldrive.motion import Motion
from wheeldrive.motor import BldcMotor, OutputPin, PwmChannel
from wheeldrive.pid import Pid
from wheeldrive.protocol import (
    BufferFullError,
    ControlMode,
    Halt,
    MotorId,
    MotorProcessData,
    PositionCommand,
    VelocityCommand,
)
from wheeldrive.s_curve import SCurveInterpolator

PERIOD = 0.005


def status(motor_id, full):
    return lambda: MotorStatus(motor_id, full, MotorProcessData())


def make_handler(left_full=False, right_full=False, capacity=CHANNEL_SIZE):
    left = CommandChannel(capacity)
    right = CommandChannel(capacity)
    handler = CommandHandler(left, right, status(MotorId.LEFT, left_full), status(MotorId.RIGHT, right_full))
    return handler, left, right


def make_motion(channel):
    interpolator = SCurveInterpolator(400.0, 4000.0, 40000.0, PERIOD)
    motor = BldcMotor(Encoder(lambda: 0, 400), PwmChannel(), OutputPin(), OutputPin(), Pid(0.00006, 0.00124, 0.000000728, 1.0), PERIOD)
    return Motion(interpolator, motor, channel)


def test_channel_is_fifo_and_bounded():
    channel = CommandChannel(2)
    assert channel.try_publish(VelocityCommand(1.0)) is True
    assert channel.try_publish(Halt()) is True
    assert channel.try_publish(VelocityCommand(3.0)) is False
    assert channel.try_next() == VelocityCommand(1.0)
    assert channel.try_next() == Halt()
    assert channel.try_next() is None


def test_default_channel_capacity():
    channel = CommandChannel()
    accepted = [channel.try_publish(Halt()) for _ in range(CHANNEL_SIZE + 1)]
    assert accepted.count(True) == CHANNEL_SIZE
    assert accepted[-1] is False


def test_handler_routes_by_motor():
    handler, left, right = make_handler()
    handler.handle(MotorId.RIGHT, VelocityCommand(5.0))
    assert len(left) == 0
    assert right.try_next() == VelocityCommand(5.0)


def test_position_refused_when_motor_queue_full():
    handler, left, _ = make_handler(left_full=True)
    with pytest.raises(BufferFullError) as info:
        handler.handle(MotorId.LEFT, PositionCommand(1.0, 2.0, 0.0))
    assert info.value.motor_id is MotorId.LEFT
    assert len(left) == 0


@pytest.mark.parametrize("command", [VelocityCommand(10.0), Halt()])
def test_velocity_and_halt_bypass_full_motor_queue(command):
    handler, left, _ = make_handler(left_full=True)
    handler.handle(MotorId.LEFT, command)
    assert left.try_next() == command


def test_full_channel_raises_buffer_full():
    handler, _, right = make_handler(capacity=1)
    handler.handle(MotorId.RIGHT, VelocityCommand(1.0))
    with pytest.raises(BufferFullError) as info:
        handler.handle(MotorId.RIGHT, VelocityCommand(2.0))
    assert info.value.motor_id is MotorId.RIGHT
    assert len(right) == 1


def test_timeout_before_connection_does_not_halt():
    left, right = CommandChannel(), CommandChannel()
    monitor = ConnectionMonitor(left, right)
    assert monitor.record(True) is False
    assert len(left) == 0 and len(right) == 0


def test_lost_connection_halts_both_motors_once():
    left, right = CommandChannel(), CommandChannel()
    monitor = ConnectionMonitor(left, right)
    assert monitor.record(False) is False
    assert monitor.connected is True
    assert monitor.record(True) is True
    assert monitor.connected is False
    assert left.try_next() == Halt()
    assert right.try_next() == Halt()
    assert monitor.record(True) is False
    assert len(left) == 0 and len(right) == 0


def test_motion_step_runs_both_wheels():
    left_channel, right_channel = CommandChannel(), CommandChannel()
    left, right = make_motion(left_channel), make_motion(right_channel)
    left_channel.try_publish(VelocityCommand(300.0))
    left_status, right_status = motion_step(left, right)
    assert left_status.motor_id is MotorId.LEFT
    assert right_status.motor_id is MotorId.RIGHT
    assert left.motor.target_velocity_rpm == 300.0
    assert right.motor.target_velocity_rpm == 0.0
    assert left_status.is_queue_full is False
    assert left_status.process_data.control_mode_display is ControlMode.VELOCITY


def test_motion_step_halt_leads_to_stand_still():
    left_channel, right_channel = CommandChannel(), CommandChannel()
    left, right = make_motion(left_channel), make_motion(right_channel)
    right_channel.try_publish(Halt())
    statuses = [motion_step(left, right) for _ in range(3)]
    assert statuses[-1][1].process_data.control_mode_display is ControlMode.STAND_STILL
    assert statuses[-1][0].process_data.control_mode_display is ControlMode.VELOCITY