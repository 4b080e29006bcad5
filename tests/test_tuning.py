from wheeldrive.protocol import ControlMode, MotorProcessData
from wheeldrive.tuning import (
    DEFAULT_CONTROL_MODE,
    DEFAULT_GRAPH_SIZE,
    ErrorType,
    ProfileData,
    ProfileDataType,
)


def test_from_motor_data_maps_fields():
    motor = MotorProcessData(
        control_mode_display=ControlMode.POSITION,
        actual_pos=1.5,
        actual_vel=2.5,
        intp_pos=3.5,
        intp_vel=4.5,
        intp_acc=5.5,
        intp_jerk=6.5,
    )
    data = ProfileData.from_motor_data(motor)
    assert data == ProfileData(
        intp_pos=3.5, intp_vel=4.5, intp_acc=5.5, intp_jerk=6.5, act_pos=1.5, act_vel=2.5
    )


def test_value_by_type():
    data = ProfileData(1.0, 2.0, 3.0, 4.0, 5.0, 6.0)
    values = [data.value(t) for t in ProfileDataType]
    assert values == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]


def test_profile_data_type_display():
    data = ProfileData(1.0, 2.0, 3.0, 4.0, 5.0, 6.0)
    labelled = [(str(t), data.value(t)) for t in ProfileDataType]
    assert labelled == [
        ("intp_pos", 1.0),
        ("intp_vel", 2.0),
        ("intp_acc", 3.0),
        ("intp_jerk", 4.0),
        ("act_pos", 5.0),
        ("act_vel", 6.0),
    ]


def test_defaults():
    assert DEFAULT_CONTROL_MODE is ControlMode.VELOCITY
    assert DEFAULT_GRAPH_SIZE == 600
    assert ProfileData() == ProfileData(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)


def test_error_types_are_distinct():
    assert len(set(ErrorType)) == 6
    assert ErrorType("ModeSwitchTimeout") is ErrorType.MODE_SWITCH_TIMEOUT