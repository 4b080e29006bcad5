import math

import pytest

from wheeldrive.units import rad_s_to_rpm, rpm_to_rad_s


def test_one_revolution_per_second():
    assert rpm_to_rad_s(60.0) == pytest.approx(2.0 * math.pi)


def test_full_turn_per_second_in_rpm():
    assert rad_s_to_rpm(2.0 * math.pi) == pytest.approx(60.0)


def test_zero_stays_zero():
    assert rpm_to_rad_s(0.0) == 0.0
    assert rad_s_to_rpm(0.0) == 0.0


@pytest.mark.parametrize("value", [-4000.0, -1.5, 0.25, 500.0, 4000.0])
def test_round_trip(value):
    assert rad_s_to_rpm(rpm_to_rad_s(value)) == pytest.approx(value)
    assert rpm_to_rad_s(rad_s_to_rpm(value)) == pytest.approx(value)


def test_sign_is_preserved():
    assert rpm_to_rad_s(-100.0) == pytest.approx(-rpm_to_rad_s(100.0))