"""Conversions between angular velocity units."""

import math

__all__ = ["rpm_to_rad_s", "rad_s_to_rpm"]


def rpm_to_rad_s(val: float) -> float:
    """Convert revolutions per minute to radians per second."""
    return val * 2.0 * math.pi / 60.0


def rad_s_to_rpm(val: float) -> float:
    """Convert radians per second to revolutions per minute."""
    return val * 60.0 / (2.0 * math.pi)