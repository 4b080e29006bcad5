"""S-curve motion profiles, PID velocity control, a simulated two-wheel BLDC drive and its binary command protocol."""

__version__ = "0.1.0"