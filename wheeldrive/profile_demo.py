"""Run a sample S-curve profile, record it and plot it."""

from __future__ import annotations

import argparse
from typing import Iterator, List, Optional, Sequence, Tuple

from .s_curve import InterpolationOutput, InterpolationStatus, SCurveInterpolator

__all__ = ["run_profile", "main"]

SAMPLING_TIME = 0.001


def run_profile(
    interpolator: SCurveInterpolator,
) -> Iterator[Tuple[float, InterpolationOutput]]:
    """Step the interpolator until it is done, yielding ``(time, output)`` per step."""
    time = 0.0
    while interpolator.status is not InterpolationStatus.DONE:
        interpolator.interpolate()
        time += interpolator.sampling_time
        yield time, interpolator.output


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Plot a sample S-curve velocity profile.")
    parser.add_argument("--record", default="record.txt", help="file for the per-step record")
    parser.add_argument("--save", metavar="IMAGE", help="save the plot instead of showing it")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Interpolate a sample move, write its record and plot it."""
    args = _parse_args(argv)

    interpolator = SCurveInterpolator(10.0, 10.0, 30.0, SAMPLING_TIME)
    interpolator.set_target(0.0, -10.0, 1.0, 0.0, 5.0)

    times: List[float] = []
    outputs: List[InterpolationOutput] = []
    with open(args.record, "w", encoding="utf-8") as record:
        for time, output in run_profile(interpolator):
            times.append(time)
            outputs.append(output)
            interpolator.write_record(record)

    import matplotlib

    if args.save:
        matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots()
    ax.set_title("S-Curve Velocity Motion Profile")
    ax.set_xlabel("time in seconds")
    ax.set_ylabel("Position derivatives m, m/s, m/s², m/s³")
    for caption, attr in (
        ("Position", "pos"),
        ("Velocity", "vel"),
        ("Acceleration", "acc"),
        ("Jerk", "jerk"),
    ):
        ax.plot(times, [getattr(o, attr) for o in outputs], label=caption)
    ax.legend(loc="upper center")

    if args.save:
        fig.savefig(args.save)
        plt.close(fig)
    else:
        plt.show()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())