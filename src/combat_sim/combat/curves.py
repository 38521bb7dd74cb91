"""Curve Evaluator.

Evaluates the keyed curves carried by item data: damage and penetration
power over distance for ammunition, and the penetration chance,
penetration damage and anti-penetration durability curves for armor.

Every segment takes its interpolation mode from its left point:
- linear: straight line between the two values
- cubic: Hermite spline using the left point's leave tangent and the
  right point's arrive tangent, both scaled by the segment length

Inputs outside the keyed range clamp to the nearest boundary value.

The same evaluator backs chart sampling (``sample_curve``) and the Bezier
control points used to draw a curve (``bezier_segments``), so a plotted
curve always matches the numbers used in the simulation.
"""

from bisect import bisect_right
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from ..data.models.item import CurvePoint, InterpMode, validate_curve


@dataclass(frozen=True)
class BezierSegment:
    """Cubic Bezier control points for one curve segment, in curve space."""

    start: tuple[float, float]
    control1: tuple[float, float]
    control2: tuple[float, float]
    end: tuple[float, float]
    is_linear: bool = False


def curve_from_pairs(
    pairs: Iterable[tuple[float, float]],
    interp_mode: InterpMode = InterpMode.LINEAR,
) -> tuple[CurvePoint, ...]:
    """Build a curve from (time, value) pairs with zero tangents."""
    points = tuple(
        CurvePoint(time=time, value=value, interp_mode=interp_mode)
        for time, value in pairs
    )
    validate_curve(points)
    return points


def evaluate(curve: Sequence[CurvePoint], x: float) -> float:
    """
    Evaluate a curve at an arbitrary input.

    Args:
        curve: Keyed points ordered by strictly increasing time.
        x: Input value (distance, durability fraction, penetration ratio...).

    Returns:
        Interpolated value, clamped to the boundary values outside the
        keyed range.

    Raises:
        MalformedCurveError: If the curve is empty or unordered.
    """
    validate_curve(curve)

    first, last = curve[0], curve[-1]
    if x <= first.time:
        return first.value
    if x >= last.time:
        return last.value

    times = [point.time for point in curve]
    index = bisect_right(times, x) - 1
    return _segment_value(curve[index], curve[index + 1], x)


def _segment_value(p0: CurvePoint, p1: CurvePoint, x: float) -> float:
    span = p1.time - p0.time
    s = (x - p0.time) / span

    if p0.interp_mode == InterpMode.LINEAR:
        return p0.value + s * (p1.value - p0.value)

    s2 = s * s
    s3 = s2 * s
    h00 = 2 * s3 - 3 * s2 + 1
    h10 = s3 - 2 * s2 + s
    h01 = -2 * s3 + 3 * s2
    h11 = s3 - s2
    return (
        h00 * p0.value
        + h10 * span * p0.leave_tangent
        + h01 * p1.value
        + h11 * span * p1.arrive_tangent
    )


def sample_curve(curve: Sequence[CurvePoint], xs: Sequence[float] | np.ndarray) -> np.ndarray:
    """
    Evaluate a curve at many inputs at once.

    Args:
        curve: Keyed points ordered by strictly increasing time.
        xs: Input values.

    Returns:
        Array of curve values with the same shape as ``xs``.
    """
    validate_curve(curve)
    xs = np.asarray(xs, dtype=float)

    values = np.array([point.value for point in curve], dtype=float)
    if len(curve) == 1:
        return np.full(xs.shape, values[0])

    times = np.array([point.time for point in curve], dtype=float)
    leave = np.array([point.leave_tangent for point in curve], dtype=float)
    arrive = np.array([point.arrive_tangent for point in curve], dtype=float)
    linear = np.array([point.interp_mode == InterpMode.LINEAR for point in curve])

    index = np.clip(np.searchsorted(times, xs, side="right") - 1, 0, len(curve) - 2)
    t0 = times[index]
    span = times[index + 1] - t0
    # Clipping s to [0, 1] reproduces the boundary clamp
    s = np.clip((xs - t0) / span, 0.0, 1.0)
    y0 = values[index]
    y1 = values[index + 1]

    s2 = s * s
    s3 = s2 * s
    cubic = (
        (2 * s3 - 3 * s2 + 1) * y0
        + (s3 - 2 * s2 + s) * span * leave[index]
        + (-2 * s3 + 3 * s2) * y1
        + (s3 - s2) * span * arrive[index + 1]
    )
    straight = y0 + s * (y1 - y0)
    return np.where(linear[index], straight, cubic)


def bezier_segments(curve: Sequence[CurvePoint]) -> list[BezierSegment]:
    """
    Control points for drawing a curve as cubic Bezier segments.

    Control points sit a third of the segment length from each end, offset
    by the tangents; the resulting Bezier is exactly the Hermite segment
    used by ``evaluate``.
    """
    validate_curve(curve)
    segments = []

    for p0, p1 in zip(curve, curve[1:]):
        dx = (p1.time - p0.time) / 3
        if p0.interp_mode == InterpMode.LINEAR:
            dy = (p1.value - p0.value) / 3
            control1 = (p0.time + dx, p0.value + dy)
            control2 = (p1.time - dx, p1.value - dy)
            is_linear = True
        else:
            control1 = (p0.time + dx, p0.value + p0.leave_tangent * dx)
            control2 = (p1.time - dx, p1.value - p1.arrive_tangent * dx)
            is_linear = False

        segments.append(BezierSegment(
            start=(p0.time, p0.value),
            control1=control1,
            control2=control2,
            end=(p1.time, p1.value),
            is_linear=is_linear,
        ))

    return segments


def curve_max(curve: Sequence[CurvePoint]) -> float:
    """Largest keyed value of a curve."""
    validate_curve(curve)
    return max(point.value for point in curve)
