"""
Geometry and smoothing helpers shared by the per-hand filter and the
two-hand aggregator.
"""
from typing import NamedTuple, Tuple
import math


class Point2(NamedTuple):
    x: float
    y: float


class Point3(NamedTuple):
    x: float
    y: float
    z: float


def distance_3d(p1: Tuple[float, float, float], p2: Tuple[float, float, float]) -> float:
    """Euclidean distance between two 3D points."""
    dx = p1[0] - p2[0]
    dy = p1[1] - p2[1]
    dz = p1[2] - p2[2]
    return math.sqrt(dx*dx + dy*dy + dz*dz)


def distance_2d(p1: Tuple[float, ...], p2: Tuple[float, ...]) -> float:
    """Calculate 2D distance between two points (ignoring z)."""
    dx = p1[0] - p2[0]
    dy = p1[1] - p2[1]
    return math.sqrt(dx*dx + dy*dy)


def midpoint_3d(p1: Tuple[float, float, float], p2: Tuple[float, float, float]) -> Point3:
    return Point3(
        (p1[0] + p2[0]) / 2,
        (p1[1] + p2[1]) / 2,
        (p1[2] + p2[2]) / 2,
    )


def midpoint_2d(p1: Tuple[float, ...], p2: Tuple[float, ...]) -> Point2:
    return Point2((p1[0] + p2[0]) / 2, (p1[1] + p2[1]) / 2)


def to_centered(point: Tuple[float, float, float]) -> Point3:
    """
    Map a normalized image point (0..1, origin top-left) to the centered
    convention: origin at image center, x and y in [-1, 1], both axes flipped.
    Depth passes through unscaled.
    """
    x, y, z = point[0], point[1], point[2]
    return Point3(-(x * 2 - 1), -(y * 2 - 1), z)


def to_screen(point: Tuple[float, ...], width: int, height: int) -> Tuple[int, int]:
    """
    Map a centered point back to pixel coordinates of a width x height surface.

    Only y is flipped back; x stays mirrored, so the result lines up with a
    horizontally flipped (selfie view) preview of the camera frame.
    """
    px = (point[0] + 1) / 2 * width
    py = (1 - point[1]) / 2 * height
    return int(px), int(py)


def ema(current: float, target: float, alpha: float) -> float:
    """One exponential smoothing step: move `current` toward `target` by `alpha`."""
    return current + alpha * (target - current)


def ema_point(current: Point3, target: Point3, alpha: float) -> Point3:
    return Point3(
        ema(current.x, target.x, alpha),
        ema(current.y, target.y, alpha),
        ema(current.z, target.z, alpha),
    )
