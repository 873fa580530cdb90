# -*- coding: utf-8 -*-
"""
bounds_math.py - bounding box arithmetic for the hex layout.

Rectangles follow Illustrator's geometricBounds order: (left, top, right, bottom),
Y grows upward. A Rect is a plain tuple, so `Rect(*item.GeometricBounds)` works.
"""

from __future__ import annotations

from typing import Iterable, NamedTuple, Optional, Tuple

POINTS_PER_CM = 28.3464567


class Rect(NamedTuple):
    left: float
    top: float
    right: float
    bottom: float


class Point(NamedTuple):
    x: float
    y: float


def cm_to_points(cm: float) -> float:
    return cm * POINTS_PER_CM


def width(r: Rect) -> float:
    return r[2] - r[0]


def height(r: Rect) -> float:
    return r[1] - r[3]


def union(rects: Iterable[Rect]) -> Optional[Rect]:
    """Combined bounding box, or None when there is nothing to combine."""
    out = None
    for r in rects:
        if out is None:
            out = Rect(*r)
            continue
        out = Rect(min(out.left, r[0]), max(out.top, r[1]),
                   max(out.right, r[2]), min(out.bottom, r[3]))
    return out


def center(r: Rect) -> Point:
    return Point((r[0] + r[2]) / 2, (r[1] + r[3]) / 2)


def intersects(a: Rect, b: Rect) -> bool:
    # strict: shared edges and corners are not an overlap
    horizontal = a[0] < b[2] and a[2] > b[0]
    vertical = a[3] < b[1] and a[1] > b[3]
    return horizontal and vertical


def scale_factor_to_fit(current: Rect, target_width: float, target_height: float) -> float:
    """
    Uniform resize percentage that fits `current` inside the target box.
    A flat axis (a straight rule) does not constrain the fit; a point is left at 100.
    """
    factors = []
    if width(current):
        factors.append(target_width / width(current) * 100)
    if height(current):
        factors.append(target_height / height(current) * 100)
    return min(factors) if factors else 100.0


def sponsor_offset(sponsor: Rect, hex_rect: Rect, alignment: str) -> Tuple[float, float]:
    """
    Translation that places the sponsor relative to the hex.
    "bottom": centered horizontally, bottom edges aligned.
    "middle": centered on both axes.
    """
    s = center(sponsor)
    h = center(hex_rect)
    if alignment == "bottom":
        return h.x - s.x, hex_rect[3] - sponsor[3]
    if alignment == "middle":
        return h.x - s.x, h.y - s.y
    return 0.0, 0.0


def center_offset(r: Rect, artboard: Rect) -> Tuple[float, float]:
    c = center(r)
    a = center(artboard)
    return a.x - c.x, a.y - c.y


def artboard_point(artboard: Rect, x_cm: float, y_cm: float) -> Point:
    # y is measured downward from the artboard top
    return Point(artboard[0] + cm_to_points(x_cm), artboard[1] - cm_to_points(y_cm))


def top_left_offset(r: Rect, target: Point) -> Tuple[float, float]:
    return target[0] - r[0], target[1] - r[1]
