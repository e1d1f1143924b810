"""Geometry helpers for locating extracted values on a page."""

from __future__ import annotations

from typing import NamedTuple, Sequence


class Point(NamedTuple):
    """A point relative to the page, with coordinates between 0 and 1."""

    x: float
    y: float


class Quadrilateral(NamedTuple):
    """Four points, clockwise from the top left."""

    top_left: Point
    top_right: Point
    bottom_right: Point
    bottom_left: Point


Polygon = list[Point]


def polygon_from_prediction(prediction: Sequence[Sequence[float]] | None) -> Polygon:
    """Build a polygon from the API's list of ``[x, y]`` pairs."""
    if not prediction:
        return []
    return [Point(float(x), float(y)) for x, y in prediction]


def quadrilateral_from_prediction(prediction: Sequence[Sequence[float]] | None) -> Quadrilateral | None:
    """Build a quadrilateral from exactly four ``[x, y]`` pairs."""
    if not prediction:
        return None
    if len(prediction) != 4:
        raise ValueError(f"A quadrilateral needs exactly 4 points, got {len(prediction)}.")
    return Quadrilateral(*polygon_from_prediction(prediction))


def get_bounding_box(polygon: Sequence[Point]) -> Quadrilateral:
    """Smallest axis-aligned rectangle containing every point of the polygon."""
    xs = [point.x for point in polygon]
    ys = [point.y for point in polygon]
    x_min, x_max = min(xs), max(xs)
    y_min, y_max = min(ys), max(ys)
    return Quadrilateral(
        Point(x_min, y_min),
        Point(x_max, y_min),
        Point(x_max, y_max),
        Point(x_min, y_max),
    )
