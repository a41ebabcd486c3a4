"""Point type and the distance/sorting helpers the solvers are built on."""

import math
from typing import Iterable, List, NamedTuple


class Point(NamedTuple):
    x: float
    y: float


# ---------- Geometry helpers ----------
def distance(p1: Point, p2: Point) -> float:
    """Euclidean distance; exactly 0.0 for coincident points."""
    return math.sqrt((p1[0] - p2[0]) ** 2 + (p1[1] - p2[1]) ** 2)


def sort_by_x(points: Iterable[Point]) -> List[Point]:
    """
    New list ordered by x. The sort is stable, so points sharing an x value
    keep their input order.
    """
    return sorted(points, key=lambda p: p[0])


def sort_by_y(points: Iterable[Point]) -> List[Point]:
    return sorted(points, key=lambda p: p[1])
