"""
Module: solvers
Description: Divide-and-conquer closest pair of points, paced for visualization.
             - Brute force for small inputs (base case) and the O(n^2) baseline.
             - Strip merge: the linear-time conquer step near the dividing line.
             - Recursive engine that checks its execution token at every step,
               so a newer run silently abandons this one.
"""
import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from dnc_closest_pair.config import (
    BASE_CASE_COLOR,
    BASE_CASE_SIZE,
    COMPARE_COLOR,
    DEFAULT_DELAY_MS,
    DIVIDER_COLOR,
    HALVES_BEST_COLOR,
    STATUS_RECURSION,
    STATUS_STRIP,
    STRIP_BEST_COLOR,
    STRIP_POINT_COLOR,
    STRIP_PRESCAN_FRACTION,
)
from dnc_closest_pair.execution import ExecutionController, StatisticsCollector
from dnc_closest_pair.geometry import Point, distance, sort_by_y
from dnc_closest_pair.render import NullRenderer, Renderer, Sleeper, Surface, no_delay

logger = logging.getLogger(__name__)

Pair = Tuple[Point, Point]


@dataclass(frozen=True)
class RunResult:
    distance: float
    pair: Optional[Pair]
    abandoned: bool = False

    @property
    def found(self) -> bool:
        return self.pair is not None


# Fewer than two points.
NO_PAIR = RunResult(math.inf, None)
# Returned up the recursion once a run's token is stale; never combined.
ABANDONED = RunResult(math.inf, None, abandoned=True)


# ---------- Brute force (base case / baseline) ----------
def brute_force(points: List[Point],
                on_compare: Optional[Callable[[], None]] = None) -> RunResult:
    """
    Compare every unordered pair once (i < j).
    Only a strictly smaller distance replaces the current pair, so ties keep
    the pair found first.
    """
    n = len(points)
    if n < 2:
        return NO_PAIR

    best = math.inf
    closest: Optional[Pair] = None
    for i in range(n):
        for j in range(i + 1, n):
            if on_compare is not None:
                on_compare()
            d = distance(points[i], points[j])
            if d < best:
                best = d
                closest = (points[i], points[j])
    return RunResult(best, closest)


def theoretical_bf(n: int) -> int:
    """Comparisons brute force needs for n points: n(n-1)/2."""
    if n < 2:
        return 0
    return n * (n - 1) // 2


# ---------- Strip merge (conquer step) ----------
async def strip_merge(strip: List[Point], best: float, token: int, *,
                      controller: ExecutionController,
                      stats: StatisticsCollector,
                      renderer: Renderer,
                      sleeper: Sleeper = no_delay,
                      delay_ms: float = DEFAULT_DELAY_MS) -> Tuple[float, Optional[Pair]]:
    """
    Look for a pair closer than ``best`` among points within ``best`` of the
    dividing line.

    After sorting by y, each point is only compared with the points above it
    whose y-gap is still below the current best. Points in the strip that are
    mutually closer than ``best`` in both x and y are few, so the scan is
    linear once ``best`` has tightened.

    Returns ``(best, pair)`` where ``pair`` is None unless the strip improved
    on ``best``. A stale token returns ``(best, None)`` at once.
    """
    if not controller.is_current(token):
        return best, None

    strip = sort_by_y(strip)

    renderer.clear(Surface.STRIP)
    for p in strip:
        renderer.draw_point(p, STRIP_POINT_COLOR, surface=Surface.STRIP)
    renderer.set_status_text(STATUS_STRIP, f"Checking {len(strip)} points in strip...")

    if not controller.is_current(token):
        return best, None
    await sleeper(delay_ms * STRIP_PRESCAN_FRACTION)

    min_dist = best
    closest: Optional[Pair] = None
    size = len(strip)
    for i in range(size):
        if not controller.is_current(token):
            return best, None
        j = i + 1
        while j < size and (strip[j][1] - strip[i][1]) < min_dist:
            stats.record_comparison()
            d = distance(strip[i], strip[j])
            renderer.draw_line(strip[i], strip[j], COMPARE_COLOR, 1, surface=Surface.STRIP)
            if d < min_dist:
                min_dist = d
                closest = (strip[i], strip[j])
                renderer.draw_line(strip[i], strip[j], STRIP_BEST_COLOR, 3, surface=Surface.STRIP)
            j += 1

    if closest is not None:
        logger.debug("Strip of %d points improved best to %.3f", size, min_dist)
        if not controller.is_current(token):
            return best, None
        await sleeper(delay_ms)

    return min_dist, closest


# ---------- Divide and conquer ----------
class ClosestPairEngine:
    """
    Recursive closest-pair solver.

    ``solve`` expects points sorted by x and only ever slices them. The
    token is compared against the controller on entry, before each pause and
    after each merge; once it is stale the call returns ``ABANDONED`` and
    every caller up the stack does the same.
    """

    def __init__(self, controller: ExecutionController,
                 stats: StatisticsCollector,
                 renderer: Optional[Renderer] = None,
                 sleeper: Sleeper = no_delay,
                 delay_ms: float = DEFAULT_DELAY_MS,
                 base_case_size: int = BASE_CASE_SIZE):
        if base_case_size < 3:
            raise ValueError("base_case_size must be at least 3")
        self.controller = controller
        self.stats = stats
        self.renderer = renderer if renderer is not None else NullRenderer()
        self.sleeper = sleeper
        self.delay_ms = delay_ms
        self.base_case_size = base_case_size

    async def solve(self, points: List[Point], token: int) -> RunResult:
        if not self.controller.is_current(token):
            return ABANDONED

        n = len(points)
        if n <= self.base_case_size:
            res = brute_force(points, on_compare=self.stats.record_base_comparison)
            if res.pair is not None:
                self.renderer.draw_line(res.pair[0], res.pair[1], BASE_CASE_COLOR, 2)
            return res

        mid = n // 2
        mid_x = points[mid][0]

        self.renderer.draw_divider(mid_x, DIVIDER_COLOR)
        self.renderer.set_status_text(STATUS_RECURSION, f"Splitting at X = {mid_x:.1f}")

        if not self.controller.is_current(token):
            return ABANDONED
        await self.sleeper(self.delay_ms)

        left = await self.solve(points[:mid], token)
        if left.abandoned:
            return ABANDONED
        right = await self.solve(points[mid:], token)
        if right.abandoned:
            return ABANDONED

        # Left wins ties
        best, closest = left.distance, left.pair
        if right.distance < best:
            best, closest = right.distance, right.pair

        if closest is not None:
            self.renderer.draw_line(closest[0], closest[1], HALVES_BEST_COLOR, 3)

        strip = [p for p in points if abs(p[0] - mid_x) < best]

        strip_dist, strip_pair = await strip_merge(
            strip, best, token,
            controller=self.controller,
            stats=self.stats,
            renderer=self.renderer,
            sleeper=self.sleeper,
            delay_ms=self.delay_ms,
        )
        if not self.controller.is_current(token):
            return ABANDONED

        if strip_pair is not None and strip_dist < best:
            return RunResult(strip_dist, strip_pair)
        return RunResult(best, closest)
