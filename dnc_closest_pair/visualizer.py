"""
Run trigger and reporting.

``Visualizer`` owns the point set, the execution controller and the
statistics for one display. ``start_run`` may be called again while a run is
in flight: the new run takes a fresh token and the older one unwinds the next
time it checks.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

import numpy as np

from dnc_closest_pair import config
from dnc_closest_pair.execution import ExecutionController, StatisticsCollector
from dnc_closest_pair.geometry import Point, sort_by_x
from dnc_closest_pair.render import NullRenderer, Renderer, Sleeper, Surface, asyncio_sleeper
from dnc_closest_pair.solvers import ClosestPairEngine, RunResult, theoretical_bf

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class InsufficientPointsError(ValueError):
    """A run needs at least two points."""


def validate_points(points: List[Point]) -> None:
    if len(points) < 2:
        raise InsufficientPointsError(
            f"Please generate at least 2 points first (got {len(points)})."
        )


@dataclass
class RunReport:
    result: RunResult
    n: int
    comparisons: int
    elapsed_ms: float

    @property
    def theoretical_bf(self) -> int:
        return theoretical_bf(self.n)

    @property
    def saved(self) -> int:
        return self.theoretical_bf - self.comparisons

    def display_pair(self) -> Optional[Tuple[Tuple[int, int], Tuple[int, int]]]:
        """Pair coordinates rounded to the nearest integer."""
        if self.result.pair is None:
            return None
        p1, p2 = self.result.pair
        return ((round(p1[0]), round(p1[1])), (round(p2[0]), round(p2[1])))

    def display_distance(self) -> Optional[int]:
        if self.result.pair is None:
            return None
        return round(self.result.distance)


# ---------- Point generation ----------
def generate_points(n: int,
                    width: float = config.DEFAULT_CANVAS_WIDTH,
                    height: float = config.DEFAULT_CANVAS_HEIGHT,
                    padding: float = config.POINT_PADDING,
                    rng: Optional[np.random.Generator] = None) -> List[Point]:
    """Uniform random points inside the box shrunk by ``padding`` on every side."""
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    if width <= 2 * padding or height <= 2 * padding:
        raise ValueError("canvas is too small for the requested padding")
    if rng is None:
        rng = np.random.default_rng()
    xs = padding + rng.random(n) * (width - 2 * padding)
    ys = padding + rng.random(n) * (height - 2 * padding)
    return [Point(float(x), float(y)) for x, y in zip(xs, ys)]


def format_points(points: Iterable[Point]) -> str:
    """'(x, y), (x, y), ...' with coordinates rounded for display."""
    return ", ".join(f"({round(p[0])}, {round(p[1])})" for p in points)


class Visualizer:
    """
    Holds the current point set and drives paced runs over it.

    Every run goes through ``start_run``; it is the only place tokens are
    issued, except for ``reset`` which supersedes whatever is running.
    """

    def __init__(self, renderer: Optional[Renderer] = None,
                 sleeper: Sleeper = asyncio_sleeper,
                 delay_ms: float = config.DEFAULT_DELAY_MS,
                 clock: Clock = time.perf_counter,
                 controller: Optional[ExecutionController] = None):
        self.renderer = renderer if renderer is not None else NullRenderer()
        self.sleeper = sleeper
        self.delay_ms = delay_ms
        self.clock = clock
        self.controller = controller if controller is not None else ExecutionController()
        self.stats = StatisticsCollector()
        self.points: List[Point] = []
        self.last_report: Optional[RunReport] = None

    def _reset_status(self) -> None:
        for key, value in config.STATUS_DEFAULTS.items():
            self.renderer.set_status_text(key, value)

    def load_points(self, points: Iterable) -> None:
        """Replace the point set and draw it."""
        self.points = list(points)
        logger.info("Loaded %d points", len(self.points))
        self.renderer.clear(Surface.RECURSION)
        self.renderer.clear(Surface.STRIP)
        for p in self.points:
            self.renderer.draw_point(p, config.POINT_COLOR)
        self._reset_status()

    def reset(self) -> None:
        """Abandon any running run and start from an empty display."""
        self.controller.new_run()
        self.points = []
        self.stats.reset()
        self.last_report = None
        self.renderer.clear(Surface.RECURSION)
        self.renderer.clear(Surface.STRIP)
        self._reset_status()
        logger.info("Visualizer reset")

    async def start_run(self, points: Optional[Iterable] = None) -> Optional[RunReport]:
        """
        Run the paced divide-and-conquer search.

        Returns the report, or None if the run was rejected (fewer than two
        points) or superseded by a newer run before it finished.
        """
        if points is not None:
            candidate = list(points)
        else:
            candidate = self.points
        try:
            validate_points(candidate)
        except InsufficientPointsError as e:
            logger.warning("Run rejected: %s", e)
            self.renderer.set_status_text(config.STATUS_WARNING, str(e))
            return None

        token = self.controller.new_run()
        self.points = pts = candidate
        self.stats.reset()
        self._reset_status()
        self.renderer.clear(Surface.RECURSION)
        self.renderer.clear(Surface.STRIP)

        # Sorted in place: the engine slices this list and returns its objects
        pts.sort(key=lambda p: p[0])
        for p in pts:
            self.renderer.draw_point(p, config.POINT_COLOR)

        logger.info("Run %d started on %d points", token, len(pts))
        engine = ClosestPairEngine(
            controller=self.controller,
            stats=self.stats,
            renderer=self.renderer,
            sleeper=self.sleeper,
            delay_ms=self.delay_ms,
        )
        start = self.clock()
        result = await engine.solve(pts, token)

        if result.abandoned or not self.controller.is_current(token):
            logger.debug("Run %d abandoned", token)
            return None

        elapsed_ms = (self.clock() - start) * 1000.0
        report = RunReport(
            result=result,
            n=len(pts),
            comparisons=self.stats.total(),
            elapsed_ms=elapsed_ms,
        )
        self._show_report(report, pts)
        self.last_report = report
        logger.info(
            "Run %d finished: distance=%.3f comparisons=%d (brute force %d) in %.2f ms",
            token, result.distance, report.comparisons, report.theoretical_bf, elapsed_ms,
        )
        return report

    def _show_report(self, report: RunReport, points: List[Point]) -> None:
        r = self.renderer
        pair = report.display_pair()
        if pair is not None:
            p1, p2 = report.result.pair
            r.clear(Surface.RECURSION)
            for p in points:
                r.draw_point(p, config.DIMMED_COLOR)
            r.draw_point(p1, config.FINAL_COLOR)
            r.draw_point(p2, config.FINAL_COLOR)
            r.draw_line(p1, p2, config.FINAL_COLOR, 4)
            r.set_status_text(config.STATUS_P1, f"({pair[0][0]}, {pair[0][1]})")
            r.set_status_text(config.STATUS_P2, f"({pair[1][0]}, {pair[1][1]})")
            r.set_status_text(config.STATUS_DISTANCE, str(report.display_distance()))

        time_text = f"{report.elapsed_ms:.2f} ms"
        r.set_status_text(config.STATUS_DC_COMPARISONS, str(report.comparisons))
        r.set_status_text(config.STATUS_BF_COMPARISONS, str(report.theoretical_bf))
        r.set_status_text(config.STATUS_SAVED, str(report.saved))
        r.set_status_text(config.STATUS_TIME, time_text)
        r.set_status_text(config.STATUS_FINAL_COMPARISONS, str(report.comparisons))
        r.set_status_text(config.STATUS_FINAL_TIME, time_text)


def find_closest_pair(points: Iterable) -> Tuple[RunResult, int]:
    """
    Headless, unpaced search. Returns the result and the number of
    comparisons made; fewer than two points give ``NO_PAIR``.
    """
    pts = sort_by_x(points)
    controller = ExecutionController()
    stats = StatisticsCollector()
    engine = ClosestPairEngine(controller, stats, delay_ms=0)
    token = controller.new_run()
    result = asyncio.run(engine.solve(pts, token))
    return result, stats.total()
