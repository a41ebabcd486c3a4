"""Divide-and-conquer closest pair of points with paced, cancellable runs."""

__version__ = "1.0"

from dnc_closest_pair.execution import ExecutionController, StatisticsCollector
from dnc_closest_pair.geometry import Point, distance
from dnc_closest_pair.render import NullRenderer, Renderer, Surface
from dnc_closest_pair.solvers import (
    ABANDONED,
    NO_PAIR,
    ClosestPairEngine,
    RunResult,
    brute_force,
    strip_merge,
    theoretical_bf,
)
from dnc_closest_pair.visualizer import (
    InsufficientPointsError,
    RunReport,
    Visualizer,
    find_closest_pair,
    format_points,
    generate_points,
)
