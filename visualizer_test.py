# PyTest tests for the run trigger, cancellation between runs, reporting,
# the matplotlib renderer and the empirical experiment.

import asyncio
import math

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pytest

from dnc_closest_pair import config
from dnc_closest_pair.experiment import plot_experiment, run_experiment
from dnc_closest_pair.geometry import Point
from dnc_closest_pair.render import PyplotRenderer, Surface, asyncio_sleeper, no_delay
from dnc_closest_pair.solvers import NO_PAIR, RunResult, brute_force
from dnc_closest_pair.visualizer import (
    RunReport,
    Visualizer,
    find_closest_pair,
    format_points,
    generate_points,
)

EPS = 1e-9

# ---------- Helpers (for tests only) ----------

class RecordingRenderer:
    """Keeps every call as (method, args) and the latest status values."""

    def __init__(self):
        self.calls = []
        self.status = {}

    def draw_point(self, p, color, surface=Surface.RECURSION):
        self.calls.append(("draw_point", p, color, surface))

    def draw_line(self, p1, p2, color, width, surface=Surface.RECURSION):
        self.calls.append(("draw_line", p1, p2, color, width, surface))

    def draw_divider(self, x, color):
        self.calls.append(("draw_divider", x, color))

    def clear(self, surface):
        self.calls.append(("clear", surface))

    def set_status_text(self, key, value):
        self.calls.append(("status", key, value))
        self.status[key] = value


def random_points(n, seed, scale=500.0):
    rng = np.random.default_rng(seed)
    return [Point(float(x), float(y)) for x, y in rng.random((n, 2)) * scale]


# ---------- Run trigger ----------

def test_run_reports_result_and_statistics():
    pts = random_points(60, 1)
    viz = Visualizer(sleeper=no_delay, delay_ms=0)
    report = asyncio.run(viz.start_run(pts))

    expected, comparisons = find_closest_pair(pts)
    assert abs(report.result.distance - brute_force(pts).distance) < EPS
    assert report.result.distance == expected.distance
    assert report.comparisons == comparisons == viz.stats.total()
    assert report.n == 60
    assert report.theoretical_bf == 60 * 59 // 2
    assert report.saved == report.theoretical_bf - report.comparisons
    assert report.saved >= 0
    assert viz.last_report is report


@pytest.mark.parametrize("pts", [[], [(3.0, 4.0)]])
def test_run_rejects_fewer_than_two_points(pts):
    renderer = RecordingRenderer()
    viz = Visualizer(renderer=renderer, sleeper=no_delay, delay_ms=0)
    assert asyncio.run(viz.start_run(pts)) is None
    assert viz.controller.latest == 0
    assert viz.last_report is None
    assert config.STATUS_WARNING in renderer.status
    assert [c[0] for c in renderer.calls] == ["status"]


def test_run_uses_loaded_points_sorted_in_place():
    pts = random_points(25, 2)
    viz = Visualizer(sleeper=no_delay, delay_ms=0)
    viz.load_points(pts)
    report = asyncio.run(viz.start_run())
    assert report is not None
    xs = [p.x for p in viz.points]
    assert xs == sorted(xs)
    assert report.result.pair[0] in viz.points


def test_run_highlights_the_callers_tuples():
    renderer = RecordingRenderer()
    a, b, c = (0, 0), (3, 4), (0, 5)
    viz = Visualizer(renderer=renderer, sleeper=no_delay, delay_ms=0)
    report = asyncio.run(viz.start_run([a, b, c]))
    assert {id(p) for p in report.result.pair} == {id(b), id(c)}
    last_line = [call for call in renderer.calls if call[0] == "draw_line"][-1]
    assert last_line[1] is report.result.pair[0] and last_line[2] is report.result.pair[1]


def test_pacing_delays():
    delays = []

    async def sleeper(ms):
        delays.append(ms)

    viz = Visualizer(sleeper=sleeper, delay_ms=400)
    asyncio.run(viz.start_run(random_points(30, 3)))
    assert 400 in delays
    assert 200 in delays
    assert set(delays) <= {200, 400}


def test_elapsed_time_from_clock():
    ticks = iter([10.0, 10.25])
    viz = Visualizer(sleeper=no_delay, delay_ms=0, clock=lambda: next(ticks))
    report = asyncio.run(viz.start_run(random_points(8, 4)))
    assert abs(report.elapsed_ms - 250.0) < EPS


def test_final_report_status_and_highlight():
    renderer = RecordingRenderer()
    viz = Visualizer(renderer=renderer, sleeper=no_delay, delay_ms=0)
    a, b = Point(10.4, 20.6), Point(11.2, 21.0)
    pts = [Point(100, 100), a, Point(300, 50), b, Point(200, 380)]
    report = asyncio.run(viz.start_run(pts))

    assert renderer.status[config.STATUS_P1] == "(10, 21)"
    assert renderer.status[config.STATUS_P2] == "(11, 21)"
    assert renderer.status[config.STATUS_DISTANCE] == str(round(math.hypot(0.8, 0.4)))
    assert renderer.status[config.STATUS_DC_COMPARISONS] == str(report.comparisons)
    assert renderer.status[config.STATUS_BF_COMPARISONS] == "10"
    assert renderer.status[config.STATUS_SAVED] == str(10 - report.comparisons)
    assert renderer.status[config.STATUS_TIME].endswith(" ms")
    assert renderer.status[config.STATUS_FINAL_TIME] == renderer.status[config.STATUS_TIME]

    last_line = [c for c in renderer.calls if c[0] == "draw_line"][-1]
    assert last_line[1:5] == (a, b, config.FINAL_COLOR, 4)


def test_split_and_strip_are_announced():
    renderer = RecordingRenderer()
    viz = Visualizer(renderer=renderer, sleeper=no_delay, delay_ms=0)
    asyncio.run(viz.start_run(random_points(12, 5)))
    kinds = {c[0] for c in renderer.calls}
    assert "draw_divider" in kinds
    assert renderer.status[config.STATUS_RECURSION].startswith("Splitting at X = ")
    assert renderer.status[config.STATUS_STRIP].startswith("Checking ")


# ---------- Cancellation between runs ----------

def test_new_run_supersedes_running_one():
    pts_a = random_points(80, 6)
    pts_b = random_points(40, 7)
    viz = Visualizer(sleeper=no_delay, delay_ms=0)

    async def scenario():
        task_a = asyncio.create_task(viz.start_run(pts_a))
        # let run A start and suspend at its first pause
        await asyncio.sleep(0)
        assert viz.controller.latest == 1
        report_b = await viz.start_run(pts_b)
        report_a = await task_a
        return report_a, report_b

    report_a, report_b = asyncio.run(scenario())

    expected, comparisons = find_closest_pair(pts_b)
    assert report_a is None
    assert report_b.result.distance == expected.distance
    assert report_b.comparisons == comparisons == viz.stats.total()
    assert viz.last_report is report_b


def test_reset_abandons_running_run():
    viz = Visualizer(sleeper=no_delay, delay_ms=0)

    async def scenario():
        task = asyncio.create_task(viz.start_run(random_points(50, 8)))
        await asyncio.sleep(0)
        viz.reset()
        return await task

    assert asyncio.run(scenario()) is None
    assert viz.stats.total() == 0
    assert viz.points == []
    assert viz.last_report is None


def test_rerun_after_cancellation_is_clean():
    pts = random_points(30, 9)
    viz = Visualizer(sleeper=no_delay, delay_ms=0)

    async def scenario():
        task = asyncio.create_task(viz.start_run(list(pts)))
        await asyncio.sleep(0)
        second = await viz.start_run(list(pts))
        await task
        return second

    second = asyncio.run(scenario())
    _, comparisons = find_closest_pair(pts)
    assert second.comparisons == comparisons


# ---------- Reporting helpers ----------

def test_report_without_pair():
    report = RunReport(result=NO_PAIR, n=1, comparisons=0, elapsed_ms=0.0)
    assert report.display_pair() is None
    assert report.display_distance() is None
    assert report.theoretical_bf == 0 and report.saved == 0


def test_report_rounding():
    res = RunResult(2.6, (Point(1.4, 2.6), Point(3.0, 4.2)))
    report = RunReport(result=res, n=4, comparisons=4, elapsed_ms=1.0)
    assert report.display_pair() == ((1, 3), (3, 4))
    assert report.display_distance() == 3
    assert report.saved == 2


def test_format_points():
    assert format_points([(1.4, 2.6), Point(3, 4)]) == "(1, 3), (3, 4)"
    assert format_points([]) == ""


def test_generate_points_inside_padded_box():
    pts = generate_points(200, width=300, height=100, padding=20, rng=np.random.default_rng(0))
    assert len(pts) == 200
    assert all(20 <= p.x <= 280 and 20 <= p.y <= 80 for p in pts)


@pytest.mark.parametrize("kwargs", [{"n": -1}, {"n": 5, "width": 30, "padding": 20}])
def test_generate_points_invalid(kwargs):
    with pytest.raises(ValueError):
        generate_points(**kwargs)


# ---------- Matplotlib renderer ----------

def test_pyplot_renderer_draws_and_clears():
    renderer = PyplotRenderer(width=100, height=50)
    rec_ax = renderer.axes[Surface.RECURSION]
    strip_ax = renderer.axes[Surface.STRIP]

    renderer.draw_point(Point(10, 10), config.POINT_COLOR)
    renderer.draw_line(Point(10, 10), Point(20, 20), config.COMPARE_COLOR, 1, surface=Surface.STRIP)
    renderer.draw_divider(50, config.DIVIDER_COLOR)
    renderer.set_status_text(config.STATUS_P1, "(10, 10)")

    assert len(rec_ax.collections) == 1
    assert len(rec_ax.lines) == 1
    assert len(strip_ax.lines) == 1
    assert renderer.status == {config.STATUS_P1: "(10, 10)"}

    renderer.clear(Surface.STRIP)
    assert len(strip_ax.lines) == 0
    assert strip_ax.get_xlim() == (0, 100)
    plt.close(renderer.figure)


def test_full_run_with_pyplot_renderer():
    renderer = PyplotRenderer()
    viz = Visualizer(renderer=renderer, sleeper=no_delay, delay_ms=0)
    viz.load_points(generate_points(16, rng=np.random.default_rng(4)))
    report = asyncio.run(viz.start_run())
    rec_ax = renderer.axes[Surface.RECURSION]
    # final highlight: dimmed points, the pair, and one line
    assert len(rec_ax.lines) == 1
    assert len(rec_ax.collections) == 16 + 2
    assert renderer.status[config.STATUS_DC_COMPARISONS] == str(report.comparisons)
    plt.close(renderer.figure)


# ---------- Experiment ----------

def test_run_experiment_table():
    df = run_experiment([8, 32, 128], trials=2, seed=1)
    assert list(df.columns) == ["n", "comparisons", "theoretical_bf", "saved", "runtime_ms", "nlogn"]
    assert list(df["n"]) == [8, 32, 128]
    assert list(df["theoretical_bf"]) == [28, 496, 8128]
    assert (df["saved"] >= 0).all()
    assert abs(df["nlogn"].iloc[-1] - df["comparisons"].iloc[-1]) < 1e-6


def test_run_experiment_rejects_zero_trials():
    with pytest.raises(ValueError):
        run_experiment([10], trials=0)


def test_plot_experiment():
    df = run_experiment([16, 64], trials=1, seed=2)
    ax = plot_experiment(df)
    assert len(ax.lines) == 3
    plt.close(ax.figure)


def test_default_sleeper_waits():
    calls = iter([0.0, 0.0])
    viz = Visualizer(delay_ms=1, clock=lambda: next(calls))
    assert viz.sleeper is asyncio_sleeper
    report = asyncio.run(viz.start_run(random_points(6, 10)))
    assert report.result.found


def test_setup_logging_replaces_handlers(tmp_path):
    import logging
    from dnc_closest_pair.logging_config import setup_logging

    log_file = tmp_path / "run.log"
    setup_logging(level=logging.DEBUG, log_file=str(log_file))
    logger = setup_logging(level=logging.DEBUG, log_file=str(log_file))
    assert len(logger.handlers) == 2
    for handler in logger.handlers:
        handler.close()
    assert f"Logging to {log_file}" in log_file.read_text(encoding="utf-8")
    logger.handlers.clear()
