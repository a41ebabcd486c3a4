"""
Rendering and pacing capabilities the engine calls into.

The engine never inspects what a renderer returns, so ``NullRenderer`` is a
complete implementation. ``PyplotRenderer`` draws the two views, the
recursion canvas and the strip canvas, on matplotlib axes.
"""
import asyncio
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional, Protocol

import matplotlib.pyplot as plt

from dnc_closest_pair.config import DEFAULT_CANVAS_HEIGHT, DEFAULT_CANVAS_WIDTH
from dnc_closest_pair.geometry import Point

Sleeper = Callable[[float], Awaitable[None]]


class Surface(str, Enum):
    RECURSION = "recursion"
    STRIP = "strip"


class Renderer(Protocol):
    def draw_point(self, p: Point, color: str, surface: Surface = Surface.RECURSION) -> None: ...

    def draw_line(self, p1: Point, p2: Point, color: str, width: float,
                  surface: Surface = Surface.RECURSION) -> None: ...

    def draw_divider(self, x: float, color: str) -> None: ...

    def clear(self, surface: Surface) -> None: ...

    def set_status_text(self, key: str, value: str) -> None: ...


class NullRenderer:
    """Renderer that draws nothing; used for headless runs and tests."""

    def draw_point(self, p, color, surface=Surface.RECURSION):
        pass

    def draw_line(self, p1, p2, color, width, surface=Surface.RECURSION):
        pass

    def draw_divider(self, x, color):
        pass

    def clear(self, surface):
        pass

    def set_status_text(self, key, value):
        pass


class PyplotRenderer:
    """
    Draws on two side-by-side axes: the recursion view (points, dividers,
    best pairs) and the strip view (strip points and the scanned pairs).
    Status values are collected in ``status`` and shown as the figure title.
    """

    def __init__(self, width: float = DEFAULT_CANVAS_WIDTH,
                 height: float = DEFAULT_CANVAS_HEIGHT, figure=None):
        self.width = width
        self.height = height
        if figure is None:
            figure = plt.figure(figsize=(12, 5))
        self.figure = figure
        rec_ax, strip_ax = self.figure.subplots(1, 2)
        self.axes: Dict[Surface, plt.Axes] = {
            Surface.RECURSION: rec_ax,
            Surface.STRIP: strip_ax,
        }
        self.status: Dict[str, str] = {}
        for surface in Surface:
            self._setup_axes(surface)

    def _setup_axes(self, surface: Surface) -> None:
        ax = self.axes[surface]
        ax.set_xlim(0, self.width)
        # Canvas coordinates: y grows downwards
        ax.set_ylim(self.height, 0)
        ax.set_aspect("equal", adjustable="box")
        ax.set_title("Recursion" if surface is Surface.RECURSION else "Strip")

    def draw_point(self, p, color, surface=Surface.RECURSION):
        self.axes[surface].scatter([p[0]], [p[1]], s=30, c=color,
                                   edgecolors="white", linewidths=1, zorder=3)

    def draw_line(self, p1, p2, color, width, surface=Surface.RECURSION):
        self.axes[surface].plot([p1[0], p2[0]], [p1[1], p2[1]], "-",
                                color=color, linewidth=width, zorder=2)

    def draw_divider(self, x, color):
        self.axes[Surface.RECURSION].axvline(x=x, color=color, linestyle="--",
                                             linewidth=1, zorder=1)

    def clear(self, surface):
        self.axes[surface].clear()
        self._setup_axes(surface)

    def set_status_text(self, key, value):
        self.status[key] = value
        self.figure.suptitle(" | ".join(f"{k}: {v}" for k, v in self.status.items()),
                             fontsize=9)
        self.figure.canvas.draw_idle()


# ---------- Sleepers ----------
async def asyncio_sleeper(delay_ms: float) -> None:
    await asyncio.sleep(delay_ms / 1000.0)


async def no_delay(delay_ms: float) -> None:
    """Yield to the event loop without waiting."""
    await asyncio.sleep(0)


def pyplot_sleeper(figure: Optional[plt.Figure] = None) -> Sleeper:
    """
    Sleeper that lets matplotlib process GUI events before pausing, so an
    interactive window repaints while the run is suspended.
    """
    async def _sleep(delay_ms: float) -> None:
        if figure is not None:
            figure.canvas.draw_idle()
        plt.pause(0.001)
        await asyncio.sleep(delay_ms / 1000.0)

    return _sleep
