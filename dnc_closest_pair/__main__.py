"""
Demo: paced closest-pair search in a matplotlib window.

Usage:
    $ python -m dnc_closest_pair [n] [delay_ms]
"""
import asyncio
import logging
import sys

import matplotlib.pyplot as plt
import numpy as np

from dnc_closest_pair import config
from dnc_closest_pair.logging_config import setup_logging
from dnc_closest_pair.render import PyplotRenderer, pyplot_sleeper
from dnc_closest_pair.visualizer import Visualizer, format_points, generate_points

logger = logging.getLogger("dnc_closest_pair")


def main() -> None:
    setup_logging(level=logging.INFO)

    # --- change n / delay from the command line ---
    n = int(sys.argv[1]) if len(sys.argv) > 1 else config.DEFAULT_NUM_POINTS
    delay_ms = float(sys.argv[2]) if len(sys.argv) > 2 else config.DEFAULT_DELAY_MS

    plt.ion()
    renderer = PyplotRenderer()
    viz = Visualizer(renderer=renderer, sleeper=pyplot_sleeper(renderer.figure), delay_ms=delay_ms)

    rng = np.random.default_rng(42)
    viz.load_points(generate_points(n, rng=rng))
    logger.info("Points: %s", format_points(viz.points))

    report = asyncio.run(viz.start_run())
    if report is not None and report.result.found:
        (x1, y1), (x2, y2) = report.display_pair()
        logger.info("Closest pair (%d, %d) - (%d, %d), distance %d, saved %d comparisons",
                    x1, y1, x2, y2, report.display_distance(), report.saved)

    plt.ioff()
    plt.show()


if __name__ == "__main__":
    main()
