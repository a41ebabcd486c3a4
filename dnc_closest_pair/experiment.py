"""
Module: experiment
Description: Empirically evaluate the divide-and-conquer closest pair.
             - Generate random 2D point sets.
             - Count comparisons and measure runtime of the unpaced search.
             - Compare against brute force n(n-1)/2 and a normalized n log n curve.
"""
import logging
import math
import time
from statistics import median
from typing import Iterable, Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from dnc_closest_pair.solvers import theoretical_bf
from dnc_closest_pair.visualizer import find_closest_pair, generate_points

logger = logging.getLogger(__name__)


def run_experiment(sizes: Iterable[int], trials: int = 5, seed: int = 0) -> pd.DataFrame:
    """
    One row per n with the median comparisons and runtime over ``trials``
    random point sets. ``nlogn`` is n*log2(n) scaled so it meets the
    comparisons column at the largest n.
    """
    if trials < 1:
        raise ValueError("trials must be at least 1")
    rng = np.random.default_rng(seed)
    rows = []
    for n in sizes:
        comps, times = [], []
        for _ in range(trials):
            pts = generate_points(n, rng=rng)
            t0 = time.perf_counter()
            _, c = find_closest_pair(pts)
            times.append((time.perf_counter() - t0) * 1000.0)
            comps.append(c)
        bf = theoretical_bf(n)
        comparisons = median(comps)
        rows.append({
            "n": n,
            "comparisons": comparisons,
            "theoretical_bf": bf,
            "saved": bf - comparisons,
            "runtime_ms": median(times),
        })
        logger.debug("n=%d comparisons=%s brute force=%d", n, comparisons, bf)

    df = pd.DataFrame(rows, columns=["n", "comparisons", "theoretical_bf", "saved", "runtime_ms"])
    nlogn = df["n"].apply(lambda k: k * math.log2(k) if k > 1 else 0.0)
    if len(df) and nlogn.iloc[-1] > 0:
        df["nlogn"] = nlogn * (df["comparisons"].iloc[-1] / nlogn.iloc[-1])
    else:
        df["nlogn"] = nlogn
    return df


def plot_experiment(df: pd.DataFrame, ax: Optional[plt.Axes] = None) -> plt.Axes:
    """Comparisons vs n against the brute-force count and the n log n curve."""
    if ax is None:
        _, ax = plt.subplots()
    ax.plot(df["n"], df["comparisons"], "o-", label="Divide & conquer")
    ax.plot(df["n"], df["theoretical_bf"], "--", label="Brute force n(n-1)/2")
    ax.plot(df["n"], df["nlogn"], ":", label="n log n (normalized)")
    ax.set_xlabel("n")
    ax.set_ylabel("comparisons")
    ax.set_title("Comparisons: experimental vs theory")
    ax.legend()
    return ax
