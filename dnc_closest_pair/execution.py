"""
Run bookkeeping: execution tokens for cooperative cancellation and the
comparison counters reported after a run.
"""
import logging
import threading

logger = logging.getLogger(__name__)


class ExecutionController:
    """
    Issues strictly increasing execution tokens.

    Only the most recently issued token is current. There is no cancel call:
    issuing a new token is what cancels every older run, which notices the
    next time it asks ``is_current``.
    """

    def __init__(self) -> None:
        self._latest = 0
        self._lock = threading.Lock()

    def new_run(self) -> int:
        with self._lock:
            self._latest += 1
            token = self._latest
        logger.debug("Issued execution token %d", token)
        return token

    def is_current(self, token: int) -> bool:
        return token == self._latest

    @property
    def latest(self) -> int:
        return self._latest


class StatisticsCollector:
    """
    Comparison counters for one run.

    Callers record only while their token is current; the collector itself
    does no token checking.
    """

    def __init__(self) -> None:
        self.strip_comparisons = 0
        self.base_case_comparisons = 0

    def reset(self) -> None:
        self.strip_comparisons = 0
        self.base_case_comparisons = 0

    def record_comparison(self) -> None:
        """One distance evaluation inside a strip scan."""
        self.strip_comparisons += 1

    def record_base_comparison(self) -> None:
        """One distance evaluation inside a brute-force base case."""
        self.base_case_comparisons += 1

    def total(self) -> int:
        return self.strip_comparisons + self.base_case_comparisons
