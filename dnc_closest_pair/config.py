"""
Defaults shared by the engine, the renderers and the demo.

Every constructor that uses one of these accepts an explicit override, so
this module only holds starting values.
"""

# ---------- Pacing ----------
DEFAULT_DELAY_MS: float = 500.0
# The strip pre-scan pause is this fraction of the delay.
STRIP_PRESCAN_FRACTION: float = 0.5

# ---------- Algorithm ----------
BASE_CASE_SIZE: int = 3

# ---------- Point generation ----------
DEFAULT_CANVAS_WIDTH: float = 600.0
DEFAULT_CANVAS_HEIGHT: float = 400.0
POINT_PADDING: float = 20.0
DEFAULT_NUM_POINTS: int = 20

# ---------- Colours ----------
POINT_COLOR = "#007bff"
STRIP_POINT_COLOR = "#FFC107"
DIVIDER_COLOR = "#dc3545"
BASE_CASE_COLOR = "#17a2b8"
HALVES_BEST_COLOR = "#28a745"
COMPARE_COLOR = "#cccccc"
STRIP_BEST_COLOR = "#fd7e14"
DIMMED_COLOR = "#6c757d"
FINAL_COLOR = "#28a745"

# ---------- Status text keys ----------
STATUS_RECURSION = "recursion_info"
STATUS_STRIP = "strip_info"
STATUS_WARNING = "warning"
STATUS_P1 = "p1"
STATUS_P2 = "p2"
STATUS_DISTANCE = "final_distance"
STATUS_DC_COMPARISONS = "dc_comparisons"
STATUS_BF_COMPARISONS = "bf_comparisons"
STATUS_SAVED = "saved_comparisons"
STATUS_TIME = "time_taken"
STATUS_FINAL_COMPARISONS = "final_comparisons"
STATUS_FINAL_TIME = "final_time"

# Blank values shown before a run reports.
STATUS_DEFAULTS = {
    STATUS_DC_COMPARISONS: "0",
    STATUS_BF_COMPARISONS: "0",
    STATUS_SAVED: "0",
    STATUS_TIME: "0 ms",
    STATUS_P1: "-",
    STATUS_P2: "-",
    STATUS_DISTANCE: "-",
}
