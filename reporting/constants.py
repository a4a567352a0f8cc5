DISPLAY_PREVIEW_ROWS = 50
REPORT_ROW_LIMIT = 1000

HIGH_CARDINALITY_RATIO = 0.9
GROUP_KEY_SEPARATOR = "\x1f"  # unit separator, never present in CSV text cells

MEASURE_LABELS = {"count"}
MEASURE_PREFIXES = ("sum(", "avg(")

CHART_TOP_N = 12
CHART_OTHER_LABEL = "Other"
CHART_TOTAL_LABEL = "Total"
CHART_LABEL_JOIN = " / "
HORIZONTAL_LABEL_THRESHOLD = 14
AXIS_LABEL_MAX = 20
TOOLTIP_LABEL_MAX = 30

LOADING_DELAY_MS = 150
LOADING_MIN_MS = 300

DEFAULT_API_URL = "http://localhost:8080/api"
DEFAULT_API_TIMEOUT_SEC = 30
