"""Report and chart configuration."""

# Chart colors
QPS_COLOR = "#2196f3"
TOKENS_COLOR = "#4caf50"
LATENCY_COLORS = {
    "average": "#ff9800",
    "p50": "#2196f3",
    "p90": "#9c27b0",
    "p99": "#f44336",
}
ERROR_COLOR = "#f44336"

# Axis and series labels
X_AXIS_LABEL = "Concurrency Level"
QPS_LABEL = "QPS (Queries Per Second)"
QPS_AXIS_LABEL = "QPS"
TOKENS_LABEL = "Tokens/sec"
TOKENS_AXIS_LABEL = "Tokens/sec"
LATENCY_AXIS_LABEL = "Latency (ms)"
ERROR_RATE_AXIS_LABEL = "Error Rate (%)"

# Display precision
QPS_DECIMALS = 2
TOKENS_DECIMALS = 1
TOOLTIP_DECIMALS = 2

CHART_HEIGHT = 450
CHART_TEMPLATE = "plotly_white"

# Thresholds used by the bottleneck detectors
QPS_GRADIENT_THRESHOLD = 0.05
LATENCY_RATIO_THRESHOLD = 1.0

# Output
OUTPUT_DIR = "output"
DEFAULT_REPORT_NAME = "report"
REPORT_FORMATS = ["html", "json", "csv"]
