"""Monitoring configuration for the scheduler."""
from prometheus_client import Counter, Histogram, start_http_server

# Matrix metrics
matrices_built = Counter(
    "vocabplan_matrices_built_total",
    "Total number of schedule matrices built",
)

matrix_build_duration = Histogram(
    "vocabplan_matrix_build_duration_seconds",
    "Duration of a full matrix build in seconds",
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5],
)

# Validation metrics
pace_clamped = Counter(
    "vocabplan_pace_clamped_total",
    "Number of times an invalid words-per-day value was clamped",
)

invalid_totals = Counter(
    "vocabplan_invalid_totals_total",
    "Number of times an invalid word total was treated as zero",
)

# Completion metrics
inferred_completions = Counter(
    "vocabplan_inferred_completions_total",
    "Review cells counted as completed because a later round exists",
)

ignored_reviews = Counter(
    "vocabplan_ignored_reviews_total",
    "Review records ignored because their order is out of range",
)

unused_cells = Counter(
    "vocabplan_unused_cells_total",
    "Cells flagged as unused because they have no provisioned content",
)

# Store metrics
store_operations = Counter(
    "vocabplan_store_operations_total",
    "Total number of learning unit store mutations",
    ["operation_type"],
)

store_errors = Counter(
    "vocabplan_store_errors_total",
    "Total number of learning unit store errors",
    ["error_type"],
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
