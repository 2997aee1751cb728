"""Monitoring configuration for the memorizer."""
from prometheus_client import Counter, Gauge, start_http_server

# Learning metrics
words_reviewed = Counter(
    "memorizer_words_reviewed_total",
    "Total number of word reviews",
    ["result"],
)

daily_goals_completed = Counter(
    "memorizer_daily_goals_completed_total",
    "Total number of days on which the daily goal was completed",
)

current_streak = Gauge(
    "memorizer_current_streak",
    "Current consecutive-day streak",
)

# Word management metrics
words_added = Counter(
    "memorizer_words_added_total",
    "Total number of words added to the word bank",
)

words_imported = Counter(
    "memorizer_words_imported_total",
    "Total number of imported word candidates",
    ["status"],
)

# Database metrics
db_errors = Counter(
    "memorizer_db_errors_total",
    "Total number of database errors",
    ["error_type"],
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
