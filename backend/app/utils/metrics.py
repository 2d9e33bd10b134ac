"""Prometheus metrics for extraction and reminders."""

from prometheus_client import Counter, Histogram

# Extraction metrics
extraction_latency_ms = Histogram(
    "extraction_latency_ms",
    "Document extraction latency in milliseconds",
    ["file_type", "outcome"],
    buckets=[100, 500, 1000, 2000, 4000, 8000, 16000, 32000, 64000],
)

extraction_failures_total = Counter(
    "extraction_failures_total",
    "Total document extraction failures",
    ["file_type", "reason"],
)

# Reminder metrics
reminders_generated_total = Counter(
    "reminders_generated_total",
    "Total reminder alerts generated",
)

reminder_email_failures_total = Counter(
    "reminder_email_failures_total",
    "Total reminder emails that could not be delivered",
)


class PrometheusExtractionMetrics:
    """Prometheus-based extraction metrics implementation."""

    def record_latency(self, file_type: str, outcome: str, latency_ms: float) -> None:
        """Record extraction latency."""
        extraction_latency_ms.labels(file_type=file_type, outcome=outcome).observe(latency_ms)

    def inc_failure(self, file_type: str, reason: str) -> None:
        """Increment failure counter."""
        extraction_failures_total.labels(file_type=file_type, reason=reason).inc()


class PrometheusReminderMetrics:
    """Prometheus-based reminder metrics implementation."""

    def inc_generated(self, count: int = 1) -> None:
        """Count generated alerts."""
        reminders_generated_total.inc(count)

    def inc_email_failure(self) -> None:
        """Count an undelivered reminder email."""
        reminder_email_failures_total.inc()
