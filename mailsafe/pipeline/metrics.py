"""
Prometheus Metrics — display pipeline observability.

Exposes counters and histograms for:
- Rewrite rules that fired, per component
- Sanitizer fallbacks (document escaped after too many rounds)
- Rejected batch records
- Component processing latency

Usage
-----
    from mailsafe.pipeline.metrics import record_rule_hits, timed_component

    with timed_component("sanitizer"):
        report = sanitize_with_report(html)
    record_rule_hits("sanitizer", report.rules_applied)
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator, Iterable

from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

# Rewrite rules that changed a document, labelled by component and rule name.
RULE_HITS: Counter = Counter(
    "mailsafe_rule_hits_total",
    "Rewrite rules that changed the input, by component and rule",
    ["component", "rule"],
)

# Documents the sanitizer gave up on and escaped wholesale.
SANITIZER_FALLBACKS: Counter = Counter(
    "mailsafe_sanitizer_fallbacks_total",
    "Documents escaped because the rule table did not reach a fixed point",
)

# Batch records rejected before processing.
REJECTED_RECORDS: Counter = Counter(
    "mailsafe_rejected_records_total",
    "Batch records rejected by payload validation",
    ["reason"],
)

# Processing latency per component (seconds).
COMPONENT_LATENCY: Histogram = Histogram(
    "mailsafe_component_processing_seconds",
    "Processing time per display pipeline component in seconds",
    ["component"],
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
)


# ---------------------------------------------------------------------------
# Convenience helpers
# ---------------------------------------------------------------------------

def record_rule_hits(component: str, rules: Iterable[str]) -> None:
    """Increment the hit counter once per rule name in *rules*."""
    for rule in rules:
        RULE_HITS.labels(component=component, rule=rule).inc()


def record_sanitizer_fallback() -> None:
    SANITIZER_FALLBACKS.inc()


def record_rejection(reason: str = "validation") -> None:
    """Increment the rejected-record counter for *reason*."""
    REJECTED_RECORDS.labels(reason=reason).inc()


@contextmanager
def timed_component(component: str) -> Generator[None, None, None]:
    """
    Context manager that records component processing latency.

    Usage::

        with timed_component("preview"):
            preview = extract_meaningful_preview(text)
    """
    with COMPONENT_LATENCY.labels(component=component).time():
        yield
