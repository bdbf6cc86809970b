"""
Prometheus metrics.

Metrics exposed:
- ledgerline_entries_posted_total: Journal entries committed, by numbering mode
- ledgerline_posting_rejected_total: Rejected posting attempts, by error code
- ledgerline_numbering_fallback_total: Entry numbers issued by the
  best-effort counter instead of the serialized one
"""
import logging

from django.http import HttpResponse
from django.views import View
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

logger = logging.getLogger(__name__)


entries_posted = Counter(
    "ledgerline_entries_posted_total",
    "Journal entries committed to the ledger",
    ["numbering"],
)

posting_rejected = Counter(
    "ledgerline_posting_rejected_total",
    "Posting attempts rejected before or at commit",
    ["code"],
)

numbering_fallback = Counter(
    "ledgerline_numbering_fallback_total",
    "Entry numbers allocated by the degraded best-effort counter",
)


def get_prometheus_response():
    """Generate Prometheus metrics response."""
    output = generate_latest()
    return HttpResponse(output, content_type=CONTENT_TYPE_LATEST)


class MetricsView(View):
    """
    Prometheus metrics endpoint.

    Exposes metrics in Prometheus format at /_metrics.
    Should be protected in production (internal network only).
    """

    def get(self, request):
        return get_prometheus_response()
