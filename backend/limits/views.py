# limits/views.py
"""
Revenue limit endpoint.

The caller posts the records it has already loaded; the response holds the
monthly buckets and the status against the configured ceiling.
"""

from django.conf import settings
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from ops.logging_config import get_logger
from .engine import LimitWindow, build_buckets, limit_status
from .serializers import BucketsRequestSerializer, LimitStatusSerializer, MonthlyBucketSerializer

logger = get_logger(__name__)


def configured_limit(window: str):
    if window == LimitWindow.CALENDAR_YEAR:
        return settings.REVENUE_LIMIT_CALENDAR_YEAR
    return settings.REVENUE_LIMIT_ROLLING


class BucketsView(APIView):
    """
    POST /api/limits/buckets/

    Body: window, today (optional), sales, summaries, book_entries
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = BucketsRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        window = serializer.validated_data["window"]
        sales, summaries, book_entries = serializer.records()

        buckets = build_buckets(
            window,
            sales,
            summaries,
            book_entries,
            today=serializer.validated_data.get("today"),
        )
        status = limit_status(buckets, configured_limit(window))
        if status.level != "ok":
            logger.warning(
                "Revenue approaching limit",
                extra={"window": window, "percent": str(status.percent), "level": status.level},
            )

        return Response({
            "window": window,
            "buckets": MonthlyBucketSerializer(buckets, many=True).data,
            "status": LimitStatusSerializer(status).data,
        })
