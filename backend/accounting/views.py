# accounting/views.py
"""
Thin views that delegate to the commands layer.

Views handle: HTTP parsing, authentication, response formatting.
Commands handle: posting rules, numbering, period state.

All writes go through accounting.commands; the models refuse writes made
outside a command's write context.
"""

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from django.shortcuts import get_object_or_404

from accounts.tenancy import resolve_company
from .commands import close_period, open_period, post_entry
from .models import FiscalPeriod, JournalEntry
from .serializers import (
    FiscalPeriodSerializer,
    JournalEntryInputSerializer,
    JournalEntryListSerializer,
    JournalEntrySerializer,
)


def _failure(result):
    return Response(
        {"detail": result.error, "code": result.error_code},
        status=status.HTTP_400_BAD_REQUEST,
    )


# =============================================================================
# Journal Entry Views
# =============================================================================

class JournalEntryListCreateView(APIView):
    """
    GET /api/companies/<company>/journal-entries/ -> list posted entries
    POST /api/companies/<company>/journal-entries/ -> post a new entry
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, company_public_id):
        company = resolve_company(company_public_id, request.user)
        entries = JournalEntry.objects.filter(company=company).order_by("-entry_date", "-id")

        entry_date = request.query_params.get("entry_date")
        if entry_date:
            entries = entries.filter(entry_date=entry_date)

        serializer = JournalEntryListSerializer(entries, many=True)
        return Response(serializer.data)

    def post(self, request, company_public_id):
        company = resolve_company(company_public_id, request.user)

        input_serializer = JournalEntryInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        data = input_serializer.validated_data

        result = post_entry(
            company,
            entry_date=data["entry_date"],
            description=data.get("description", ""),
            reference=data.get("reference", ""),
            legal_entity_id=data.get("legal_entity_id"),
            lines=[dict(line) for line in data["lines"]],
        )
        if not result.success:
            return _failure(result)

        return Response(
            {
                "entry_number": result.data,
                "public_id": str(result.entry.public_id),
            },
            status=status.HTTP_201_CREATED,
        )


class JournalEntryDetailView(APIView):
    """GET /api/companies/<company>/journal-entries/<public_id>/"""
    permission_classes = [IsAuthenticated]

    def get(self, request, company_public_id, public_id):
        company = resolve_company(company_public_id, request.user)
        entry = get_object_or_404(
            JournalEntry.objects.select_related("legal_entity", "fiscal_period").prefetch_related(
                "lines", "lines__account"
            ),
            company=company,
            public_id=public_id,
        )
        return Response(JournalEntrySerializer(entry).data)


# =============================================================================
# Fiscal Period Views
# =============================================================================

class FiscalPeriodListView(APIView):
    """GET /api/companies/<company>/fiscal-periods/"""
    permission_classes = [IsAuthenticated]

    def get(self, request, company_public_id):
        company = resolve_company(company_public_id, request.user)
        periods = FiscalPeriod.objects.filter(company=company).order_by("start_date")
        return Response(FiscalPeriodSerializer(periods, many=True).data)


class FiscalPeriodCloseView(APIView):
    """POST /api/companies/<company>/fiscal-periods/<pk>/close/"""
    permission_classes = [IsAuthenticated]

    def post(self, request, company_public_id, pk):
        company = resolve_company(company_public_id, request.user)
        result = close_period(company, pk)
        if not result.success:
            return _failure(result)
        return Response(FiscalPeriodSerializer(result.data).data)


class FiscalPeriodOpenView(APIView):
    """POST /api/companies/<company>/fiscal-periods/<pk>/open/"""
    permission_classes = [IsAuthenticated]

    def post(self, request, company_public_id, pk):
        company = resolve_company(company_public_id, request.user)
        result = open_period(company, pk)
        if not result.success:
            return _failure(result)
        return Response(FiscalPeriodSerializer(result.data).data)
