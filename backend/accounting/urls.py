# accounting/urls.py
"""
URL configuration for the ledger API.

Mounted under /api/companies/<company_public_id>/:
- journal-entries/ - list and post entries
- journal-entries/<public_id>/ - entry with lines
- fiscal-periods/ - list periods
- fiscal-periods/<pk>/close/ and /open/ - period state changes
"""

from django.urls import path

from .views import (
    FiscalPeriodCloseView,
    FiscalPeriodListView,
    FiscalPeriodOpenView,
    JournalEntryDetailView,
    JournalEntryListCreateView,
)

app_name = "accounting"

urlpatterns = [
    # ==========================================================================
    # Journal Entries
    # ==========================================================================
    path(
        "journal-entries/",
        JournalEntryListCreateView.as_view(),
        name="journal-entry-list-create",
    ),
    path(
        "journal-entries/<uuid:public_id>/",
        JournalEntryDetailView.as_view(),
        name="journal-entry-detail",
    ),

    # ==========================================================================
    # Fiscal Periods
    # ==========================================================================
    path(
        "fiscal-periods/",
        FiscalPeriodListView.as_view(),
        name="fiscal-period-list",
    ),
    path(
        "fiscal-periods/<int:pk>/close/",
        FiscalPeriodCloseView.as_view(),
        name="fiscal-period-close",
    ),
    path(
        "fiscal-periods/<int:pk>/open/",
        FiscalPeriodOpenView.as_view(),
        name="fiscal-period-open",
    ),
]
