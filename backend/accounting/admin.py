# accounting/admin.py
"""
Django admin configuration for accounting models.

Journal entries, lines, sequences and fiscal periods are written by the
command layer only (accounting/commands.py); their admin pages are
read-only. Accounts and numbering settings are reference data and stay
editable.
"""

from django.contrib import admin

from .models import (
    Account,
    CompanySequence,
    FiscalPeriod,
    JournalEntry,
    JournalLine,
    NumberingSettings,
)


class ReadOnlyModelAdmin(admin.ModelAdmin):
    """
    Base admin class for ledger-owned models.

    Saving from the admin would hit the write barrier; use the command
    layer instead.
    """

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class JournalLineInline(admin.TabularInline):
    model = JournalLine
    extra = 0
    readonly_fields = ["sort_order", "account", "description", "debit", "credit"]
    fields = readonly_fields

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =============================================================================
# Reference data
# =============================================================================

@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = ["code", "name", "status", "company"]
    list_filter = ["company", "status"]
    search_fields = ["code", "name"]
    ordering = ["company", "code"]


@admin.register(NumberingSettings)
class NumberingSettingsAdmin(admin.ModelAdmin):
    list_display = ["company", "prefix", "start_value"]


# =============================================================================
# Ledger (read-only)
# =============================================================================

@admin.register(JournalEntry)
class JournalEntryAdmin(ReadOnlyModelAdmin):
    list_display = ["entry_number", "entry_date", "reference", "status", "legal_entity", "company"]
    list_filter = ["company", "status", "entry_date"]
    search_fields = ["entry_number", "description", "reference"]
    date_hierarchy = "entry_date"
    list_select_related = ["company", "legal_entity"]
    ordering = ["-entry_date", "-id"]
    inlines = [JournalLineInline]


@admin.register(FiscalPeriod)
class FiscalPeriodAdmin(ReadOnlyModelAdmin):
    list_display = ["name", "start_date", "end_date", "status", "closed_at", "company"]
    list_filter = ["company", "status"]
    ordering = ["company", "start_date"]


@admin.register(CompanySequence)
class CompanySequenceAdmin(ReadOnlyModelAdmin):
    list_display = ["company", "name", "next_value", "updated_at"]
    list_filter = ["company"]
