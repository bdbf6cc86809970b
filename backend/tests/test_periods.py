# tests/test_periods.py
"""
Tests for fiscal period administration and the period policies.
"""

from datetime import date
from io import StringIO

import pytest
from django.core.management import CommandError, call_command

from accounting.commands import (
    close_period,
    configure_fiscal_year,
    create_fiscal_period,
    open_period,
)
from accounting.models import FiscalPeriod
from accounting.policies import can_post_to_period, overlapping_periods


# =============================================================================
# Creation
# =============================================================================

@pytest.mark.django_db
class TestCreateFiscalPeriod:

    def test_creates_open_period(self, company):
        result = create_fiscal_period(company, "Q1", date(2026, 1, 1), date(2026, 3, 31))

        assert result.success
        assert result.data.status == FiscalPeriod.Status.OPEN
        assert result.data.contains(date(2026, 2, 14))

    def test_inverted_range_rejected(self, company):
        result = create_fiscal_period(company, "bad", date(2026, 2, 1), date(2026, 1, 1))

        assert not result.success
        assert result.error_code == "invalid_range"
        assert not FiscalPeriod.objects.exists()

    def test_overlap_rejected(self, company, january_period):
        result = create_fiscal_period(company, "mid-jan", date(2026, 1, 20), date(2026, 2, 10))

        assert result.error_code == "overlap"
        assert FiscalPeriod.objects.filter(company=company).count() == 1

    def test_overlap_is_per_company(self, company, second_company, january_period):
        result = create_fiscal_period(second_company, "2026/01", date(2026, 1, 1), date(2026, 1, 31))

        assert result.success

    def test_single_day_period(self, company):
        result = create_fiscal_period(company, "closing day", date(2026, 12, 31), date(2026, 12, 31))

        assert result.success


@pytest.mark.django_db
class TestConfigureFiscalYear:

    def test_creates_twelve_months(self, company):
        result = configure_fiscal_year(company, 2026)

        assert len(result.data) == 12
        periods = list(FiscalPeriod.objects.filter(company=company).order_by("start_date"))
        assert periods[0].start_date == date(2026, 1, 1)
        assert periods[1].end_date == date(2026, 2, 28)
        assert periods[-1].end_date == date(2026, 12, 31)
        assert periods[0].name == "2026/01"

    def test_respects_start_month(self, company):
        company.fiscal_year_start_month = 7
        company.save()

        configure_fiscal_year(company, 2026)

        periods = list(FiscalPeriod.objects.filter(company=company).order_by("start_date"))
        assert periods[0].start_date == date(2026, 7, 1)
        assert periods[-1].start_date == date(2027, 6, 1)
        assert periods[-1].end_date == date(2027, 6, 30)

    def test_skips_existing_months(self, company, january_period):
        result = configure_fiscal_year(company, 2026)

        assert len(result.data) == 11
        assert FiscalPeriod.objects.filter(company=company).count() == 12

    def test_is_idempotent(self, company):
        configure_fiscal_year(company, 2026)
        second = configure_fiscal_year(company, 2026)

        assert second.data == []


# =============================================================================
# Close / open
# =============================================================================

@pytest.mark.django_db
class TestClosePeriod:

    def test_close_sets_status_and_timestamp(self, company, january_period):
        result = close_period(company, january_period.id)

        assert result.success
        january_period.refresh_from_db()
        assert january_period.status == FiscalPeriod.Status.CLOSED
        assert january_period.closed_at is not None

    def test_close_twice_rejected(self, company, january_period):
        close_period(company, january_period.id)

        result = close_period(company, january_period.id)

        assert not result.success
        assert result.error_code == "period_state"

    def test_open_clears_timestamp(self, company, january_period):
        close_period(company, january_period.id)

        result = open_period(company, january_period.id)

        assert result.success
        january_period.refresh_from_db()
        assert january_period.is_open
        assert january_period.closed_at is None

    def test_open_already_open_rejected(self, company, january_period):
        result = open_period(company, january_period.id)

        assert result.error_code == "period_state"

    def test_other_company_period_not_found(self, second_company, january_period):
        result = close_period(second_company, january_period.id)

        assert not result.success
        assert "not found" in result.error
        january_period.refresh_from_db()
        assert january_period.is_open


# =============================================================================
# Policies
# =============================================================================

@pytest.mark.django_db
class TestPeriodPolicies:

    def test_can_post_into_open_period(self, company, january_period):
        assert can_post_to_period(company, date(2026, 1, 31)) == (True, "")

    def test_cannot_post_without_period(self, company, january_period):
        allowed, reason = can_post_to_period(company, "2026-02-01")

        assert allowed is False
        assert "No fiscal period" in reason

    def test_cannot_post_into_closed_period(self, company, january_period):
        close_period(company, january_period.id)

        allowed, reason = can_post_to_period(company, date(2026, 1, 1))

        assert allowed is False
        assert reason == "Fiscal period is closed."

    def test_overlapping_periods_excludes_self(self, company, january_period, february_period):
        qs = overlapping_periods(company, date(2026, 1, 1), date(2026, 1, 31), exclude_id=january_period.id)

        assert not qs.exists()
        assert overlapping_periods(company, date(2026, 1, 31), date(2026, 2, 1)).count() == 2


@pytest.mark.django_db
class TestConfigureFiscalYearCommand:

    def test_creates_periods_for_tenant(self, company):
        out = StringIO()

        call_command("configure_fiscal_year", "2026", "--tenant", company.slug, stdout=out)

        assert "12 period(s) created" in out.getvalue()
        assert FiscalPeriod.objects.filter(company=company).count() == 12

    def test_unknown_tenant(self, company):
        with pytest.raises(CommandError):
            call_command("configure_fiscal_year", "2026", "--tenant", "nope")

    def test_requires_target(self, company):
        with pytest.raises(CommandError):
            call_command("configure_fiscal_year", "2026")
