# accounting/policies.py
"""
Business policy functions for ledger operations.

Policies answer: "Is this action allowed given the current state?"
They do NOT perform the action; the commands do that.

Usage:
    from accounting.policies import can_post_to_period, assert_balanced

    # Option 1: Check and get boolean + reason (form validation, no locks)
    allowed, reason = can_post_to_period(company, entry_date)
    if not allowed:
        return error(reason)

    # Option 2: Assert and raise on failure (inside the posting transaction)
    assert_balanced(lines)                              # raises UnbalancedEntry
    period = lock_open_period(company, entry_date)      # raises PeriodClosed

Only the assert/lock variants are authoritative: they run inside the same
atomic unit as the insert, so they see the state at commit time.
"""

from datetime import date, datetime
from decimal import Decimal

from django.conf import settings

from accounting.exceptions import PeriodClosed, PeriodMissing, UnbalancedEntry
from accounting.models import FiscalPeriod

ZERO = Decimal("0.00")


def as_date(target_date) -> date:
    """Coerce a date, datetime or ISO string to a date."""
    if isinstance(target_date, datetime):
        return target_date.date()
    if isinstance(target_date, str):
        return date.fromisoformat(target_date)
    return target_date


def _periods_covering(company, target_date):
    return FiscalPeriod.objects.filter(
        company=company,
        start_date__lte=target_date,
        end_date__gte=target_date,
    )


# =============================================================================
# Period Policies
# =============================================================================

def can_post_to_period(company, target_date) -> tuple[bool, str]:
    """
    Check if posting is allowed for the given date.

    Rules:
    - A fiscal period must cover the date
    - That period must be open

    Non-locking; the result may be stale by the time the caller commits.
    """
    target_date = as_date(target_date)
    fiscal_period = _periods_covering(company, target_date).first()
    if not fiscal_period:
        return False, "No fiscal period defined for this date."
    if not fiscal_period.is_open:
        return False, "Fiscal period is closed."
    return True, ""


def lock_open_period(company, target_date) -> FiscalPeriod:
    """
    Lock and return the open period covering `target_date`.

    Must run inside transaction.atomic(); the row lock is held until the
    enclosing transaction ends, so a concurrent close_period() waits for the
    post (or the post waits for the close and then sees CLOSED).
    """
    target_date = as_date(target_date)
    fiscal_period = _periods_covering(company, target_date).select_for_update().first()
    if fiscal_period is None:
        raise PeriodMissing(f"No fiscal period defined for {target_date.isoformat()}.")
    if not fiscal_period.is_open:
        raise PeriodClosed(f"Fiscal period {fiscal_period.name} is closed.")
    return fiscal_period


def overlapping_periods(company, start_date, end_date, exclude_id=None):
    qs = FiscalPeriod.objects.filter(
        company=company,
        start_date__lte=end_date,
        end_date__gte=start_date,
    )
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs


# =============================================================================
# Balance Policies
# =============================================================================

def line_totals(lines) -> tuple[Decimal, Decimal]:
    """Sum debit and credit over line dicts (both columns of every line)."""
    total_debit = sum((Decimal(str(line.get("debit") or 0)) for line in lines), ZERO)
    total_credit = sum((Decimal(str(line.get("credit") or 0)) for line in lines), ZERO)
    return total_debit, total_credit


def is_balanced(total_debit: Decimal, total_credit: Decimal, tolerance: Decimal = None) -> bool:
    if tolerance is None:
        tolerance = settings.LEDGER_BALANCE_TOLERANCE
    return abs(total_debit - total_credit) <= tolerance


def assert_balanced(lines, tolerance: Decimal = None) -> tuple[Decimal, Decimal]:
    """Raise UnbalancedEntry unless debits equal credits within tolerance."""
    total_debit, total_credit = line_totals(lines)
    if not is_balanced(total_debit, total_credit, tolerance):
        raise UnbalancedEntry(total_debit, total_credit)
    return total_debit, total_credit
