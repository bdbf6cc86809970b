# limits/engine.py
"""
Revenue threshold aggregation.

Builds twelve monthly buckets of revenue from three independently fetched
sources and compares the running total with a regulatory ceiling:

- sales documents (invoices; pro-forma and advance documents never count)
- fiscal-device daily summaries
- book entries imported into the revenue book

A sale can appear in more than one source. A book entry is counted only if
it is not linked to a sales document and its id is not recorded against any
fiscal summary.

Two windows:
- calendar-year: January..December of the current year, all counterparties,
  fiscal summaries at their full amount.
- rolling-365-day: the twelve months ending today, oldest bucket clipped so
  the window spans exactly 365 days; domestic sales only, fiscal summaries
  at their domestic amount.

No I/O happens here: callers fetch the records and pass them in.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal

from django.db import models
from django.utils import timezone

ZERO = Decimal("0.00")
HUNDRED = Decimal("100")
PERCENT_Q = Decimal("0.01")

WARNING_PERCENT = Decimal("75")
CRITICAL_PERCENT = Decimal("90")


class LimitWindow(models.TextChoices):
    CALENDAR_YEAR = "calendar-year", "Calendar year"
    ROLLING_365 = "rolling-365-day", "Rolling 365 days"


class DocumentType(models.TextChoices):
    INVOICE = "invoice", "Invoice"
    PROFORMA = "proforma", "Pro-forma"
    ADVANCE = "advance", "Advance payment"


class Counterparty(models.TextChoices):
    DOMESTIC = "domestic", "Domestic"
    FOREIGN = "foreign", "Foreign"


NON_BINDING_TYPES = {DocumentType.PROFORMA.value, DocumentType.ADVANCE.value}


# =============================================================================
# Records
# =============================================================================

@dataclass(frozen=True)
class SalesDocument:
    id: str
    document_date: date
    amount: Decimal
    document_type: str = DocumentType.INVOICE
    counterparty: str = Counterparty.DOMESTIC


@dataclass(frozen=True)
class FiscalDailySummary:
    id: str
    summary_date: date
    total_amount: Decimal
    domestic_amount: Decimal
    book_entry_ids: frozenset = field(default_factory=frozenset)


@dataclass(frozen=True)
class BookEntry:
    id: str
    entry_date: date
    amount: Decimal
    sales_document_id: str = None


@dataclass(frozen=True)
class MonthlyBucket:
    month: str
    start: date
    end: date
    sales: Decimal
    fiscal: Decimal
    book: Decimal
    total: Decimal
    cumulative: Decimal


@dataclass(frozen=True)
class LimitStatus:
    total: Decimal
    limit: Decimal
    percent: Decimal
    remaining: Decimal
    level: str


# =============================================================================
# Windows
# =============================================================================

def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def _month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def month_ranges(window: str, today: date) -> list[tuple[date, date]]:
    """Return the twelve (start, end) date ranges of `window`, oldest first."""
    if window == LimitWindow.CALENDAR_YEAR:
        return [(date(today.year, m, 1), _month_end(today.year, m)) for m in range(1, 13)]

    if window != LimitWindow.ROLLING_365:
        raise ValueError(f"Unknown limit window: {window!r}")

    window_start = today - timedelta(days=364)
    ranges = []
    for delta in range(-11, 1):
        year, month = _shift_month(today.year, today.month, delta)
        start = date(year, month, 1)
        end = _month_end(year, month)
        if delta == -11:
            start = window_start
        if delta == 0:
            end = today
        ranges.append((start, end))
    return ranges


# =============================================================================
# Source filtering
# =============================================================================

def _counted_sales(window: str, sales):
    for doc in sales:
        if doc.document_type in NON_BINDING_TYPES:
            continue
        if window == LimitWindow.ROLLING_365 and doc.counterparty != Counterparty.DOMESTIC:
            continue
        yield doc.document_date, doc.amount


def _counted_fiscal(window: str, summaries):
    for summary in summaries:
        amount = summary.domestic_amount if window == LimitWindow.ROLLING_365 else summary.total_amount
        yield summary.summary_date, amount


def _counted_book(book_entries, summaries):
    covered = set()
    for summary in summaries:
        covered.update(str(entry_id) for entry_id in summary.book_entry_ids)

    for entry in book_entries:
        if entry.sales_document_id:
            continue
        if str(entry.id) in covered:
            continue
        yield entry.entry_date, entry.amount


def _bucket_sums(ranges, dated_amounts) -> list[Decimal]:
    sums = [ZERO] * len(ranges)
    for when, amount in dated_amounts:
        for idx, (start, end) in enumerate(ranges):
            if start <= when <= end:
                sums[idx] += amount
                break
    return sums


# =============================================================================
# Public API
# =============================================================================

def build_buckets(window: str, sales, summaries, book_entries=None, today: date = None) -> list[MonthlyBucket]:
    """
    Fold the three sources into twelve monthly buckets, oldest first.

    `cumulative` is the running total up to and including each bucket.
    Inputs are not modified; the same inputs give the same buckets.
    """
    today = today or timezone.localdate()
    summaries = list(summaries)
    ranges = month_ranges(window, today)

    sales_sums = _bucket_sums(ranges, _counted_sales(window, sales))
    fiscal_sums = _bucket_sums(ranges, _counted_fiscal(window, summaries))
    book_sums = _bucket_sums(ranges, _counted_book(book_entries or [], summaries))

    buckets = []
    cumulative = ZERO
    for idx, (start, end) in enumerate(ranges):
        total = sales_sums[idx] + fiscal_sums[idx] + book_sums[idx]
        cumulative += total
        buckets.append(MonthlyBucket(
            month=f"{end.year}-{end.month:02d}",
            start=start,
            end=end,
            sales=sales_sums[idx],
            fiscal=fiscal_sums[idx],
            book=book_sums[idx],
            total=total,
            cumulative=cumulative,
        ))
    return buckets


def limit_status(buckets, limit) -> LimitStatus:
    """Compare the window total with `limit`; level is ok/warning/critical."""
    limit = Decimal(str(limit))
    if limit <= 0:
        raise ValueError("Revenue limit must be positive.")

    total = buckets[-1].cumulative if buckets else ZERO
    percent = total * HUNDRED / limit
    if percent >= CRITICAL_PERCENT:
        level = "critical"
    elif percent >= WARNING_PERCENT:
        level = "warning"
    else:
        level = "ok"

    return LimitStatus(
        total=total,
        limit=limit,
        percent=percent.quantize(PERCENT_Q),
        remaining=max(limit - total, ZERO),
        level=level,
    )
