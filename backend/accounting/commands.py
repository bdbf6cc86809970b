# accounting/commands.py
"""
Command layer for ledger operations.

Commands are the single point where the ledger is written.
Views call commands; commands enforce rules and commit atomically.

Pattern:
1. Normalize and validate input (no database writes)
2. Resolve references (accounts, legal entity); abort on any miss
3. Inside one transaction.atomic() unit: apply policies against the
   locked state, allocate numbers, write rows
4. Return CommandResult

A PostingError raised inside the atomic unit rolls back every row written
by it (header, lines, sequence increment) before it is converted into a
failed CommandResult.
"""

import calendar
from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from accounts.models import LegalEntity
from accounting.exceptions import (
    AccountNotFound,
    EmptyEntry,
    LegalEntityNotFound,
    NumberConflict,
    PeriodError,
    PostingError,
)
from accounting.models import Account, FiscalPeriod, JournalEntry, JournalLine
from accounting.numbering import allocate_entry_number
from accounting.policies import as_date, assert_balanced, lock_open_period, overlapping_periods
from accounting.write_barrier import ledger_writes_allowed, period_writes_allowed
from ops import metrics
from ops.logging_config import get_logger

logger = get_logger(__name__)


class CommandResult:
    """
    Wrapper for command results with success/failure info.

    Usage:
        result = post_entry(company, entry_date=..., lines=[...])
        if result.success:
            entry_number = result.data
            entry = result.entry
        else:
            error_message, error_code = result.error, result.error_code
    """

    def __init__(self, success: bool, data=None, error: str = None, error_code: str = None, entry=None):
        self.success = success
        self.data = data
        self.error = error
        self.error_code = error_code
        self.entry = entry

    @classmethod
    def ok(cls, data=None, entry=None):
        return cls(success=True, data=data, entry=entry)

    @classmethod
    def fail(cls, error: str, code: str = None):
        return cls(success=False, error=error, error_code=code)

    def __repr__(self):
        if self.success:
            return f"CommandResult.ok({self.data!r})"
        return f"CommandResult.fail({self.error_code!r}: {self.error!r})"


def _amount(value) -> Decimal:
    if value is None or value == "":
        return Decimal("0.00")
    return Decimal(str(value))


# =============================================================================
# Journal Entry Commands
# =============================================================================

def _normalize_lines(lines: list) -> list[dict]:
    normalized = []
    for idx, line in enumerate(lines, start=1):
        sort_order = line.get("sort_order")
        normalized.append({
            "account_code": str(line.get("account_code", "")).strip(),
            "debit": _amount(line.get("debit")),
            "credit": _amount(line.get("credit")),
            "description": line.get("description", "") or "",
            "sort_order": idx if sort_order is None else int(sort_order),
        })
    normalized.sort(key=lambda line: line["sort_order"])
    return normalized


def _resolve_accounts(company, codes: set[str]) -> dict[str, Account]:
    """
    Resolve account codes to ACTIVE accounts of `company`.

    Raises AccountNotFound listing every code that does not resolve.
    """
    accounts = {
        account.code: account
        for account in Account.objects.filter(
            company=company,
            code__in=codes,
            status=Account.Status.ACTIVE,
        )
    }
    missing = set(codes) - set(accounts)
    if missing:
        raise AccountNotFound(missing)
    return accounts


def _resolve_legal_entity(company, legal_entity_id):
    if legal_entity_id in (None, ""):
        return None
    lookup = {"pk": legal_entity_id} if isinstance(legal_entity_id, int) else {"public_id": legal_entity_id}
    try:
        return LegalEntity.objects.get(company=company, is_active=True, **lookup)
    except (LegalEntity.DoesNotExist, ValidationError, ValueError):
        raise LegalEntityNotFound(f"Legal entity {legal_entity_id} not found.")


@transaction.atomic
def _commit_entry(company, entry_date, description, reference, legal_entity, lines, accounts) -> JournalEntry:
    """
    Write header and lines as one unit.

    Balance, period lock and numbering are evaluated here, against the state
    at commit time.
    """
    with ledger_writes_allowed():
        assert_balanced(lines)
        fiscal_period = lock_open_period(company, entry_date)
        number = allocate_entry_number(company, entry_date.year)

        entry = JournalEntry.objects.create(
            company=company,
            entry_number=number.entry_number,
            entry_date=entry_date,
            description=description,
            reference=reference,
            legal_entity=legal_entity,
            fiscal_period=fiscal_period,
            status=JournalEntry.Status.POSTED,
            posted_at=timezone.now(),
        )
        JournalLine.objects.bulk_create([
            JournalLine(
                entry=entry,
                company=company,
                account=accounts[line["account_code"]],
                description=line["description"],
                debit=line["debit"],
                credit=line["credit"],
                sort_order=line["sort_order"],
            )
            for line in lines
        ])
        entry.numbering_mode = number.mode
        return entry


def post_entry(
    company,
    entry_date,
    description: str = "",
    reference: str = "",
    legal_entity_id=None,
    lines: list = None,
) -> CommandResult:
    """
    Post a journal entry: the sole write path into the ledger.

    Args:
        company: Tenant the entry belongs to
        entry_date: Entry date (date or ISO string)
        description: Free text
        reference: External reference (e.g. invoice number)
        legal_entity_id: Optional LegalEntity pk or public id
        lines: List of dicts with account_code, debit, credit,
               description, sort_order

    Returns:
        CommandResult whose data is the assigned entry number, or a failure
        with error_code in {empty_entry, account_not_found,
        legal_entity_not_found, unbalanced, period_missing, period_closed,
        number_conflict}.
    """
    entry_date = as_date(entry_date)
    log_context = {"company": company.slug, "entry_date": entry_date.isoformat(), "reference": reference}

    try:
        normalized = _normalize_lines(lines or [])
        if not normalized:
            raise EmptyEntry("Journal entry must have at least one line.")

        accounts = _resolve_accounts(company, {line["account_code"] for line in normalized})
        legal_entity = _resolve_legal_entity(company, legal_entity_id)

        try:
            entry = _commit_entry(
                company,
                entry_date,
                description,
                reference,
                legal_entity,
                normalized,
                accounts,
            )
        except IntegrityError as exc:
            raise NumberConflict("Entry number already taken; retry the post.") from exc
    except PostingError as exc:
        metrics.posting_rejected.labels(code=exc.code).inc()
        logger.info("Journal entry rejected", extra={**log_context, "code": exc.code, "reason": exc.message})
        return CommandResult.fail(exc.message, code=exc.code)

    metrics.entries_posted.labels(numbering=entry.numbering_mode).inc()
    logger.info(
        "Journal entry posted",
        extra={**log_context, "entry_number": entry.entry_number, "lines": len(normalized)},
    )
    return CommandResult.ok(entry.entry_number, entry=entry)


# =============================================================================
# Fiscal Period Commands
# =============================================================================

def _period_dates(fiscal_year: int, start_month: int, period: int) -> tuple[date, date]:
    month_index = (start_month - 1) + (period - 1)
    year = fiscal_year + (month_index // 12)
    month = (month_index % 12) + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


@transaction.atomic
def create_fiscal_period(company, name: str, start_date, end_date) -> CommandResult:
    """
    Create an OPEN fiscal period.

    Periods of one company may not overlap.
    """
    start_date = as_date(start_date)
    end_date = as_date(end_date)
    if start_date > end_date:
        return CommandResult.fail("Period start must not be after its end.", code="invalid_range")
    if overlapping_periods(company, start_date, end_date).exists():
        return CommandResult.fail("Period overlaps an existing fiscal period.", code="overlap")

    with period_writes_allowed():
        fiscal_period = FiscalPeriod.objects.create(
            company=company,
            name=name,
            start_date=start_date,
            end_date=end_date,
            status=FiscalPeriod.Status.OPEN,
        )
    logger.info(
        "Fiscal period created",
        extra={"company": company.slug, "period": name, "start": start_date.isoformat(), "end": end_date.isoformat()},
    )
    return CommandResult.ok(fiscal_period)


@transaction.atomic
def configure_fiscal_year(company, fiscal_year: int) -> CommandResult:
    """
    Create twelve monthly periods for a fiscal year.

    The year starts at the company's fiscal_year_start_month. Months that
    already overlap an existing period are skipped.
    """
    created = []
    for period in range(1, 13):
        start_date, end_date = _period_dates(fiscal_year, company.fiscal_year_start_month, period)
        if overlapping_periods(company, start_date, end_date).exists():
            continue
        with period_writes_allowed():
            created.append(FiscalPeriod.objects.create(
                company=company,
                name=f"{fiscal_year}/{period:02d}",
                start_date=start_date,
                end_date=end_date,
                status=FiscalPeriod.Status.OPEN,
            ))
    return CommandResult.ok(created)


def _set_period_status(company, period_id: int, status: str) -> FiscalPeriod:
    try:
        fiscal_period = FiscalPeriod.objects.select_for_update().get(pk=period_id, company=company)
    except FiscalPeriod.DoesNotExist:
        raise PeriodError("Fiscal period not found.")

    if fiscal_period.status == status:
        raise PeriodError(f"Fiscal period is already {status.lower()}.")

    fiscal_period.status = status
    fiscal_period.closed_at = timezone.now() if status == FiscalPeriod.Status.CLOSED else None
    with period_writes_allowed():
        fiscal_period.save(update_fields=["status", "closed_at"])
    return fiscal_period


@transaction.atomic
def close_period(company, period_id: int) -> CommandResult:
    """
    Close a fiscal period.

    Waits for the period row lock, so postings already holding it commit
    first; postings that arrive later see CLOSED.
    """
    try:
        fiscal_period = _set_period_status(company, period_id, FiscalPeriod.Status.CLOSED)
    except PeriodError as exc:
        return CommandResult.fail(str(exc), code="period_state")
    logger.info("Fiscal period closed", extra={"company": company.slug, "period": fiscal_period.name})
    return CommandResult.ok(fiscal_period)


@transaction.atomic
def open_period(company, period_id: int) -> CommandResult:
    """Reopen a closed fiscal period."""
    try:
        fiscal_period = _set_period_status(company, period_id, FiscalPeriod.Status.OPEN)
    except PeriodError as exc:
        return CommandResult.fail(str(exc), code="period_state")
    logger.info("Fiscal period reopened", extra={"company": company.slug, "period": fiscal_period.name})
    return CommandResult.ok(fiscal_period)
