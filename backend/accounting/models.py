# accounting/models.py
"""
Ledger models for Ledgerline.

IMPORTANT: the ledger tables are written by the command layer only.
=================================================================
JournalEntry, JournalLine, CompanySequence and FiscalPeriod refuse
save/delete/bulk writes unless a write context from
accounting.write_barrier is active. accounting.commands is the only module
that enters those contexts, inside a single transaction.atomic() unit.

Models:
- Account: Chart of Accounts (reference data, looked up by code)
- FiscalPeriod: Date ranges that can be closed to block postings
- JournalEntry: Journal entry headers
- JournalLine: Journal entry lines
- CompanySequence: Per-company counters for gapless entry numbers
- NumberingSettings: Prefix/start value for the best-effort counter
"""

from decimal import Decimal
import uuid

from django.db import models
from django.db.models import Sum

from accounts.models import Company, LegalEntity
from accounting.write_barrier import LEDGER, PERIOD, assert_write_allowed


class LedgerWriteQuerySet(models.QuerySet):
    """
    QuerySet that enforces the write barrier on bulk operations.

    Bulk operations never call Model.save()/delete(), so they are checked
    here against the model's `write_contexts`.
    """

    def _guard(self, operation: str):
        assert_write_allowed(f"{self.model.__name__}.{operation}", self.model.write_contexts)

    def bulk_create(self, objs, *args, **kwargs):
        self._guard("bulk_create")
        return super().bulk_create(objs, *args, **kwargs)

    def bulk_update(self, objs, *args, **kwargs):
        self._guard("bulk_update")
        return super().bulk_update(objs, *args, **kwargs)

    def update(self, **kwargs):
        self._guard("update")
        return super().update(**kwargs)

    def delete(self):
        self._guard("delete")
        return super().delete()


class LedgerOwnedModel(models.Model):
    write_contexts: set[str] = {LEDGER}

    objects = LedgerWriteQuerySet.as_manager()

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        assert_write_allowed(self.__class__.__name__, self.write_contexts)
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        assert_write_allowed(self.__class__.__name__, self.write_contexts)
        return super().delete(*args, **kwargs)


class Account(models.Model):
    """
    Chart of Accounts entry.

    Reference data: the posting service only looks accounts up (by code,
    scoped to the company and the ACTIVE status) and never mutates them.
    """

    class Status(models.TextChoices):
        ACTIVE = "ACTIVE", "Active"
        INACTIVE = "INACTIVE", "Inactive"

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="accounts",
    )
    public_id = models.UUIDField(default=uuid.uuid4, editable=False, unique=True)
    code = models.CharField(max_length=20)
    name = models.CharField(max_length=255)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"],
                name="uniq_account_code_per_company",
            )
        ]
        ordering = ["code"]
        indexes = [
            models.Index(fields=["company", "status"], name="acct_company_status_idx"),
        ]

    def __str__(self):
        return f"{self.code} - {self.name}"

    @property
    def is_active(self) -> bool:
        return self.status == self.Status.ACTIVE


class FiscalPeriod(LedgerOwnedModel):
    """
    Administrative date range per company.

    An entry may only be posted with an entry date inside an OPEN period.
    The posting transaction locks the period row, so closing a period and
    posting into it are serialized.
    """

    write_contexts = {PERIOD}

    class Status(models.TextChoices):
        OPEN = "OPEN", "Open"
        CLOSED = "CLOSED", "Closed"

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="fiscal_periods",
    )
    name = models.CharField(max_length=100)
    start_date = models.DateField()
    end_date = models.DateField()
    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.OPEN,
    )
    closed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                check=models.Q(start_date__lte=models.F("end_date")),
                name="chk_fiscal_period_range",
            ),
        ]
        indexes = [
            models.Index(fields=["company", "start_date", "end_date"], name="period_company_range_idx"),
        ]
        ordering = ["start_date"]

    def __str__(self):
        return f"{self.name} {self.start_date}..{self.end_date} ({self.status})"

    @property
    def is_open(self) -> bool:
        return self.status == self.Status.OPEN

    def contains(self, target_date) -> bool:
        return self.start_date <= target_date <= self.end_date


class JournalEntry(LedgerOwnedModel):
    """
    Journal Entry header.

    Workflow: DRAFT -> POSTED. There is no edit-after-post path; corrections
    are made with new reversing entries.
    """

    class Status(models.TextChoices):
        DRAFT = "DRAFT", "Draft"
        POSTED = "POSTED", "Posted"

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="journal_entries",
    )
    public_id = models.UUIDField(default=uuid.uuid4, editable=False, unique=True)

    entry_number = models.CharField(
        max_length=50,
        help_text="Sequential number assigned at posting time",
    )
    entry_date = models.DateField()
    description = models.TextField(blank=True, default="")
    reference = models.CharField(max_length=100, blank=True, default="")

    legal_entity = models.ForeignKey(
        LegalEntity,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="journal_entries",
    )
    fiscal_period = models.ForeignKey(
        FiscalPeriod,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="journal_entries",
    )

    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.DRAFT,
    )
    posted_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["company", "entry_number"],
                name="uniq_entry_number_per_company",
            ),
        ]
        indexes = [
            models.Index(fields=["company", "entry_date"], name="je_company_date_idx"),
            models.Index(fields=["company", "status"], name="je_company_status_idx"),
        ]
        ordering = ["-entry_date", "-id"]
        verbose_name_plural = "journal entries"

    def __str__(self):
        return f"JE {self.entry_number} ({self.entry_date}) {self.status}"

    @property
    def total_debit(self) -> Decimal:
        return self.lines.aggregate(total=Sum("debit"))["total"] or Decimal("0.00")

    @property
    def total_credit(self) -> Decimal:
        return self.lines.aggregate(total=Sum("credit"))["total"] or Decimal("0.00")

    @property
    def is_balanced(self) -> bool:
        from accounting.policies import is_balanced

        return is_balanced(self.total_debit, self.total_credit)


class JournalLine(LedgerOwnedModel):
    """
    Individual line within a journal entry.

    Debit and credit are meant to be mutually exclusive, but a line carrying
    both is stored as given; the entry balance uses both columns.
    """

    entry = models.ForeignKey(
        JournalEntry,
        on_delete=models.CASCADE,
        related_name="lines",
    )
    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="journal_lines",
    )
    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="journal_lines",
    )
    description = models.CharField(max_length=255, blank=True, default="")
    debit = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal("0.00"))
    credit = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal("0.00"))
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["entry", "sort_order", "id"]
        indexes = [
            models.Index(fields=["company", "entry"], name="jl_company_entry_idx"),
            models.Index(fields=["company", "account"], name="jl_company_account_idx"),
        ]

    def __str__(self):
        return f"JE#{self.entry_id} L{self.sort_order}"


class CompanySequence(LedgerOwnedModel):
    """
    Per-company counters for sequential identifiers.

    Rows are locked with select_for_update for the duration of the posting
    transaction, which serializes number allocation per company/name.
    """

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="sequences",
    )
    name = models.CharField(max_length=100)
    next_value = models.BigIntegerField(default=1)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["company", "name"],
                name="uniq_company_sequence_name",
            ),
        ]

    def __str__(self):
        return f"{self.company_id}:{self.name}={self.next_value}"


class NumberingSettings(models.Model):
    """Entry-number prefix and first value, per company."""

    company = models.OneToOneField(
        Company,
        on_delete=models.CASCADE,
        related_name="numbering_settings",
    )
    prefix = models.CharField(max_length=20, default="JE-")
    start_value = models.PositiveIntegerField(default=1)

    class Meta:
        verbose_name_plural = "numbering settings"

    def __str__(self):
        return f"{self.company_id}: {self.prefix}{self.start_value}"
