# accounting/numbering.py
"""
Entry number allocation.

One abstraction, two implementations:

- SerializedCounter: increments a CompanySequence row under
  select_for_update. Must run inside the posting transaction; the row lock
  is held until commit, and a rolled-back post rolls the increment back too,
  so numbers are unique and gapless per company and year.
- BestEffortCounter: start value + number of the company's entries dated in
  the same year. It can race (two writers may compute the same value); the
  (company, entry_number) unique constraint then rejects the second commit.
  Degraded mode only. The serialized counter never hands out a value below
  this one, so it resumes past any best-effort numbers.

allocate_entry_number() picks the serialized counter unless the
LEDGER_NUMBERING_MODE setting forces best-effort, and falls back when the
serialized counter fails with a database error.
"""

from dataclasses import dataclass
import logging

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction

from accounting.models import CompanySequence, JournalEntry, NumberingSettings
from ops import metrics

logger = logging.getLogger(__name__)

SERIALIZED = "serialized"
BEST_EFFORT = "best_effort"


@dataclass(frozen=True)
class AllocatedNumber:
    value: int
    entry_number: str
    mode: str


def numbering_settings_for(company) -> tuple[str, int]:
    """Return (prefix, start_value) for a company."""
    config = NumberingSettings.objects.filter(company=company).first()
    if config is None:
        return settings.LEDGER_DEFAULT_NUMBER_PREFIX, 1
    return config.prefix, config.start_value


def format_entry_number(prefix: str, year: int, value: int) -> str:
    return f"{prefix}{year}-{value:06d}"


class NumberAllocator:
    mode: str = ""

    def next_value(self, company, year: int, start_value: int) -> int:
        raise NotImplementedError

    def allocate(self, company, year: int) -> AllocatedNumber:
        prefix, start_value = numbering_settings_for(company)
        value = self.next_value(company, year, start_value)
        return AllocatedNumber(
            value=value,
            entry_number=format_entry_number(prefix, year, value),
            mode=self.mode,
        )


class SerializedCounter(NumberAllocator):
    mode = SERIALIZED

    @staticmethod
    def sequence_name(year: int) -> str:
        return f"journal_entry:{year}"

    def next_value(self, company, year: int, start_value: int) -> int:
        name = self.sequence_name(year)
        try:
            seq = CompanySequence.objects.select_for_update().get(company=company, name=name)
        except CompanySequence.DoesNotExist:
            try:
                with transaction.atomic():
                    seq = CompanySequence.objects.create(
                        company=company,
                        name=name,
                        next_value=BestEffortCounter().next_value(company, year, start_value),
                    )
            except IntegrityError:
                # Another writer created the row first; wait for its lock.
                seq = CompanySequence.objects.select_for_update().get(company=company, name=name)

        # Entries numbered by the best-effort counter never advanced the row.
        value = max(seq.next_value, BestEffortCounter().next_value(company, year, start_value))
        seq.next_value = value + 1
        seq.save(update_fields=["next_value", "updated_at"])
        return value


class BestEffortCounter(NumberAllocator):
    mode = BEST_EFFORT

    def next_value(self, company, year: int, start_value: int) -> int:
        existing = JournalEntry.objects.filter(company=company, entry_date__year=year).count()
        return start_value + existing


def allocate_entry_number(company, year: int) -> AllocatedNumber:
    """
    Allocate the next entry number for `company` in `year`.

    Must be called inside the posting transaction and a ledger write
    context.
    """
    mode = getattr(settings, "LEDGER_NUMBERING_MODE", SERIALIZED)
    if mode != BEST_EFFORT:
        try:
            with transaction.atomic():
                return SerializedCounter().allocate(company, year)
        except DatabaseError as exc:
            logger.warning(
                "Serialized entry counter unavailable, using best-effort numbering",
                extra={"company": company.slug, "year": year, "error": str(exc)},
            )
    else:
        logger.warning(
            "Best-effort entry numbering forced by LEDGER_NUMBERING_MODE",
            extra={"company": company.slug, "year": year},
        )

    metrics.numbering_fallback.inc()
    return BestEffortCounter().allocate(company, year)
