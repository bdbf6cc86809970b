# accounting/exceptions.py
"""
Validation errors raised by the posting path.

They are raised inside the posting transaction so that the whole unit rolls
back, then converted into CommandResult.fail() at the command boundary.
Each carries a stable `code` that views return alongside the message.
"""


class PostingError(Exception):
    code = "posting_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class EmptyEntry(PostingError):
    code = "empty_entry"


class AccountNotFound(PostingError):
    code = "account_not_found"

    def __init__(self, codes):
        self.codes = sorted(codes)
        super().__init__(f"Account code(s) not found or inactive: {', '.join(self.codes)}")


class LegalEntityNotFound(PostingError):
    code = "legal_entity_not_found"


class UnbalancedEntry(PostingError):
    code = "unbalanced"

    def __init__(self, total_debit, total_credit):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(
            f"Entry is not balanced. Debit={total_debit} Credit={total_credit}"
        )


class PeriodMissing(PostingError):
    code = "period_missing"


class PeriodClosed(PostingError):
    code = "period_closed"


class NumberConflict(PostingError):
    """Another writer committed the same entry number first."""
    code = "number_conflict"


class PeriodError(Exception):
    """Rejected period administration (overlap, no-op transition, ...)."""
