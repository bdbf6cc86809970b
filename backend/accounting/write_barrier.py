# accounting/write_barrier.py
"""
Write contexts for the ledger tables.

The ledger (entries, lines, sequences, periods) is the only shared mutable
resource. Its models refuse writes unless the caller has entered the
matching context, so the only way in is through the command layer:

    with ledger_writes_allowed():
        ...  # posting path (accounting.commands.post_entry)

    with period_writes_allowed():
        ...  # period administration (accounting.commands.close_period, ...)
"""

from contextlib import contextmanager
import threading


_state = threading.local()

LEDGER = "ledger"
PERIOD = "period"


def _context_stack() -> list[str]:
    stack = getattr(_state, "write_context_stack", None)
    if stack is None:
        stack = []
        _state.write_context_stack = stack
    return stack


def current_write_context() -> str | None:
    stack = _context_stack()
    return stack[-1] if stack else None


def write_context_allowed(allowed_contexts: set[str]) -> bool:
    ctx = current_write_context()
    if ctx is None:
        return False
    return ctx in allowed_contexts


def assert_write_allowed(model_name: str, allowed_contexts: set[str]) -> None:
    if not write_context_allowed(allowed_contexts):
        raise RuntimeError(
            f"{model_name} is owned by the ledger command layer. "
            "Use accounting.commands to modify it."
        )


@contextmanager
def _push_write_context(name: str):
    stack = _context_stack()
    stack.append(name)
    try:
        yield
    finally:
        stack.pop()


@contextmanager
def ledger_writes_allowed():
    with _push_write_context(LEDGER):
        yield


@contextmanager
def period_writes_allowed():
    with _push_write_context(PERIOD):
        yield
