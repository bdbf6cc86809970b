# accounting/__init__.py
"""
Accounting app - the journal-entry ledger for Ledgerline.

This app provides:
- Account: Chart of Accounts (reference data)
- FiscalPeriod: Open/closed posting windows
- JournalEntry / JournalLine: Posted double-entry records
- CompanySequence / NumberingSettings: Entry numbering

Commands (accounting.commands) perform all ledger writes.
"""
