# accounts/__init__.py
"""
Accounts app - tenant reference data for Ledgerline.

This app provides:
- Company: Tenant/organization model
- LegalEntity: Optional legal-entity scope for journal entries
- resolve_company: Tenant lookup used by API views

Every ledger, tax and limits operation is scoped by a Company.
"""
