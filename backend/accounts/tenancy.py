# accounts/tenancy.py
"""
Tenant resolution for API views.

Views receive the company's public id in the URL and resolve it here;
inactive companies are treated as missing.

Membership is not modelled in this service: any authenticated user may
address any active company. Deployments that front several tenants set
LEDGER_COMPANY_ACCESS_CHECK to the dotted path of a callable
`check(user, company) -> bool`; a False result is a 403.
"""

from django.conf import settings
from django.core.exceptions import PermissionDenied
from django.shortcuts import get_object_or_404
from django.utils.module_loading import import_string

from accounts.models import Company


def check_company_access(user, company) -> None:
    """Raise PermissionDenied unless the configured access check allows it."""
    check_path = getattr(settings, "LEDGER_COMPANY_ACCESS_CHECK", "")
    if not check_path:
        return
    if not import_string(check_path)(user, company):
        raise PermissionDenied("You do not have access to this company.")


def resolve_company(company_public_id, user=None) -> Company:
    """Return the active company for a public id, or raise Http404."""
    company = get_object_or_404(Company, public_id=company_public_id, is_active=True)
    if user is not None:
        check_company_access(user, company)
    return company
