# tests/test_api.py
"""
Tests for the HTTP API.

Views are thin: these tests check status codes, payload shapes and that
failures from the command layer surface as 400 with `detail` and `code`.
"""

from datetime import date
from uuid import uuid4

import pytest
from django.urls import reverse

from accounts import tenancy
from accounting.commands import close_period, post_entry
from accounting.models import JournalEntry


def _entries_url(company):
    return reverse("accounting:journal-entry-list-create", kwargs={"company_public_id": company.public_id})


def _payload(**overrides):
    payload = {
        "entry_date": "2026-01-15",
        "description": "Cash sale",
        "reference": "INV-1",
        "lines": [
            {"account_code": "1000", "debit": "1200.00"},
            {"account_code": "4000", "credit": "1200.00"},
        ],
    }
    payload.update(overrides)
    return payload


# =============================================================================
# Journal entries
# =============================================================================

@pytest.mark.django_db
class TestJournalEntryAPI:

    def test_requires_authentication(self, api_client, company):
        response = api_client.get(_entries_url(company))

        assert response.status_code == 401

    def test_post_entry(self, authenticated_client, company, accounts, january_period):
        response = authenticated_client.post(_entries_url(company), _payload(), format="json")

        assert response.status_code == 201, response.data
        assert response.data["entry_number"] == "JE-2026-000001"
        entry = JournalEntry.objects.get(public_id=response.data["public_id"])
        assert entry.lines.count() == 2

    def test_unbalanced_returns_code(self, authenticated_client, company, accounts, january_period):
        payload = _payload(lines=[
            {"account_code": "1000", "debit": "100.00"},
            {"account_code": "4000", "credit": "90.00"},
        ])

        response = authenticated_client.post(_entries_url(company), payload, format="json")

        assert response.status_code == 400
        assert response.data["code"] == "unbalanced"
        assert "not balanced" in response.data["detail"]

    def test_empty_lines_returns_code(self, authenticated_client, company, accounts, january_period):
        response = authenticated_client.post(_entries_url(company), _payload(lines=[]), format="json")

        assert response.status_code == 400
        assert response.data["code"] == "empty_entry"

    def test_closed_period_returns_code(self, authenticated_client, company, accounts, january_period):
        close_period(company, january_period.id)

        response = authenticated_client.post(_entries_url(company), _payload(), format="json")

        assert response.status_code == 400
        assert response.data["code"] == "period_closed"

    def test_malformed_payload_rejected_by_serializer(self, authenticated_client, company, accounts, january_period):
        payload = _payload(entry_date="not-a-date")

        response = authenticated_client.post(_entries_url(company), payload, format="json")

        assert response.status_code == 400
        assert "entry_date" in response.data
        assert JournalEntry.objects.count() == 0

    def test_unknown_company_is_404(self, authenticated_client):
        url = reverse("accounting:journal-entry-list-create", kwargs={"company_public_id": uuid4()})

        response = authenticated_client.get(url)

        assert response.status_code == 404

    def test_list_and_detail(self, authenticated_client, company, accounts, january_period, sale_lines):
        posted = post_entry(company, entry_date=date(2026, 1, 15), reference="INV-9", lines=sale_lines)

        listing = authenticated_client.get(_entries_url(company))
        assert listing.status_code == 200
        assert [row["entry_number"] for row in listing.data] == [posted.data]

        url = reverse(
            "accounting:journal-entry-detail",
            kwargs={"company_public_id": company.public_id, "public_id": posted.entry.public_id},
        )
        detail = authenticated_client.get(url)

        assert detail.status_code == 200
        assert detail.data["reference"] == "INV-9"
        assert detail.data["fiscal_period"] == "2026/01"
        assert [line["account_code"] for line in detail.data["lines"]] == ["1000", "4000"]
        assert detail.data["total_debit"] == "1200.00"

    def test_access_check_denies_company(
        self, settings, monkeypatch, authenticated_client, user, company, second_company, accounts, january_period
    ):
        allowed = {company.pk}
        settings.LEDGER_COMPANY_ACCESS_CHECK = "tenants.only_allowed"
        monkeypatch.setattr(tenancy, "import_string", lambda path: lambda u, c: u == user and c.pk in allowed)

        denied = authenticated_client.post(_entries_url(second_company), _payload(), format="json")
        granted = authenticated_client.post(_entries_url(company), _payload(), format="json")

        assert denied.status_code == 403
        assert granted.status_code == 201
        assert JournalEntry.objects.filter(company=second_company).count() == 0

    def test_no_access_check_by_default(self, settings, authenticated_client, second_company):
        settings.LEDGER_COMPANY_ACCESS_CHECK = ""

        response = authenticated_client.get(_entries_url(second_company))

        assert response.status_code == 200

    def test_entries_are_scoped_to_company(
        self, authenticated_client, company, second_company, accounts, january_period, sale_lines
    ):
        post_entry(company, entry_date=date(2026, 1, 15), lines=sale_lines)

        response = authenticated_client.get(_entries_url(second_company))

        assert response.status_code == 200
        assert response.data == []


# =============================================================================
# Fiscal periods
# =============================================================================

@pytest.mark.django_db
class TestFiscalPeriodAPI:

    def test_list_periods(self, authenticated_client, company, january_period, february_period):
        url = reverse("accounting:fiscal-period-list", kwargs={"company_public_id": company.public_id})

        response = authenticated_client.get(url)

        assert response.status_code == 200
        assert [row["name"] for row in response.data] == ["2026/01", "2026/02"]

    def test_close_and_reopen(self, authenticated_client, company, january_period):
        kwargs = {"company_public_id": company.public_id, "pk": january_period.id}

        closed = authenticated_client.post(reverse("accounting:fiscal-period-close", kwargs=kwargs))
        again = authenticated_client.post(reverse("accounting:fiscal-period-close", kwargs=kwargs))
        reopened = authenticated_client.post(reverse("accounting:fiscal-period-open", kwargs=kwargs))

        assert closed.status_code == 200
        assert closed.data["status"] == "CLOSED"
        assert again.status_code == 400
        assert again.data["code"] == "period_state"
        assert reopened.data["status"] == "OPEN"


# =============================================================================
# Tax and limits
# =============================================================================

@pytest.mark.django_db
class TestCalculationAPI:

    def test_calc_line_standard(self, authenticated_client):
        response = authenticated_client.post(
            reverse("tax:calc-line"),
            {"quantity": "2", "unit_price": "100", "tax_rate": "20", "code": "3.2"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["line_total"] == "200.00"
        assert response.data["tax_amount"] == "40.00"
        assert response.data["total_with_tax"] == "240.00"
        assert response.data["treatment"] == "STANDARD"
        assert response.data["reverse_charge_output_code"] is None

    def test_calc_line_reverse_charge(self, authenticated_client):
        response = authenticated_client.post(
            reverse("tax:calc-line"),
            {"quantity": "1", "unit_price": "1000", "tax_rate": "20", "code": "8g.1"},
            format="json",
        )

        assert response.data["treatment"] == "REVERSE_CHARGE"
        assert response.data["reverse_charge_output_code"] == "3a.2"

    def test_document_totals(self, authenticated_client):
        lines = [
            {"quantity": "1", "unit_price": "0.333", "tax_rate": "20"},
            {"quantity": "1", "unit_price": "0.333", "tax_rate": "20"},
        ]

        response = authenticated_client.post(reverse("tax:document-totals"), {"lines": lines}, format="json")

        assert response.status_code == 200
        assert response.data["line_total"] == "0.67"

    def test_vat_return(self, authenticated_client):
        payload = {
            "output_lines": [{"quantity": "1", "unit_price": "1000", "tax_rate": "20", "code": "3.2"}],
            "input_lines": [{"quantity": "1", "unit_price": "500", "tax_rate": "20", "code": "8g.1"}],
        }

        response = authenticated_client.post(reverse("tax:vat-return"), payload, format="json")

        assert response.status_code == 200, response.data
        assert [row["code"] for row in response.data["reverse_charge"]] == ["3a.2"]
        assert response.data["section5"]["output_vat"] == "300.00"
        assert response.data["section8e"]["total_deductible"] == "100.00"
        assert response.data["section10"] == "200.00"
        assert response.data["payable"] == "200.00"

    def test_calc_line_requires_numbers(self, authenticated_client):
        response = authenticated_client.post(
            reverse("tax:calc-line"), {"quantity": "two", "unit_price": "1", "tax_rate": "20"}, format="json"
        )

        assert response.status_code == 400

    def test_limit_buckets(self, authenticated_client):
        payload = {
            "window": "calendar-year",
            "today": "2026-06-15",
            "sales": [
                {"id": "s1", "document_date": "2026-02-10", "amount": "4000000.00"},
                {"id": "s2", "document_date": "2026-02-11", "amount": "900000.00", "document_type": "proforma"},
            ],
            "summaries": [
                {
                    "id": "f1", "summary_date": "2026-03-01", "total_amount": "700000.00",
                    "domestic_amount": "500000.00", "book_entry_ids": ["b2"],
                },
            ],
            "book_entries": [
                {"id": "b1", "entry_date": "2026-04-01", "amount": "100000.00", "sales_document_id": "s1"},
                {"id": "b2", "entry_date": "2026-03-01", "amount": "700000.00"},
                {"id": "b3", "entry_date": "2026-05-01", "amount": "50000.00"},
            ],
        }

        response = authenticated_client.post(reverse("limits:buckets"), payload, format="json")

        assert response.status_code == 200, response.data
        buckets = response.data["buckets"]
        assert len(buckets) == 12
        assert buckets[1]["sales"] == "4000000.00"
        assert buckets[2]["fiscal"] == "700000.00"
        assert buckets[4]["book"] == "50000.00"
        assert buckets[-1]["cumulative"] == "4750000.00"
        assert response.data["status"]["level"] == "warning"
        assert response.data["status"]["remaining"] == "1250000.00"

    def test_limit_buckets_rejects_unknown_window(self, authenticated_client):
        response = authenticated_client.post(reverse("limits:buckets"), {"window": "weekly"}, format="json")

        assert response.status_code == 400


# =============================================================================
# Ops
# =============================================================================

@pytest.mark.django_db
class TestOpsEndpoints:

    def test_liveness(self, client):
        response = client.get("/_health/live")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    def test_readiness(self, client):
        response = client.get("/_health/ready")

        assert response.status_code == 200
        assert response.json()["database"]["status"] == "healthy"

    def test_metrics(self, client):
        response = client.get("/_metrics/")

        assert response.status_code == 200
        assert b"ledgerline_numbering_fallback_total" in response.content
