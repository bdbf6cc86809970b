# tax/calculator.py
"""
Per-line VAT amounts for sales and purchase document lines.

Classification codes are VAT-return (POPDV) field codes such as "3.2",
"8a.1", "8g.1" or "9.01". classify() maps a code onto one of a closed set of
treatments; FORMULAS maps each treatment onto the function that computes the
line. Unknown codes are STANDARD.

Everything here is pure Decimal arithmetic. Intermediate values are kept
exact and rounded once (ROUND_HALF_UP to 0.01) when a result is returned.

Usage:
    from tax.calculator import calc_line

    amounts = calc_line(quantity=2, unit_price="100", tax_rate=20, code="3.2")
    amounts.total_with_tax  # Decimal("240.00")
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.db import models

MONEY_Q = Decimal("0.01")
HUNDRED = Decimal("100")
ZERO = Decimal("0")


class TaxTreatment(models.TextChoices):
    STANDARD = "STANDARD", "Standard"
    REVERSE_CHARGE = "REVERSE_CHARGE", "Reverse charge"
    ZERO_RATED = "ZERO_RATED", "Zero-rated"
    EXEMPT = "EXEMPT", "Exempt"
    FEE_BASED = "FEE_BASED", "Fee-based"
    NON_DEDUCTIBLE = "NON_DEDUCTIBLE", "Non-deductible"


# Input field -> output field that the self-assessed VAT is reported in.
REVERSE_CHARGE_MAP = {
    "8g.1": "3a.2",
    "8g.2": "3a.4",
    "8g.3": "3a.5",
    "8g.4": "3a.6",
    "8b.1": "3a.1",
    "8b.2": "3a.2",
    "8b.3": "3a.4",
    "8b.4": "3a.5",
    "8b.5": "3a.6",
}

SECTION_TREATMENTS = {
    "1": TaxTreatment.ZERO_RATED,
    "2": TaxTreatment.EXEMPT,
    "4": TaxTreatment.FEE_BASED,
    "9": TaxTreatment.NON_DEDUCTIBLE,
}


@dataclass(frozen=True)
class LineAmounts:
    line_total: Decimal
    tax_amount: Decimal
    total_with_tax: Decimal
    non_deductible: Decimal = ZERO

    def quantized(self) -> "LineAmounts":
        return LineAmounts(
            line_total=round_money(self.line_total),
            tax_amount=round_money(self.tax_amount),
            total_with_tax=round_money(self.total_with_tax),
            non_deductible=round_money(self.non_deductible),
        )

    def __add__(self, other: "LineAmounts") -> "LineAmounts":
        return LineAmounts(
            line_total=self.line_total + other.line_total,
            tax_amount=self.tax_amount + other.tax_amount,
            total_with_tax=self.total_with_tax + other.total_with_tax,
            non_deductible=self.non_deductible + other.non_deductible,
        )


def to_decimal(value) -> Decimal:
    """Decimal from int/str/Decimal/float; floats go through str()."""
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_Q, rounding=ROUND_HALF_UP)


def section(code: str) -> str:
    """Leading section of a field code: "8g.1" -> "8g", "9.01" -> "9"."""
    return (code or "").strip().split(".")[0]


def classify(code: str) -> TaxTreatment:
    code = (code or "").strip()
    if code in REVERSE_CHARGE_MAP:
        return TaxTreatment.REVERSE_CHARGE
    return SECTION_TREATMENTS.get(section(code), TaxTreatment.STANDARD)


def reverse_charge_output_code(code: str):
    """Output field for a reverse-charge input field, or None."""
    return REVERSE_CHARGE_MAP.get((code or "").strip())


# =============================================================================
# Formulas
# =============================================================================

def _standard(quantity, unit_price, tax_rate, fee_value) -> LineAmounts:
    line_total = quantity * unit_price
    tax_amount = line_total * tax_rate / HUNDRED
    return LineAmounts(line_total, tax_amount, line_total + tax_amount)


def _fee_based(quantity, unit_price, tax_rate, fee_value) -> LineAmounts:
    line_total = quantity * unit_price
    tax_amount = fee_value * tax_rate / HUNDRED
    return LineAmounts(line_total, tax_amount, line_total + tax_amount)


def _non_deductible(quantity, unit_price, tax_rate, fee_value) -> LineAmounts:
    line_total = quantity * unit_price
    non_deductible = line_total * tax_rate / HUNDRED
    return LineAmounts(line_total, ZERO, line_total + non_deductible, non_deductible)


FORMULAS = {
    TaxTreatment.STANDARD: _standard,
    TaxTreatment.REVERSE_CHARGE: _standard,
    TaxTreatment.ZERO_RATED: _standard,
    TaxTreatment.EXEMPT: _standard,
    TaxTreatment.FEE_BASED: _fee_based,
    TaxTreatment.NON_DEDUCTIBLE: _non_deductible,
}


def exact_line(quantity, unit_price, tax_rate, code, fee_value=0) -> LineAmounts:
    """Unrounded line amounts, for callers that aggregate before rounding."""
    formula = FORMULAS.get(classify(code), _standard)
    return formula(
        to_decimal(quantity),
        to_decimal(unit_price),
        to_decimal(tax_rate),
        to_decimal(fee_value),
    )


def calc_line(quantity, unit_price, tax_rate, code: str = "", fee_value=0) -> LineAmounts:
    """
    Compute line total, tax, total with tax and non-deductible VAT.

    Sign is not checked; rejecting negative quantities or prices is up to
    the caller.
    """
    return exact_line(quantity, unit_price, tax_rate, code, fee_value).quantized()


def document_totals(lines) -> LineAmounts:
    """
    Totals over line dicts (quantity, unit_price, tax_rate, code, fee_value).

    Line values are summed unrounded and the sums rounded once.
    """
    total = LineAmounts(ZERO, ZERO, ZERO, ZERO)
    for line in lines:
        total = total + exact_line(
            line.get("quantity", 0),
            line.get("unit_price", 0),
            line.get("tax_rate", 0),
            line.get("code", ""),
            line.get("fee_value", 0),
        )
    return total.quantized()
