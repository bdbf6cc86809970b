# tax/vat_return.py
"""
VAT return (POPDV) aggregation over calculated document lines.

Sales lines feed the output side, purchase lines the input side. Lines are
grouped per field code; reverse-charge input fields are mirrored into their
section 3a output field, then the return's section totals are derived:

- 5.1  taxable base over sections 3 and 3a
- 5.2  special-procedure base (4.1.3, 4.2.3)
- 5.3  special-procedure VAT (4.1.4, 4.2.4)
- 5.7  total output VAT
- 8đ   input VAT from 8a, 8b, 8g, 6.4 and 7.3
- 9a.1 non-deductible input VAT over section 9
- 8e.1 8đ less 9a.1
- 8e.5 total deductible input VAT after corrections (8e.3, 8e.4)
- 10   5.7 less 8e.5; positive is payable, negative refundable

Amounts stay exact through the fold and are rounded when the return is
built.

Usage:
    from tax.vat_return import ReturnLine, vat_return

    result = vat_return(
        [ReturnLine.calculate("3.2", quantity=1, unit_price=1000, tax_rate=20)],
        [ReturnLine.calculate("8g.1", quantity=1, unit_price=500, tax_rate=20)],
    )
    result.section10  # Decimal("200.00")
"""

from dataclasses import dataclass, field, fields, replace
from decimal import Decimal

from .calculator import REVERSE_CHARGE_MAP, ZERO, LineAmounts, exact_line, round_money, to_decimal

STANDARD_RATE = Decimal("20")
REDUCED_RATE = Decimal("10")

SPECIAL_PROCEDURE_BASE_FIELDS = ("4.1.3", "4.2.3")
SPECIAL_PROCEDURE_VAT_FIELDS = ("4.1.4", "4.2.4")


@dataclass(frozen=True)
class ReturnLine:
    """One calculated document line tagged with its return field code."""
    code: str
    amounts: LineAmounts
    tax_rate: Decimal = ZERO
    fee_value: Decimal = ZERO

    @classmethod
    def calculate(cls, code, quantity, unit_price, tax_rate, fee_value=0) -> "ReturnLine":
        return cls(
            code=(code or "").strip(),
            amounts=exact_line(quantity, unit_price, tax_rate, code, fee_value),
            tax_rate=to_decimal(tax_rate),
            fee_value=to_decimal(fee_value),
        )


@dataclass(frozen=True)
class FieldTotals:
    code: str
    base_standard: Decimal = ZERO
    vat_standard: Decimal = ZERO
    base_reduced: Decimal = ZERO
    vat_reduced: Decimal = ZERO
    base: Decimal = ZERO
    vat: Decimal = ZERO
    total_with_vat: Decimal = ZERO
    non_deductible: Decimal = ZERO
    fee_value: Decimal = ZERO
    line_count: int = 0

    def add(self, line: ReturnLine) -> "FieldTotals":
        amounts = line.amounts
        changes = {
            "base": self.base + amounts.line_total,
            "vat": self.vat + amounts.tax_amount,
            "total_with_vat": self.total_with_vat + amounts.total_with_tax,
            "non_deductible": self.non_deductible + amounts.non_deductible,
            "fee_value": self.fee_value + line.fee_value,
            "line_count": self.line_count + 1,
        }
        if line.tax_rate == STANDARD_RATE:
            changes["base_standard"] = self.base_standard + amounts.line_total
            changes["vat_standard"] = self.vat_standard + amounts.tax_amount
        elif line.tax_rate == REDUCED_RATE:
            changes["base_reduced"] = self.base_reduced + amounts.line_total
            changes["vat_reduced"] = self.vat_reduced + amounts.tax_amount
        return replace(self, **changes)

    def quantized(self) -> "FieldTotals":
        return replace(self, **{
            f.name: round_money(getattr(self, f.name))
            for f in fields(self)
            if f.name not in ("code", "line_count")
        })


@dataclass(frozen=True)
class Section5:
    taxable_base: Decimal          # 5.1
    special_base: Decimal          # 5.2
    special_vat: Decimal           # 5.3
    output_vat: Decimal            # 5.7


@dataclass(frozen=True)
class Section8e:
    vat_8a: Decimal                # 8a.8
    vat_8b: Decimal                # 8b.6
    vat_8g: Decimal                # 8g.5
    import_vat: Decimal            # 6.4
    farmer_compensation: Decimal   # 7.3
    input_vat: Decimal             # 8đ
    non_deductible: Decimal        # 9a.1
    deductible: Decimal            # 8e.1
    correction_increase: Decimal   # 8e.3
    correction_decrease: Decimal   # 8e.4
    total_deductible: Decimal      # 8e.5


@dataclass(frozen=True)
class VatReturn:
    output_fields: list = field(default_factory=list)
    input_fields: list = field(default_factory=list)
    reverse_charge: list = field(default_factory=list)
    section5: Section5 = None
    section8e: Section8e = None
    section10: Decimal = ZERO

    @property
    def payable(self) -> Decimal:
        return self.section10 if self.section10 > 0 else ZERO

    @property
    def refundable(self) -> Decimal:
        return -self.section10 if self.section10 < 0 else ZERO


# =============================================================================
# Grouping
# =============================================================================

def group_by_field(lines) -> list[FieldTotals]:
    """Per-field totals sorted by code; lines without a code are skipped."""
    groups = {}
    for line in lines:
        if not line.code:
            continue
        groups[line.code] = groups.get(line.code, FieldTotals(line.code)).add(line)
    return [groups[code] for code in sorted(groups)]


def reverse_charge_output(input_groups) -> list[FieldTotals]:
    """Mirror reverse-charge input fields into their section 3a output field."""
    mirrored = []
    for group in input_groups:
        output_code = REVERSE_CHARGE_MAP.get(group.code)
        if output_code is None:
            continue
        mirrored.append(replace(group, code=output_code, non_deductible=ZERO, fee_value=ZERO))
    return mirrored


# =============================================================================
# Sections
# =============================================================================

def _sum(groups, prefix: str, attr: str) -> Decimal:
    return sum((getattr(g, attr) for g in groups if g.code.startswith(prefix)), ZERO)


def _get(groups, code: str, attr: str) -> Decimal:
    for group in groups:
        if group.code == code:
            return getattr(group, attr)
    return ZERO


def compute_section5(output_groups) -> Section5:
    special_base = sum((_get(output_groups, code, "base") for code in SPECIAL_PROCEDURE_BASE_FIELDS), ZERO)
    special_vat = sum((_get(output_groups, code, "vat") for code in SPECIAL_PROCEDURE_VAT_FIELDS), ZERO)
    return Section5(
        taxable_base=_sum(output_groups, "3", "base"),
        special_base=special_base,
        special_vat=special_vat,
        output_vat=_sum(output_groups, "3", "vat") + special_vat,
    )


def compute_section8e(input_groups, output_groups) -> Section8e:
    vat_8a = _sum(input_groups, "8a", "vat")
    vat_8b = _sum(input_groups, "8b", "vat")
    vat_8g = _sum(input_groups, "8g", "vat")
    import_vat = _get(input_groups, "6.4", "vat")
    farmer_compensation = _get(input_groups, "7.3", "vat")
    input_vat = vat_8a + vat_8b + vat_8g + import_vat + farmer_compensation
    non_deductible = _sum(input_groups, "9", "non_deductible")
    deductible = input_vat - non_deductible
    increase = _get(output_groups, "8e.3", "vat")
    decrease = _get(output_groups, "8e.4", "vat")
    return Section8e(
        vat_8a=vat_8a,
        vat_8b=vat_8b,
        vat_8g=vat_8g,
        import_vat=import_vat,
        farmer_compensation=farmer_compensation,
        input_vat=input_vat,
        non_deductible=non_deductible,
        deductible=deductible,
        correction_increase=increase,
        correction_decrease=decrease,
        total_deductible=deductible + increase - decrease,
    )


def _round_section(section):
    return replace(section, **{f.name: round_money(getattr(section, f.name)) for f in fields(section)})


def vat_return(output_lines, input_lines) -> VatReturn:
    """
    Fold sales (output) and purchase (input) ReturnLines into a VAT return.

    Reverse-charge output is derived from the input side and counted in
    section 5 alongside the sales lines.
    """
    output_groups = group_by_field(output_lines)
    input_groups = group_by_field(input_lines)
    reverse_charge = reverse_charge_output(input_groups)

    all_output = output_groups + reverse_charge
    section5 = compute_section5(all_output)
    section8e = compute_section8e(input_groups, all_output)

    return VatReturn(
        output_fields=[g.quantized() for g in output_groups],
        input_fields=[g.quantized() for g in input_groups],
        reverse_charge=[g.quantized() for g in reverse_charge],
        section5=_round_section(section5),
        section8e=_round_section(section8e),
        section10=round_money(section5.output_vat - section8e.total_deductible),
    )
