# tax/serializers.py
"""Serializers for the tax calculation API."""

from rest_framework import serializers


class LineInputSerializer(serializers.Serializer):
    quantity = serializers.DecimalField(max_digits=18, decimal_places=4)
    unit_price = serializers.DecimalField(max_digits=18, decimal_places=4)
    tax_rate = serializers.DecimalField(max_digits=7, decimal_places=4)
    code = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")
    fee_value = serializers.DecimalField(max_digits=18, decimal_places=4, required=False, default=0)


class DocumentInputSerializer(serializers.Serializer):
    lines = LineInputSerializer(many=True)


class LineAmountsSerializer(serializers.Serializer):
    line_total = serializers.DecimalField(max_digits=18, decimal_places=2)
    tax_amount = serializers.DecimalField(max_digits=18, decimal_places=2)
    total_with_tax = serializers.DecimalField(max_digits=18, decimal_places=2)
    non_deductible = serializers.DecimalField(max_digits=18, decimal_places=2)


class VatReturnInputSerializer(serializers.Serializer):
    output_lines = LineInputSerializer(many=True, required=False, default=list)
    input_lines = LineInputSerializer(many=True, required=False, default=list)


def _money():
    return serializers.DecimalField(max_digits=18, decimal_places=2)


class FieldTotalsSerializer(serializers.Serializer):
    code = serializers.CharField()
    base_standard = _money()
    vat_standard = _money()
    base_reduced = _money()
    vat_reduced = _money()
    base = _money()
    vat = _money()
    total_with_vat = _money()
    non_deductible = _money()
    fee_value = _money()
    line_count = serializers.IntegerField()


class Section5Serializer(serializers.Serializer):
    taxable_base = _money()
    special_base = _money()
    special_vat = _money()
    output_vat = _money()


class Section8eSerializer(serializers.Serializer):
    vat_8a = _money()
    vat_8b = _money()
    vat_8g = _money()
    import_vat = _money()
    farmer_compensation = _money()
    input_vat = _money()
    non_deductible = _money()
    deductible = _money()
    correction_increase = _money()
    correction_decrease = _money()
    total_deductible = _money()


class VatReturnSerializer(serializers.Serializer):
    output_fields = FieldTotalsSerializer(many=True)
    input_fields = FieldTotalsSerializer(many=True)
    reverse_charge = FieldTotalsSerializer(many=True)
    section5 = Section5Serializer()
    section8e = Section8eSerializer()
    section10 = _money()
    payable = _money()
    refundable = _money()
