# tax/views.py
"""
Tax calculation endpoints.

Stateless: nothing is persisted, the request carries every input.
"""

from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .calculator import calc_line, classify, document_totals, reverse_charge_output_code
from .serializers import (
    DocumentInputSerializer,
    LineAmountsSerializer,
    LineInputSerializer,
    VatReturnInputSerializer,
    VatReturnSerializer,
)
from .vat_return import ReturnLine, vat_return


class CalcLineView(APIView):
    """
    POST /api/tax/calc-line/

    Body: quantity, unit_price, tax_rate, code, fee_value
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = LineInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        amounts = calc_line(
            data["quantity"],
            data["unit_price"],
            data["tax_rate"],
            data["code"],
            data["fee_value"],
        )
        payload = LineAmountsSerializer(amounts).data
        payload["treatment"] = classify(data["code"]).value
        payload["reverse_charge_output_code"] = reverse_charge_output_code(data["code"])
        return Response(payload)


class DocumentTotalsView(APIView):
    """POST /api/tax/document-totals/ -> totals over `lines`, rounded once."""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = DocumentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        totals = document_totals(serializer.validated_data["lines"])
        return Response(LineAmountsSerializer(totals).data)


class VatReturnView(APIView):
    """
    POST /api/tax/vat-return/

    Body: output_lines (sales), input_lines (purchases); each line as for
    calc-line. Returns per-field totals, mirrored reverse-charge output and
    the section 5, 8e and 10 totals.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = VatReturnInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = vat_return(
            [ReturnLine.calculate(**line) for line in data["output_lines"]],
            [ReturnLine.calculate(**line) for line in data["input_lines"]],
        )
        return Response(VatReturnSerializer(result).data)
