# tax/urls.py
from django.urls import path

from .views import CalcLineView, DocumentTotalsView, VatReturnView

app_name = "tax"

urlpatterns = [
    path("calc-line/", CalcLineView.as_view(), name="calc-line"),
    path("document-totals/", DocumentTotalsView.as_view(), name="document-totals"),
    path("vat-return/", VatReturnView.as_view(), name="vat-return"),
]
