# limits/serializers.py
"""
Serializers for the limits API.

Input serializers build the engine's record types; output serializers
render buckets and the limit status.
"""

from rest_framework import serializers

from .engine import (
    BookEntry,
    Counterparty,
    DocumentType,
    FiscalDailySummary,
    LimitWindow,
    SalesDocument,
)


class SalesDocumentSerializer(serializers.Serializer):
    id = serializers.CharField()
    document_date = serializers.DateField()
    amount = serializers.DecimalField(max_digits=18, decimal_places=2)
    document_type = serializers.ChoiceField(choices=DocumentType.choices, default=DocumentType.INVOICE)
    counterparty = serializers.ChoiceField(choices=Counterparty.choices, default=Counterparty.DOMESTIC)

    def to_record(self, data) -> SalesDocument:
        return SalesDocument(**data)


class FiscalDailySummarySerializer(serializers.Serializer):
    id = serializers.CharField()
    summary_date = serializers.DateField()
    total_amount = serializers.DecimalField(max_digits=18, decimal_places=2)
    domestic_amount = serializers.DecimalField(max_digits=18, decimal_places=2)
    book_entry_ids = serializers.ListField(child=serializers.CharField(), required=False, default=list)

    def to_record(self, data) -> FiscalDailySummary:
        return FiscalDailySummary(**{**data, "book_entry_ids": frozenset(data.get("book_entry_ids", []))})


class BookEntrySerializer(serializers.Serializer):
    id = serializers.CharField()
    entry_date = serializers.DateField()
    amount = serializers.DecimalField(max_digits=18, decimal_places=2)
    sales_document_id = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)

    def to_record(self, data) -> BookEntry:
        return BookEntry(**data)


class BucketsRequestSerializer(serializers.Serializer):
    window = serializers.ChoiceField(choices=LimitWindow.choices)
    today = serializers.DateField(required=False)
    sales = SalesDocumentSerializer(many=True, required=False, default=list)
    summaries = FiscalDailySummarySerializer(many=True, required=False, default=list)
    book_entries = BookEntrySerializer(many=True, required=False, default=list)

    def records(self):
        data = self.validated_data
        return (
            [SalesDocumentSerializer().to_record(item) for item in data["sales"]],
            [FiscalDailySummarySerializer().to_record(item) for item in data["summaries"]],
            [BookEntrySerializer().to_record(item) for item in data["book_entries"]],
        )


class MonthlyBucketSerializer(serializers.Serializer):
    month = serializers.CharField()
    start = serializers.DateField()
    end = serializers.DateField()
    sales = serializers.DecimalField(max_digits=18, decimal_places=2)
    fiscal = serializers.DecimalField(max_digits=18, decimal_places=2)
    book = serializers.DecimalField(max_digits=18, decimal_places=2)
    total = serializers.DecimalField(max_digits=18, decimal_places=2)
    cumulative = serializers.DecimalField(max_digits=18, decimal_places=2)


class LimitStatusSerializer(serializers.Serializer):
    total = serializers.DecimalField(max_digits=18, decimal_places=2)
    limit = serializers.DecimalField(max_digits=18, decimal_places=2)
    percent = serializers.DecimalField(max_digits=9, decimal_places=2)
    remaining = serializers.DecimalField(max_digits=18, decimal_places=2)
    level = serializers.CharField()
