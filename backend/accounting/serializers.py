# accounting/serializers.py
"""
Serializers for the ledger API.

Input serializers only validate shape; the posting rules (balance, period,
account resolution) are enforced in commands.py.
"""

from rest_framework import serializers

from .models import FiscalPeriod, JournalEntry, JournalLine


class JournalLineSerializer(serializers.ModelSerializer):
    """Serializer for individual journal lines."""
    account_code = serializers.CharField(source="account.code", read_only=True)
    account_name = serializers.CharField(source="account.name", read_only=True)

    class Meta:
        model = JournalLine
        fields = [
            "sort_order", "account_code", "account_name",
            "description", "debit", "credit",
        ]
        read_only_fields = fields


class JournalEntrySerializer(serializers.ModelSerializer):
    """
    Full journal entry serializer with nested lines.
    Used for retrieval and display.
    """
    lines = JournalLineSerializer(many=True, read_only=True)
    legal_entity = serializers.UUIDField(source="legal_entity.public_id", read_only=True, allow_null=True)
    fiscal_period = serializers.CharField(source="fiscal_period.name", read_only=True, allow_null=True)
    total_debit = serializers.DecimalField(max_digits=18, decimal_places=2, read_only=True)
    total_credit = serializers.DecimalField(max_digits=18, decimal_places=2, read_only=True)

    class Meta:
        model = JournalEntry
        fields = [
            "public_id", "entry_number", "entry_date", "description", "reference",
            "legal_entity", "fiscal_period", "status", "posted_at", "created_at",
            "lines", "total_debit", "total_credit",
        ]
        read_only_fields = fields


class JournalEntryListSerializer(serializers.ModelSerializer):
    class Meta:
        model = JournalEntry
        fields = [
            "public_id", "entry_number", "entry_date", "description",
            "reference", "status", "posted_at",
        ]
        read_only_fields = fields


class JournalLineInputSerializer(serializers.Serializer):
    account_code = serializers.CharField(max_length=20)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    debit = serializers.DecimalField(max_digits=18, decimal_places=2, required=False, default=0)
    credit = serializers.DecimalField(max_digits=18, decimal_places=2, required=False, default=0)
    sort_order = serializers.IntegerField(required=False, min_value=0)


class JournalEntryInputSerializer(serializers.Serializer):
    """
    Posting request.

    An empty `lines` list passes here and is rejected by the command with
    code empty_entry.
    """
    entry_date = serializers.DateField()
    description = serializers.CharField(required=False, allow_blank=True, default="")
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    legal_entity_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    lines = JournalLineInputSerializer(many=True, allow_empty=True)


class FiscalPeriodSerializer(serializers.ModelSerializer):
    class Meta:
        model = FiscalPeriod
        fields = ["id", "name", "start_date", "end_date", "status", "closed_at"]
        read_only_fields = fields
