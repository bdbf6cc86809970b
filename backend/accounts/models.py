import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class Company(models.Model):
    """
    Tenant. Every ledger row, period and sequence belongs to exactly one
    company.
    """

    public_id = models.UUIDField(default=uuid.uuid4, editable=False, unique=True)
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=100, unique=True)
    default_currency = models.CharField(max_length=3, default="RSD")
    fiscal_year_start_month = models.PositiveSmallIntegerField(default=1)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Company")
        verbose_name_plural = _("Companies")
        ordering = ["name"]

    def __str__(self):
        return self.name


class LegalEntity(models.Model):
    """Legal entity within a company; optional scope of a journal entry."""

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="legal_entities",
    )
    public_id = models.UUIDField(default=uuid.uuid4, editable=False, unique=True)
    name = models.CharField(max_length=255)
    tax_id = models.CharField(max_length=20, blank=True, default="")
    is_active = models.BooleanField(default=True)

    class Meta:
        verbose_name = _("Legal entity")
        verbose_name_plural = _("Legal entities")
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.company_id})"
