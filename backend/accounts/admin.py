from django.contrib import admin

from .models import Company, LegalEntity


class LegalEntityInline(admin.TabularInline):
    model = LegalEntity
    extra = 0
    fields = ("name", "tax_id", "is_active")


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "default_currency", "is_active")
    search_fields = ("name", "slug")
    readonly_fields = ("public_id", "created_at")
    inlines = [LegalEntityInline]
