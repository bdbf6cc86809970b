# accounting/management/commands/configure_fiscal_year.py
"""
Management command to create the monthly fiscal periods of a year.

Usage:
    # One company
    python manage.py configure_fiscal_year 2026 --tenant acme

    # Every active company
    python manage.py configure_fiscal_year 2026 --all-tenants
"""

from django.core.management.base import BaseCommand, CommandError

from accounts.models import Company
from accounting.commands import configure_fiscal_year


class Command(BaseCommand):
    """Create twelve monthly fiscal periods per company."""

    help = "Create the monthly fiscal periods of a fiscal year"

    def add_arguments(self, parser):
        parser.add_argument("fiscal_year", type=int)
        parser.add_argument(
            "--tenant",
            type=str,
            help="Company slug",
        )
        parser.add_argument(
            "--all-tenants",
            action="store_true",
            help="Configure every active company",
        )

    def handle(self, *args, **options):
        if options["all_tenants"]:
            companies = list(Company.objects.filter(is_active=True))
        elif options["tenant"]:
            companies = list(Company.objects.filter(slug=options["tenant"], is_active=True))
            if not companies:
                raise CommandError(f"Company '{options['tenant']}' not found.")
        else:
            raise CommandError("Pass --tenant <slug> or --all-tenants.")

        for company in companies:
            result = configure_fiscal_year(company, options["fiscal_year"])
            self.stdout.write(
                self.style.SUCCESS(f"{company.slug}: {len(result.data)} period(s) created")
            )
