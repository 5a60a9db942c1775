"""
Management command expiring overdue unmask requests.

Runs one sweep and exits; scheduling is left to the host (cron, systemd timer).
"""

from django.core.management.base import BaseCommand

from personnel_guard.db.transactions import TransactionEngine
from personnel_guard.security.unmask import UnmaskService


class Command(BaseCommand):
    help = "Mark pending unmask requests whose code or approval window elapsed as expired."

    def add_arguments(self, parser):
        parser.add_argument(
            "--database",
            default="default",
            help="Database alias holding unmask requests (default: 'default')",
        )

    def handle(self, *args, **options):
        service = UnmaskService(engine=TransactionEngine(options["database"]))
        count = service.expire_stale()
        self.stdout.write(self.style.SUCCESS(f"Expired {count} unmask request(s)"))
