"""
Management command installing the default field access policies.
"""

import logging

from django.core.management.base import BaseCommand

from personnel_guard.defaults import DEFAULT_FIELD_POLICIES
from personnel_guard.security.policies import PolicyStore

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Insert or update the default (role, field) access policies."

    def add_arguments(self, parser):
        parser.add_argument(
            "--database",
            default="default",
            help="Database alias to seed (default: 'default')",
        )
        parser.add_argument(
            "--role",
            action="append",
            dest="roles",
            help="Only seed policies for this role (repeatable)",
        )

    def handle(self, *args, **options):
        policies = DEFAULT_FIELD_POLICIES
        roles = options.get("roles")
        if roles:
            wanted = {role.strip().lower() for role in roles}
            policies = [policy for policy in policies if policy["role"] in wanted]

        created, updated = PolicyStore(options["database"]).upsert_policies(policies)
        logger.info("Seeded field policies: %s created, %s updated", created, updated)
        self.stdout.write(
            self.style.SUCCESS(f"Field policies seeded: {created} created, {updated} updated")
        )
