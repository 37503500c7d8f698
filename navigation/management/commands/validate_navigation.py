# navigation/management/commands/validate_navigation.py
import json

from django.core.management.base import BaseCommand, CommandError

from navigation.catalog import NAVIGATION_VERSION, get_all_navigation_groups
from navigation.roles import get_all_roles, get_role_display_name
from navigation.resolver import validate_navigation_config
from navigation.services import get_navigation_for_role
from navigation.utils import get_navigation_stats


class Command(BaseCommand):
    help = 'Validate the role registry against the navigation catalog'

    def add_arguments(self, parser):
        parser.add_argument(
            '--stats',
            action='store_true',
            help='Print per-role navigation statistics',
        )
        parser.add_argument(
            '--json',
            action='store_true',
            help='Print the validation result as JSON',
        )
        parser.add_argument(
            '--fail-on-warnings',
            action='store_true',
            help='Treat warnings as errors',
        )

    def handle(self, *args, **options):
        result = validate_navigation_config()

        if options['json']:
            self.stdout.write(json.dumps(result.to_dict(), indent=2))
        else:
            self.stdout.write(f"Navigation catalog version {NAVIGATION_VERSION}")
            for error in result.errors:
                self.stdout.write(self.style.ERROR(f"  ERROR: {error}"))
            for warning in result.warnings:
                self.stdout.write(self.style.WARNING(f"  WARNING: {warning}"))

            if options['stats']:
                groups = get_all_navigation_groups()
                for role in get_all_roles():
                    nav_map = get_navigation_for_role(role)
                    stats = get_navigation_stats(nav_map.items, nav_map.groups)
                    self.stdout.write(
                        f"  {get_role_display_name(role)}: {stats['total_items']} items, "
                        f"{stats['total_groups']}/{len(groups)} groups, "
                        f"{stats['permissions_count']} permissions"
                    )

        if not result.is_valid:
            raise CommandError(f"Navigation configuration has {len(result.errors)} error(s)")
        if options['fail_on_warnings'] and result.warnings:
            raise CommandError(f"Navigation configuration has {len(result.warnings)} warning(s)")

        if not options['json']:
            self.stdout.write(self.style.SUCCESS("Navigation configuration is valid"))
