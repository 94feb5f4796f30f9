"""Management command to remove storage objects no record points at."""

import logging
from datetime import timedelta
from typing import Any, Final

from django.conf import settings
from django.core.files.storage import default_storage
from django.core.management.base import BaseCommand
from django.utils import timezone

from server.apps.files.models import File

_DEFAULT_BATCH_SIZE: Final = 1000
_DEFAULT_MIN_AGE_MINUTES: Final = 60

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Delete objects under files/ not referenced by an active file."""

    help = 'Delete orphaned objects from file storage'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without deleting',
        )
        parser.add_argument(
            '--batch-size',
            type=int,
            default=getattr(
                settings,
                'FILES_RECONCILE_BATCH_SIZE',
                _DEFAULT_BATCH_SIZE,
            ),
            help='Max objects to delete per run',
        )
        parser.add_argument(
            '--min-age',
            type=int,
            default=getattr(
                settings,
                'FILES_RECONCILE_MIN_AGE_MINUTES',
                _DEFAULT_MIN_AGE_MINUTES,
            ),
            help='Only consider objects older than this many minutes',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the reconcile command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        dry_run = options['dry_run']
        batch_size = options['batch_size']
        min_age = options['min_age']
        storage = default_storage

        # Uploads in flight have an object but no record yet
        modified_before = None
        if min_age > 0:
            modified_before = timezone.now() - timedelta(minutes=min_age)

        referenced_urls = set(
            File.objects.values_list('file_url', flat=True),
        )

        count = 0
        failed = 0

        for key in storage.list_keys(modified_before=modified_before):
            if count + failed >= batch_size:
                break
            if storage.get_url(key) in referenced_urls:
                continue

            if dry_run:
                self.stdout.write(f'Would delete: {key}')
                count += 1
                continue

            try:
                storage.delete(key)
                count += 1
                logger.info('Deleted orphaned storage object: %s', key)
            except Exception as exc:
                self.stderr.write(f'Failed to delete {key}: {exc}')
                logger.exception('Failed to delete orphaned object: %s', key)
                failed += 1

        if dry_run:
            self.stdout.write(
                self.style.SUCCESS(f'Would delete {count} orphaned objects'),
            )
        else:
            self.stdout.write(
                self.style.SUCCESS(
                    f'Deleted {count} orphaned objects, {failed} failed',
                ),
            )
