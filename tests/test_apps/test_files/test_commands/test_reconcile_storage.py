"""Tests for reconcile_storage management command."""

from io import StringIO

import pytest
from django.core.management import call_command

from server.apps.files.infrastructure.storage import (
    build_storage_key,
    build_updated_storage_key,
)


def _keys(mock_s3, bucket_name):
    return sorted(
        summary.key
        for summary in mock_s3.Bucket(bucket_name).objects.all()
    )


@pytest.mark.django_db
class TestReconcileStorageCommand:
    """Tests for reconcile_storage management command."""

    def test_deletes_orphans_only(
        self,
        file_service,
        storage,
        mock_s3,
        bucket_name,
        make_request,
    ):
        """Test unreferenced objects are deleted, referenced ones kept."""
        file_service.upload(make_request(name='kept.jpg'))
        storage.put(b'orphan', build_storage_key('orphan.jpg'), 'image/jpeg')

        out = StringIO()
        call_command('reconcile_storage', '--min-age=0', stdout=out)

        assert _keys(mock_s3, bucket_name) == ['files/kept.jpg/kept.jpg']
        assert 'Deleted 1 orphaned objects, 0 failed' in out.getvalue()

    def test_deletes_content_replaced_by_update(
        self,
        file_service,
        mock_s3,
        bucket_name,
        make_request,
    ):
        """Test the original object is an orphan after an update."""
        file_service.upload(make_request(name='a.jpg'))
        file_service.update('a.jpg', make_request(name='a.jpg'))

        call_command('reconcile_storage', '--min-age=0', stdout=StringIO())

        assert _keys(mock_s3, bucket_name) == [
            build_updated_storage_key('a.jpg'),
        ]

    def test_dry_run_keeps_objects(
        self,
        storage,
        mock_s3,
        bucket_name,
    ):
        """Test dry run only reports what would be deleted."""
        storage.put(b'orphan', build_storage_key('orphan.jpg'), 'image/jpeg')

        out = StringIO()
        call_command(
            'reconcile_storage',
            '--dry-run',
            '--min-age=0',
            stdout=out,
        )

        assert _keys(mock_s3, bucket_name) == ['files/orphan.jpg/orphan.jpg']
        assert 'Would delete: files/orphan.jpg/orphan.jpg' in out.getvalue()
        assert 'Would delete 1 orphaned objects' in out.getvalue()

    def test_batch_size_limits_deletions(
        self,
        storage,
        mock_s3,
        bucket_name,
    ):
        """Test no more than batch-size objects are processed."""
        for name in ('a.jpg', 'b.jpg', 'c.jpg'):
            storage.put(b'orphan', build_storage_key(name), 'image/jpeg')

        call_command(
            'reconcile_storage',
            '--batch-size=2',
            '--min-age=0',
            stdout=StringIO(),
        )

        assert len(_keys(mock_s3, bucket_name)) == 1

    def test_recent_orphans_are_kept(
        self,
        storage,
        mock_s3,
        bucket_name,
        settings,
    ):
        """Test objects younger than the minimum age are left alone."""
        settings.FILES_RECONCILE_MIN_AGE_MINUTES = 60
        storage.put(b'pending', build_storage_key('new.jpg'), 'image/jpeg')

        out = StringIO()
        call_command('reconcile_storage', stdout=out)

        assert _keys(mock_s3, bucket_name) == ['files/new.jpg/new.jpg']
        assert 'Deleted 0 orphaned objects, 0 failed' in out.getvalue()
