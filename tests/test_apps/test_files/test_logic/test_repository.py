"""Tests for the file metadata repository."""

from datetime import timedelta

import pytest
from django.utils import timezone

from server.apps.files.exceptions import (
    FileAlreadyExistsError,
    FileRecordNotFoundError,
)
from server.apps.files.models import File

_URL = 'https://files-processor.s3.us-east-1.amazonaws.com/files/a.jpg/a.jpg'


@pytest.mark.django_db
class TestCreate:
    """Tests for FileRepository.create."""

    def test_create_sets_timestamps(self, repository):
        """Test created and updated timestamps match on creation."""
        file_instance = repository.create('a.jpg', _URL)

        assert file_instance.id is not None
        assert file_instance.file_name == 'a.jpg'
        assert file_instance.file_url == _URL
        assert file_instance.created_at == file_instance.updated_at
        assert file_instance.deleted_at is None

    def test_create_duplicate_active_name(self, repository):
        """Test the store rejects a second active file with the same name."""
        repository.create('a.jpg', _URL)

        with pytest.raises(FileAlreadyExistsError):
            repository.create('a.jpg', _URL)

        assert File.all_objects.count() == 1

    def test_create_reuses_name_of_deleted_file(self, repository):
        """Test a soft-deleted name does not block the constraint."""
        first = repository.create('a.jpg', _URL)
        repository.soft_delete(first.id)

        second = repository.create('a.jpg', _URL)

        assert second.id != first.id
        assert File.all_objects.count() == 2


@pytest.mark.django_db
class TestReads:
    """Tests for list_active and find_active_by_name."""

    def test_list_active_newest_first(self, repository):
        """Test active files are listed by creation date, newest first."""
        older = repository.create('old.jpg', _URL)
        newer = repository.create('new.jpg', _URL)
        File.objects.filter(id=older.id).update(
            created_at=timezone.now() - timedelta(days=1),
        )

        names = [f.file_name for f in repository.list_active()]

        assert names == [newer.file_name, older.file_name]

    def test_list_active_hides_deleted(self, repository):
        """Test soft-deleted files are not listed."""
        kept = repository.create('kept.jpg', _URL)
        deleted = repository.create('deleted.jpg', _URL)
        repository.soft_delete(deleted.id)

        assert list(repository.list_active()) == [kept]

    def test_find_active_by_name(self, repository):
        """Test lookup by name returns the active file."""
        created = repository.create('a.jpg', _URL)

        assert repository.find_active_by_name('a.jpg') == created
        assert repository.find_active_by_name('missing.jpg') is None

    def test_find_ignores_deleted(self, repository):
        """Test lookup by name skips soft-deleted files."""
        created = repository.create('a.jpg', _URL)
        repository.soft_delete(created.id)

        assert repository.find_active_by_name('a.jpg') is None


@pytest.mark.django_db
class TestUpdate:
    """Tests for FileRepository.update."""

    def test_update_changes_url_and_timestamp(self, repository):
        """Test update writes the new URL and refreshes updated_at."""
        created = repository.create('a.jpg', _URL)

        updated = repository.update(created.id, 'a.jpg', _URL + '.updated')

        assert updated.id == created.id
        assert updated.file_url == _URL + '.updated'
        assert updated.updated_at > created.updated_at
        assert updated.created_at == created.created_at
        assert updated.deleted_at is None

    def test_update_deleted_row(self, repository):
        """Test a row soft deleted meanwhile is reported as not found."""
        created = repository.create('a.jpg', _URL)
        repository.soft_delete(created.id)

        with pytest.raises(FileRecordNotFoundError, match='File not found'):
            repository.update(created.id, 'a.jpg', _URL + '.updated')

        assert File.all_objects.get(id=created.id).file_url == _URL


@pytest.mark.django_db
class TestSoftDelete:
    """Tests for FileRepository.soft_delete."""

    def test_soft_delete_sets_deleted_at_only(self, repository):
        """Test soft delete keeps the row and other fields."""
        created = repository.create('a.jpg', _URL)

        deleted = repository.soft_delete(created.id)

        assert deleted is not None
        assert deleted.deleted_at is not None
        stored = File.all_objects.get(id=created.id)
        assert stored.file_name == 'a.jpg'
        assert stored.file_url == _URL
        assert stored.updated_at == created.updated_at
        assert stored.deleted_at == deleted.deleted_at

    def test_soft_delete_missing(self, repository):
        """Test soft delete of an unknown ID returns None."""
        assert repository.soft_delete(99999) is None

    def test_soft_delete_is_not_repeated(self, repository):
        """Test an already deleted file keeps its first deletion time."""
        created = repository.create('a.jpg', _URL)
        first = repository.soft_delete(created.id)

        assert repository.soft_delete(created.id) is None
        stored = File.all_objects.get(id=created.id)
        assert stored.deleted_at == first.deleted_at
