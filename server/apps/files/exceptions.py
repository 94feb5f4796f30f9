"""Exceptions for files app."""


class FileOperationError(Exception):
    """Base class for errors caused by a file request.

    Every subclass is reported to the client as a bad request.
    """


class UploadValidationError(FileOperationError):
    """Raised when an upload breaks one or more validation rules."""

    def __init__(self, violations: list[str]) -> None:
        """Initialize UploadValidationError.

        Args:
            violations: All rule violations found for the upload.
        """
        self.violations = violations
        super().__init__(', '.join(violations))


class FileAlreadyExistsError(FileOperationError):
    """Raised when an active file with the same name already exists."""

    def __init__(self, file_name: str) -> None:
        """Initialize FileAlreadyExistsError.

        Args:
            file_name: Name that is already taken.
        """
        self.file_name = file_name
        super().__init__('File name already exists')


class FileRecordNotFoundError(FileOperationError):
    """Raised when no active file matches the requested name."""

    def __init__(self, file_name: str) -> None:
        """Initialize FileRecordNotFoundError.

        Args:
            file_name: Name that was looked up.
        """
        self.file_name = file_name
        super().__init__('File not found')


class PayloadUnavailableError(FileOperationError):
    """Raised when upload bytes can't be obtained from the payload.

    Only presence flags are reported, never filesystem paths.
    """

    def __init__(self, *, has_content: bool, has_path: bool) -> None:
        """Initialize PayloadUnavailableError.

        Args:
            has_content: Whether the payload carried in-memory bytes.
            has_path: Whether the payload carried a filesystem path.
        """
        self.has_content = has_content
        self.has_path = has_path
        super().__init__(
            'File buffer or path is required '
            f'(has_buffer: {has_content}, has_path: {has_path})',
        )


class UploadFailedError(FileOperationError):
    """Raised when storage returns no URL for an uploaded file."""

    def __init__(self) -> None:
        """Initialize UploadFailedError."""
        super().__init__('Failed to upload file')


class DeleteFailedError(FileOperationError):
    """Raised when a file could not be deleted."""

    def __init__(self) -> None:
        """Initialize DeleteFailedError."""
        super().__init__('Failed to delete file')
