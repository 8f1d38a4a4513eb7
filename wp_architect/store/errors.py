"""Typed exception hierarchy for page store errors.

All exceptions inherit from StoreError so callers can handle every
persistence failure in one place.
"""

from typing import Optional

from wp_architect.errors import ArchitectError


class StoreError(ArchitectError):
    """Raised when a store operation or stored data is invalid."""

    def __init__(self, message: str, project_id: Optional[str] = None):
        if project_id:
            message = f"{message} (project '{project_id}')"
        super().__init__(message)
        self.project_id = project_id


class StoreFilesystemError(StoreError):
    """Raised when reading or writing a store file fails."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Store file operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason


class ExportFormatError(StoreError):
    """Raised when an export document does not have the expected shape."""

    def __init__(self, message: str, export_field: Optional[str] = None):
        if export_field:
            full_message = f"Invalid export data in field '{export_field}': {message}"
        else:
            full_message = f"Invalid export data: {message}"
        super().__init__(full_message)
        self.export_field = export_field
        self.original_message = message
