"""Project persistence: YAML page store and JSON export."""

from .base import PageStore, canonical_order
from .errors import ExportFormatError, StoreError, StoreFilesystemError
from .export import (
    EXPORT_VERSION,
    default_export_filename,
    export_project,
    import_project,
    validate_export_data,
)
from .yaml_store import YamlPageStore

__all__ = [
    'PageStore',
    'canonical_order',
    'YamlPageStore',
    'StoreError',
    'StoreFilesystemError',
    'ExportFormatError',
    'EXPORT_VERSION',
    'default_export_filename',
    'export_project',
    'import_project',
    'validate_export_data',
]
