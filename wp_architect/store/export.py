"""JSON export and import of a project's pages.

Export document:

    {
      "version": "1.0",
      "exportDate": "2026-01-08T08:11:03+00:00",
      "projectId": "fme",
      "pages": [ {"id": "1", "title": "Home", ...}, ... ]
    }
"""

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from wp_architect.models import Page
from .base import canonical_order
from .errors import ExportFormatError, StoreFilesystemError

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"


def default_export_filename(project_id: str, when: Optional[datetime] = None) -> str:
    """File name like ``my_site_2026-01-08.json``."""
    when = when or datetime.now(timezone.utc)
    safe_name = re.sub(r'[^a-z0-9]', '_', project_id, flags=re.IGNORECASE).lower()
    return f"{safe_name}_{when.date().isoformat()}.json"


def validate_export_data(data: Any) -> None:
    """Check the shape of a parsed export document.

    Raises:
        ExportFormatError: Naming the first field that is missing or mistyped
    """
    if not isinstance(data, dict):
        raise ExportFormatError(f"expected a JSON object, got {type(data).__name__}")

    for key in ('version', 'exportDate', 'projectId'):
        if not isinstance(data.get(key), str):
            raise ExportFormatError("must be a string", key)

    if not isinstance(data.get('pages'), list):
        raise ExportFormatError("must be a list", 'pages')

    for position, record in enumerate(data['pages']):
        if not isinstance(record, dict):
            raise ExportFormatError(f"entry {position} must be an object", 'pages')


def export_project(path: str, project_id: str, pages: List[Page]) -> Dict[str, Any]:
    """Write pages to a JSON export file.

    Returns:
        The exported document

    Raises:
        StoreFilesystemError: If the file cannot be written
    """
    document = {
        'version': EXPORT_VERSION,
        'exportDate': datetime.now(timezone.utc).isoformat(),
        'projectId': project_id,
        'pages': [page.to_dict() for page in canonical_order(pages)],
    }

    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(document, f, indent=2, ensure_ascii=False)
    except OSError as e:
        raise StoreFilesystemError(path, 'write', str(e))

    logger.info(f"Exported {len(pages)} pages of project {project_id} to {path}")
    return document


def import_project(path: str) -> Tuple[str, List[Page]]:
    """Read a JSON export file.

    Returns:
        Tuple of (project_id, pages)

    Raises:
        StoreFilesystemError: If the file cannot be read
        ExportFormatError: If the document or one of its pages is invalid
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ExportFormatError(f"not valid JSON: {e}")
    except OSError as e:
        raise StoreFilesystemError(path, 'read', str(e))

    validate_export_data(data)
    if data['version'] != EXPORT_VERSION:
        logger.warning(f"Export version {data['version']} differs from {EXPORT_VERSION}; importing anyway")

    pages = []
    for record in data['pages']:
        try:
            pages.append(Page.from_dict(record))
        except ValueError as e:
            raise ExportFormatError(str(e), 'pages')

    return data['projectId'], pages
