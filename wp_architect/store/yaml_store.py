"""YAML file implementation of PageStore.

Layout under the store root:

    <root>/<project_id>/pages.yaml     pages: [ {id: ..., title: ...}, ... ]
    <root>/<project_id>/history.yaml   moves: [ {page_id: ..., moved_at: ...}, ... ]

Missing files read as an empty project. Files are rewritten whole on every
change.
"""

import dataclasses
import logging
import os
import re
from typing import Any, Dict, List, Optional

import yaml

from wp_architect.models import ContentType, Page
from wp_architect.site_tree.models import MoveRecord
from wp_architect.site_tree.tree_editor import patch_pages
from .base import PageStore, canonical_order
from .errors import StoreError, StoreFilesystemError

logger = logging.getLogger(__name__)

PROJECT_ID_PATTERN = re.compile(r'^[A-Za-z0-9][A-Za-z0-9._-]*$')


class YamlPageStore(PageStore):
    """Stores each project as a pair of YAML files.

    Example:
        >>> store = YamlPageStore('.wp-architect/projects')
        >>> store.save_pages('fme', pages)
        >>> store.get_pages('fme')
    """

    DEFAULT_ROOT_DIR = '.wp-architect/projects'
    PAGES_FILE = 'pages.yaml'
    HISTORY_FILE = 'history.yaml'

    def __init__(self, root_dir: str = DEFAULT_ROOT_DIR):
        self.root_dir = root_dir

    def project_dir(self, project_id: str) -> str:
        """Directory holding one project's files.

        Raises:
            StoreError: If project_id is not a safe directory name
        """
        if not isinstance(project_id, str) or not PROJECT_ID_PATTERN.match(project_id):
            raise StoreError(
                f"Invalid project id {project_id!r}: use letters, digits, '.', '_' or '-'"
            )
        return os.path.join(self.root_dir, project_id)

    def list_projects(self) -> List[str]:
        """Project ids that have a pages file, sorted."""
        try:
            entries = os.listdir(self.root_dir)
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StoreFilesystemError(self.root_dir, 'list', str(e))

        return sorted(
            entry for entry in entries
            if os.path.isfile(os.path.join(self.root_dir, entry, self.PAGES_FILE))
        )

    def save_pages(self, project_id: str, pages: List[Page]) -> None:
        stored = self._load_pages(project_id)
        index = {page.id: position for position, page in enumerate(stored)}

        for page in pages:
            if page.id in index:
                stored[index[page.id]] = page
            else:
                index[page.id] = len(stored)
                stored.append(page)

        self._write_pages(project_id, stored)
        logger.info(f"Saved {len(pages)} pages to project {project_id} ({len(stored)} total)")

    def get_pages(self, project_id: str) -> List[Page]:
        return canonical_order(self._load_pages(project_id))

    def patch_page(self, project_id: str, page_id: str, **fields: Any) -> Page:
        """Update fields of one stored page.

        Raises:
            StoreError: If the page does not exist
            ValueError: If fields names structural or unknown fields
            InvalidPatchError: If the result breaks a page invariant
        """
        stored = self._load_pages(project_id)
        if not any(page.id == page_id for page in stored):
            raise StoreError(f"Page {page_id} not found", project_id)

        patched = patch_pages(stored, page_id, **fields)
        self._write_pages(project_id, patched)
        logger.debug(f"Patched page {page_id} in project {project_id}: {sorted(fields)}")
        return next(page for page in patched if page.id == page_id)

    def append_move(self, project_id: str, record: MoveRecord) -> None:
        history = self.get_history(project_id)
        history.append(record)
        path = os.path.join(self.project_dir(project_id), self.HISTORY_FILE)
        self._write_yaml(path, {'moves': [dataclasses.asdict(entry) for entry in history]})

    def get_history(self, project_id: str) -> List[MoveRecord]:
        path = os.path.join(self.project_dir(project_id), self.HISTORY_FILE)
        data = self._read_yaml(path)
        if data is None:
            return []

        moves = self._require_list(data, 'moves', path)
        history = []
        for entry in moves:
            try:
                history.append(MoveRecord(**entry))
            except TypeError as e:
                raise StoreError(f"Invalid move record in {path}: {e}", project_id)
        return history

    def delete_page(self, project_id: str, page_id: str) -> None:
        """Delete a ghost page.

        Raises:
            StoreError: If the page is missing, is not a ghost, or still has children
        """
        stored = self._load_pages(project_id)
        target = next((page for page in stored if page.id == page_id), None)
        if target is None:
            raise StoreError(f"Page {page_id} not found", project_id)
        if target.type != ContentType.GHOST:
            raise StoreError(
                f"Page {page_id} is a {target.type.value}; only ghost pages can be deleted",
                project_id
            )
        if any(page.parent_id == page_id for page in stored):
            raise StoreError(f"Ghost page {page_id} still has child pages", project_id)

        self._write_pages(project_id, [page for page in stored if page.id != page_id])
        logger.info(f"Deleted ghost page {page_id} from project {project_id}")

    def _load_pages(self, project_id: str) -> List[Page]:
        path = os.path.join(self.project_dir(project_id), self.PAGES_FILE)
        data = self._read_yaml(path)
        if data is None:
            return []

        pages = []
        for record in self._require_list(data, 'pages', path):
            if not isinstance(record, dict):
                raise StoreError(f"Page records in {path} must be dictionaries", project_id)
            try:
                pages.append(Page.from_dict(record))
            except ValueError as e:
                raise StoreError(f"Invalid page record in {path}: {e}", project_id)
        return pages

    def _write_pages(self, project_id: str, pages: List[Page]) -> None:
        path = os.path.join(self.project_dir(project_id), self.PAGES_FILE)
        self._write_yaml(path, {'pages': [page.to_dict() for page in pages]})

    @staticmethod
    def _require_list(data: Dict[str, Any], key: str, path: str) -> List[Any]:
        value = data.get(key) or []
        if not isinstance(value, list):
            raise StoreError(
                f"Field '{key}' in {path} must be a list, got {type(value).__name__}"
            )
        return value

    @staticmethod
    def _read_yaml(path: str) -> Optional[Dict[str, Any]]:
        """Read a YAML mapping; None when the file is missing or empty.

        Raises:
            StoreFilesystemError: If the file cannot be read
            StoreError: If the file is not a YAML mapping
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            return None
        except PermissionError:
            raise StoreFilesystemError(path, 'read', 'Permission denied')
        except OSError as e:
            raise StoreFilesystemError(path, 'read', str(e))

        if not content.strip():
            return None

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise StoreError(f"Invalid YAML syntax in {path}: {str(e)}")

        if data is None:
            return None
        if not isinstance(data, dict):
            raise StoreError(
                f"{path} must contain a YAML dictionary, got {type(data).__name__}"
            )
        return data

    @staticmethod
    def _write_yaml(path: str, data: Dict[str, Any]) -> None:
        """Write a YAML mapping, creating the project directory if needed.

        Raises:
            StoreFilesystemError: If the directory or file cannot be written
        """
        yaml_str = yaml.safe_dump(
            data,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        directory = os.path.dirname(path)
        if directory:
            try:
                os.makedirs(directory, exist_ok=True)
            except OSError as e:
                raise StoreFilesystemError(directory, 'create_directory', str(e))

        try:
            with open(path, 'w', encoding='utf-8') as f:
                f.write(yaml_str)
        except PermissionError:
            raise StoreFilesystemError(path, 'write', 'Permission denied')
        except OSError as e:
            raise StoreFilesystemError(path, 'write', str(e))
