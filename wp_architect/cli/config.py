"""YAML configuration loading and validation.

Configuration file structure (``.wp-architect/config.yaml``):

    url: "https://www.example.com"
    include_pages: true
    include_posts: false
    include_custom: false
    username: "editor"            # optional
    app_password: "abcd efgh ..." # optional, prefer WP_APP_PASSWORD in .env
    store_dir: ".wp-architect/projects"
"""

from typing import Any, Dict, Optional
import yaml

from wp_architect.models import CrawlConfig
from .errors import ConfigError, ConfigNotFoundError
from .models import AppConfig


class ConfigLoader:
    """Loads crawl configuration from YAML and merges CLI overrides."""

    DEFAULT_CONFIG_PATH = '.wp-architect/config.yaml'

    REQUIRED_FIELDS = {'url'}

    BOOLEAN_FIELDS = ('include_pages', 'include_posts', 'include_custom')

    OPTIONAL_STRING_FIELDS = ('username', 'app_password', 'store_dir')

    DEFAULTS = {
        'include_pages': True,
        'include_posts': False,
        'include_custom': False,
        'username': None,
        'app_password': None,
        'store_dir': '.wp-architect/projects',
    }

    @classmethod
    def read(cls, config_path: str) -> Dict[str, Any]:
        """Read the raw YAML mapping from a configuration file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            Raw settings (empty dict for an empty file)

        Raises:
            ConfigNotFoundError: If the file does not exist
            ConfigError: If the file cannot be read or is not a YAML mapping
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise ConfigNotFoundError(config_path)
        except OSError as e:
            raise ConfigError(f"Cannot read {config_path}: {e}")

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(data).__name__}"
            )
        return data

    @classmethod
    def resolve(
        cls,
        file_settings: Dict[str, Any],
        overrides: Optional[Dict[str, Any]] = None
    ) -> AppConfig:
        """Merge file settings with CLI overrides and validate the result.

        Override values of None mean "not given on the command line".

        Args:
            file_settings: Settings read from YAML (may be empty)
            overrides: Values from CLI options

        Returns:
            Validated AppConfig

        Raises:
            ConfigError: If a field is missing or has the wrong type
        """
        merged = dict(cls.DEFAULTS)
        merged.update({k: v for k, v in file_settings.items() if v is not None})
        merged.update({k: v for k, v in (overrides or {}).items() if v is not None})

        for field_name in cls.REQUIRED_FIELDS:
            if not merged.get(field_name):
                raise ConfigError("Missing required field", field_name)

        url = merged['url']
        if not isinstance(url, str) or not url.strip():
            raise ConfigError("Must be a non-empty string", 'url')
        url = url.strip()
        if not url.startswith(('http://', 'https://')):
            raise ConfigError(f"Must start with http:// or https://, got {url!r}", 'url')

        for field_name in cls.BOOLEAN_FIELDS:
            if not isinstance(merged[field_name], bool):
                raise ConfigError(
                    f"Must be a boolean, got {type(merged[field_name]).__name__}",
                    field_name
                )

        for field_name in cls.OPTIONAL_STRING_FIELDS:
            value = merged[field_name]
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"Must be a string, got {type(value).__name__}", field_name)

        if not (merged['include_pages'] or merged['include_posts']):
            raise ConfigError("Enable at least one of pages or posts", 'include_pages')

        crawl = CrawlConfig(
            url=url,
            include_pages=merged['include_pages'],
            include_posts=merged['include_posts'],
            include_custom=merged['include_custom'],
            username=merged['username'],
            app_password=merged['app_password'],
        )
        return AppConfig(crawl=crawl, store_dir=merged['store_dir'])

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None
    ) -> AppConfig:
        """Load configuration from a file (if any) and apply CLI overrides.

        An explicit config_path must exist. Without one, the default path is
        used when present and skipped otherwise.

        Raises:
            ConfigNotFoundError: If an explicit config_path does not exist
            ConfigError: If the resulting configuration is invalid
        """
        if config_path is not None:
            file_settings = cls.read(config_path)
        else:
            try:
                file_settings = cls.read(cls.DEFAULT_CONFIG_PATH)
            except ConfigNotFoundError:
                file_settings = {}
        return cls.resolve(file_settings, overrides)

    @classmethod
    def store_dir(cls, config_path: Optional[str] = None) -> str:
        """Store directory from the config file, or the default."""
        path = config_path or cls.DEFAULT_CONFIG_PATH
        try:
            settings = cls.read(path)
        except ConfigNotFoundError:
            if config_path is not None:
                raise
            return cls.DEFAULTS['store_dir']

        store_dir = settings.get('store_dir') or cls.DEFAULTS['store_dir']
        if not isinstance(store_dir, str):
            raise ConfigError(f"Must be a string, got {type(store_dir).__name__}", 'store_dir')
        return store_dir
