"""Command-line interface for wp-architect."""

from .config import ConfigLoader
from .errors import CLIError, ConfigError, ConfigNotFoundError
from .models import AppConfig, ExitCode
from .output import OutputHandler

__all__ = [
    'CLIError',
    'ConfigError',
    'ConfigNotFoundError',
    'AppConfig',
    'ExitCode',
    'ConfigLoader',
    'OutputHandler',
]
