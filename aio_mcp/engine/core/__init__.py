"""Engine core module.

This module contains the I/O primitives used by the tool handlers:
- External process execution
- Adobe I/O App project detection and app.config.yaml parsing
- Local dev server HTTP calls
"""

from .executor import execute_command, format_command
from .project import (
    APP_CONFIG_FILE,
    PACKAGE_JSON_FILE,
    discover_actions_from_config,
    is_aio_app_project,
    read_package_scripts,
)

__all__ = [
    # Process execution
    "execute_command",
    "format_command",
    # Project helpers
    "APP_CONFIG_FILE",
    "PACKAGE_JSON_FILE",
    "is_aio_app_project",
    "read_package_scripts",
    "discover_actions_from_config",
]
