"""Adobe I/O App project helpers.

Detects the project root marker (app.config.yaml), reads package.json scripts
and discovers runtime actions declared in app.config.yaml.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import yaml

from ...errors import ProjectError

logger = logging.getLogger(__name__)

APP_CONFIG_FILE = "app.config.yaml"
PACKAGE_JSON_FILE = "package.json"


async def is_aio_app_project(project_root: Path) -> bool:
    """Check whether ``project_root`` contains app.config.yaml."""
    return await asyncio.to_thread((project_root / APP_CONFIG_FILE).is_file)


def missing_project_message(project_root: Path) -> str:
    return (
        f"❌ Error: No {APP_CONFIG_FILE} found in current directory ({project_root}). "
        "Please run this command from an Adobe I/O App project root."
    )


async def read_package_scripts(project_root: Path) -> dict[str, str]:
    """Return the ``scripts`` table of package.json.

    Raises:
        ProjectError: If package.json is missing or is not valid JSON
    """
    path = project_root / PACKAGE_JSON_FILE
    try:
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        package = json.loads(text)
    except (OSError, json.JSONDecodeError) as e:
        raise ProjectError(f"Could not read {PACKAGE_JSON_FILE}: {e}") from e

    scripts = package.get("scripts") if isinstance(package, dict) else None
    return scripts if isinstance(scripts, dict) else {}


def _load_yaml(path: Path) -> Any:
    with path.open(encoding="utf-8") as f:
        return yaml.safe_load(f)


def _dig(value: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _function_actions(actions: Any) -> list[str]:
    if not isinstance(actions, dict):
        return []
    return [
        name
        for name, config in actions.items()
        if isinstance(config, dict) and config.get("function")
    ]


async def discover_actions_from_config(project_root: Path) -> list[str]:
    """List ``<package>/<action>`` names declared in app.config.yaml.

    Reads ``application.runtimeManifest.packages``; a package whose
    ``actions`` is ``{$include: path}`` is resolved relative to the project
    root. Only actions with a ``function`` entry are returned. Parse errors
    are logged and yield an empty list.
    """
    try:
        config = await asyncio.to_thread(_load_yaml, project_root / APP_CONFIG_FILE)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Error parsing {APP_CONFIG_FILE}: {e}")
        return []

    packages = _dig(config, "application", "runtimeManifest", "packages")
    if not isinstance(packages, dict):
        return []

    discovered: list[str] = []
    for package_name, package_config in packages.items():
        actions = _dig(package_config, "actions")
        if isinstance(actions, dict) and "$include" in actions:
            include_path = project_root / str(actions["$include"])
            try:
                included = await asyncio.to_thread(_load_yaml, include_path)
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Error parsing included actions from {include_path}: {e}")
                continue
            names = _function_actions(included)
        else:
            names = _function_actions(actions)
        discovered.extend(f"{package_name}/{name}" for name in names)

    return discovered
