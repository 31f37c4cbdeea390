"""Tool descriptor store.

The store owns the mapping from tool name to ToolDescriptor and the parallel
mapping from tool name to CompiledValidator. Both maps live in one immutable
generation object; ``load``/``reload`` build a complete new generation and
publish it with a single assignment, so readers only ever see one generation.
"""

import asyncio
import copy
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..config import settings
from ..errors import DescriptorError
from ..models import ToolDescriptor
from .validators import CompiledValidator, ValidationResult, compile_validator, format_errors

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Generation:
    descriptors: dict[str, ToolDescriptor] = field(default_factory=dict)
    validators: dict[str, CompiledValidator] = field(default_factory=dict)


def parse_descriptor(source: str, text: str) -> ToolDescriptor:
    """Parse and shape-check one descriptor document.

    Raises:
        DescriptorError: If the text is not JSON or the document does not
            match the descriptor shape
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DescriptorError(source, f"invalid JSON ({exc})") from exc
    try:
        return ToolDescriptor.model_validate(document)
    except ValidationError as exc:
        raise DescriptorError(source, ", ".join(format_errors(exc))) from exc


class SchemaStore:
    """Authoritative name -> descriptor index with cached validators."""

    def __init__(self, schemas_dir: Path | None = None):
        self.schemas_dir = Path(schemas_dir) if schemas_dir is not None else settings.schemas_dir
        self._generation = _Generation()
        self._lock = asyncio.Lock()

    # ============ LOADING ============

    async def _read_generation(self) -> _Generation:
        generation = _Generation()
        paths = await asyncio.to_thread(lambda: sorted(self.schemas_dir.glob("*.json")))

        for path in paths:
            try:
                text = await asyncio.to_thread(path.read_text, encoding="utf-8")
                descriptor = parse_descriptor(path.name, text)
            except (OSError, DescriptorError) as exc:
                logger.warning(f"Skipping schema {path.name}: {exc}")
                continue

            if descriptor.name in generation.descriptors:
                logger.warning(f"Skipping schema {path.name}: duplicate tool name '{descriptor.name}'")
                continue

            generation.descriptors[descriptor.name] = descriptor
            generation.validators[descriptor.name] = compile_validator(descriptor)

        return generation

    async def load(self) -> int:
        """Load every descriptor document from the schema directory.

        Malformed documents are logged and skipped; they never abort the load.

        Returns:
            Number of descriptors loaded
        """
        async with self._lock:
            generation = await self._read_generation()
            self._generation = generation
        logger.info(f"Loaded {len(generation.descriptors)} schemas from {self.schemas_dir}")
        return len(generation.descriptors)

    async def reload(self) -> int:
        """Replace every descriptor and validator with a fresh load.

        The old generation stays visible until the new one is complete, then
        both maps are swapped together. Nothing from the old generation is
        reused.
        """
        async with self._lock:
            generation = await self._read_generation()
            self._generation = generation
        logger.info(f"Reloaded {len(generation.descriptors)} schemas from {self.schemas_dir}")
        return len(generation.descriptors)

    async def ensure_loaded(self) -> None:
        if not self._generation.descriptors:
            await self.load()

    # ============ LOOKUPS ============

    def __len__(self) -> int:
        return len(self._generation.descriptors)

    def __contains__(self, name: object) -> bool:
        return name in self._generation.descriptors

    def get_all(self) -> list[ToolDescriptor]:
        """All loaded descriptors, in load order."""
        return list(self._generation.descriptors.values())

    def get(self, name: str) -> ToolDescriptor | None:
        return self._generation.descriptors.get(name)

    def get_validator(self, name: str) -> CompiledValidator | None:
        return self._generation.validators.get(name)

    @property
    def validators(self) -> Mapping[str, CompiledValidator]:
        return self._generation.validators

    def validate_input(self, name: str, arguments: Any) -> ValidationResult:
        """Validate arguments for the named tool."""
        validator = self.get_validator(name)
        if validator is None:
            return ValidationResult.fail(f"Schema not found: {name}")
        return validator.validate(arguments)

    def apply_defaults(self, arguments: Mapping[str, Any], name: str) -> dict[str, Any]:
        """Fill declared defaults for properties absent from ``arguments``.

        Only strictly absent keys are filled; present values such as ``False``,
        ``0`` or ``""`` are kept. The input mapping is never modified; a new
        dict is returned and each default is a deep copy, so mutating the
        result never reaches the descriptor or later calls. Defaults are
        trusted as authored and not validated.
        """
        result = dict(arguments)
        descriptor = self.get(name)
        if descriptor is None:
            return result
        for key, value in descriptor.defaults().items():
            if key not in result:
                result[key] = copy.deepcopy(value)
        return result

    def schema_info(self, name: str) -> dict[str, Any] | None:
        """Summary of one descriptor, or None if it is not loaded."""
        descriptor = self.get(name)
        if descriptor is None:
            return None
        properties = descriptor.input_schema.properties
        return {
            "name": descriptor.name,
            "description": descriptor.description,
            "properties": list(properties),
            "required": list(descriptor.input_schema.required),
            "has_defaults": any("default" in prop for prop in properties.values()),
            "has_validator": name in self._generation.validators,
        }
