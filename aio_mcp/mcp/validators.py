"""Compile tool input schemas into runtime validators.

Each descriptor's ``inputSchema.properties`` is turned into a pydantic model
built with ``create_model``. Property names are carried as aliases so that any
key (``max-results``, ``schema``, ``json``) is usable without clashing with
model attributes.

Type mapping:
    string  -> strict str
    boolean -> strict bool
    integer -> whole number (``5`` or ``5.0``, never ``True``)
    number  -> int or float (never ``True``)
    object  -> dict
    other   -> any value
    enum    -> exactly the listed literals (overrides the base type)

Properties not listed in ``required`` may be absent. Unknown keys are dropped.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, Strict, ValidationError, create_model
from pydantic_core import PydanticCustomError

from ..models import ToolDescriptor

logger = logging.getLogger(__name__)


def _check_integer(value: Any) -> int:
    if isinstance(value, bool):
        raise PydanticCustomError("integer_type", "Input should be a valid integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise PydanticCustomError("integer_type", "Input should be a valid integer")


def _check_number(value: Any) -> int | float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PydanticCustomError("number_type", "Input should be a valid number")
    return value


def _one_of(choices: list[Any]):
    def check(value: Any) -> Any:
        for choice in choices:
            if type(choice) is type(value) and choice == value:
                return value
        expected = ", ".join(repr(choice) for choice in choices)
        raise PydanticCustomError("enum", "Input should be one of: {expected}", {"expected": expected})

    return check


_BASE_TYPES: dict[str, Any] = {
    "string": Annotated[str, Strict()],
    "boolean": Annotated[bool, Strict()],
    "integer": Annotated[Any, AfterValidator(_check_integer)],
    "number": Annotated[Any, AfterValidator(_check_number)],
    "object": Annotated[dict[str, Any], Strict()],
}


def property_type(prop: dict[str, Any]) -> Any:
    """Pick the pydantic type for one property schema."""
    choices = prop.get("enum")
    if isinstance(choices, list) and choices:
        return Annotated[Any, AfterValidator(_one_of(choices))]
    return _BASE_TYPES.get(prop.get("type"), Any)


def format_errors(exc: ValidationError) -> list[str]:
    """Flatten a ValidationError into ``"<field>: <reason>"`` strings."""
    messages: list[str] = []
    for error in exc.errors():
        where = ".".join(str(part) for part in error["loc"]) or "arguments"
        message = f"{where}: {error['msg']}"
        if message not in messages:
            messages.append(message)
    return messages


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one argument object."""

    valid: bool
    data: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @classmethod
    def ok(cls, data: dict[str, Any]) -> "ValidationResult":
        return cls(valid=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ValidationResult":
        return cls(valid=False, error=error)


class CompiledValidator:
    """Validator derived from a single ToolDescriptor."""

    def __init__(self, name: str, model: type[BaseModel], required: tuple[str, ...]):
        self.name = name
        self.model = model
        self.required = required

    def validate(self, arguments: Any) -> ValidationResult:
        """Validate ``arguments`` against the compiled schema.

        Every violated property is reported, not only the first one.

        Args:
            arguments: Untrusted argument object from the caller

        Returns:
            ValidationResult with the accepted data (only keys that were
            supplied) or a joined error message
        """
        try:
            instance = self.model.model_validate(arguments)
        except ValidationError as exc:
            return ValidationResult.fail(f"Validation failed: {', '.join(format_errors(exc))}")
        return ValidationResult.ok(instance.model_dump(by_alias=True, exclude_unset=True))

    __call__ = validate

    def __repr__(self) -> str:
        return f"CompiledValidator({self.name!r})"


def _model_name(tool_name: str) -> str:
    words = re.split(r"[^0-9A-Za-z]+", tool_name)
    return "".join(word.capitalize() for word in words if word) + "Arguments"


def compile_validator(descriptor: ToolDescriptor) -> CompiledValidator:
    """Build the validator for one descriptor.

    Args:
        descriptor: A descriptor that already passed shape validation

    Returns:
        CompiledValidator for ``descriptor.name``
    """
    schema = descriptor.input_schema
    required = set(schema.required)
    fields: dict[str, Any] = {}

    for index, (key, prop) in enumerate(schema.properties.items()):
        annotation = property_type(prop)
        if key in required:
            fields[f"field_{index}"] = (annotation, Field(..., alias=key))
        else:
            fields[f"field_{index}"] = (annotation, Field(default=None, alias=key))

    model = create_model(
        _model_name(descriptor.name),
        __config__=ConfigDict(extra="ignore"),
        **fields,
    )
    logger.debug(f"Compiled validator for {descriptor.name} ({len(fields)} properties)")
    return CompiledValidator(descriptor.name, model, tuple(schema.required))
