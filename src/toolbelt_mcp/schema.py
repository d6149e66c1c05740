"""Argument validation and schema introspection for tool parameter models.

Tool inputs are declared as pydantic models. The same declaration is used to
validate raw arguments and to produce the flat JSON-schema-like description
advertised to the host when it lists tools. Discriminated unions are declared
as a :class:`pydantic.RootModel` over an annotated ``Union`` of parameter
models sharing a ``Literal`` discriminator field.
"""

from __future__ import annotations

import types
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Annotated, Any, Literal, Union, get_args, get_origin

from pydantic import AnyUrl, BaseModel, RootModel, ValidationError
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined

GENERIC_TYPE_TAG = "object"

_SCALAR_TAGS: dict[Any, str] = {
    str: "string",
    bool: "boolean",
    int: "integer",
    float: "number",
}
_UNION_ORIGINS = {Union, types.UnionType}
_ARRAY_ORIGINS = {list, tuple, set, frozenset}
_TAG_ERROR_TYPES = {"union_tag_not_found", "union_tag_invalid"}


@dataclass(frozen=True)
class FieldError:
    """A single failing field reported by argument validation.

    Attributes:
        path: Location of the field, outermost segment first.
        message: Human-readable reason the field was rejected.

    """

    path: tuple[str | int, ...]
    message: str

    @property
    def dotted_path(self) -> str:
        """Return the path joined with dots, e.g. ``join.table``."""
        return ".".join(str(segment) for segment in self.path)

    def __str__(self) -> str:
        if not self.path:
            return self.message
        return f"{self.dotted_path}: {self.message}"


class ArgumentValidationError(ValueError):
    """Raised when raw arguments do not conform to a parameters model."""

    def __init__(self, errors: Sequence[FieldError]) -> None:
        """Store every failing field and build a combined message."""
        self.errors: list[FieldError] = list(errors)
        super().__init__(self.summary())

    def summary(self) -> str:
        """Join every failing field into one readable string."""
        return ", ".join(str(error) for error in self.errors)


@dataclass(frozen=True)
class UnionSchema:
    """Branch information extracted from a discriminated-union root model."""

    discriminator: str | None
    branches: tuple[type[BaseModel], ...]
    tags: tuple[str, ...]

    @property
    def labels(self) -> set[str]:
        """Location segments pydantic inserts to name the selected branch."""
        return set(self.tags) | {branch.__name__ for branch in self.branches}


def _union_members(annotation: Any) -> tuple[Any, ...]:
    if get_origin(annotation) in _UNION_ORIGINS:
        return get_args(annotation)
    return (annotation,)


def _literal_values(annotation: Any) -> tuple[Any, ...]:
    if get_origin(annotation) is Literal:
        return get_args(annotation)
    return ()


def union_schema(model: type[BaseModel]) -> UnionSchema | None:
    """Describe the branches of a union root model.

    Args:
        model: Parameters model to inspect.

    Returns:
        Union details, or ``None`` when the model is not a union of models.

    """
    if not issubclass(model, RootModel):
        return None
    root = model.model_fields["root"]
    branches = tuple(
        member
        for member in _union_members(root.annotation)
        if isinstance(member, type) and issubclass(member, BaseModel)
    )
    if not branches:
        return None

    discriminator = root.discriminator if isinstance(root.discriminator, str) else None
    tags: list[str] = []
    if discriminator is not None:
        for branch in branches:
            field_info = branch.model_fields.get(discriminator)
            if field_info is None:
                continue
            tags.extend(str(value) for value in _literal_values(field_info.annotation))
    return UnionSchema(discriminator=discriminator, branches=branches, tags=tuple(tags))


def _collect_field_errors(
    model: type[BaseModel], error: ValidationError
) -> list[FieldError]:
    union = union_schema(model)
    grouped: dict[tuple[str | int, ...], list[str]] = {}
    for detail in error.errors():
        path: tuple[str | int, ...] = tuple(detail["loc"])
        if union is not None:
            if detail["type"] in _TAG_ERROR_TYPES and union.discriminator:
                path = (union.discriminator, *path)
            elif path and path[0] in union.labels:
                path = path[1:]
        messages = grouped.setdefault(path, [])
        if detail["msg"] not in messages:
            messages.append(detail["msg"])
    return [
        FieldError(path=path, message="; ".join(messages))
        for path, messages in grouped.items()
    ]


def validate_arguments(model: type[BaseModel], arguments: Mapping[str, Any]) -> Any:
    """Validate raw arguments against a parameters model.

    Every violated field is reported, not only the first one. Locations of
    errors inside a discriminated union are rewritten so they read as plain
    field paths (``join.table``) instead of carrying the selected branch tag.

    Args:
        model: Parameters model describing the accepted input.
        arguments: Raw, untyped arguments received from the host.

    Raises:
        ArgumentValidationError: If the arguments violate the model.

    Returns:
        The validated model instance. For root models the validated root value
        (the selected union branch) is returned instead of the wrapper.

    """
    try:
        validated = model.model_validate(arguments)
    except ValidationError as error:
        raise ArgumentValidationError(_collect_field_errors(model, error)) from error
    if isinstance(validated, RootModel):
        return validated.root
    return validated


def _type_tag(annotation: Any) -> dict[str, Any]:
    """Map a field annotation to a best-effort protocol type tag."""
    if isinstance(annotation, type) and annotation in _SCALAR_TAGS:
        return {"type": _SCALAR_TAGS[annotation]}

    origin = get_origin(annotation)
    if origin is Annotated:
        return _type_tag(get_args(annotation)[0])

    if origin is Literal:
        values = get_args(annotation)
        if values and all(isinstance(value, str) for value in values):
            return {"type": "string", "enum": list(values)}
        if values and all(isinstance(value, bool) for value in values):
            return {"type": "boolean", "enum": list(values)}
        if values and all(isinstance(value, int) for value in values):
            return {"type": "integer", "enum": list(values)}
        return {"type": GENERIC_TYPE_TAG}

    if origin in _UNION_ORIGINS:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return _type_tag(members[0])
        member_types = {_type_tag(member)["type"] for member in members}
        if len(member_types) == 1:
            return {"type": member_types.pop()}
        return {"type": GENERIC_TYPE_TAG}

    if origin in _ARRAY_ORIGINS:
        args = [arg for arg in get_args(annotation) if arg is not Ellipsis]
        items = _type_tag(args[0]) if args else {"type": GENERIC_TYPE_TAG}
        return {"type": "array", "items": items}

    if origin is dict:
        return {"type": "object"}

    if isinstance(origin, type):
        if issubclass(origin, Mapping):
            return {"type": "object"}
        if issubclass(origin, Sequence) and not issubclass(origin, str):
            return {"type": "array"}

    if isinstance(annotation, type):
        if issubclass(annotation, BaseModel):
            return {"type": "object"}
        if issubclass(annotation, AnyUrl):
            return {"type": "string", "format": "uri"}
        if issubclass(annotation, (list, tuple, set, frozenset)):
            return {"type": "array"}

    return {"type": GENERIC_TYPE_TAG}


def _describe_field(field_info: FieldInfo) -> dict[str, Any]:
    description = _type_tag(field_info.annotation)
    description["description"] = field_info.description or ""
    default = field_info.default
    if (
        not field_info.is_required()
        and default is not PydanticUndefined
        and isinstance(default, (str, int, float, bool))
    ):
        description["default"] = default
    return description


def _describe_fields(
    fields: Mapping[str, FieldInfo],
) -> tuple[dict[str, dict[str, Any]], list[str]]:
    properties: dict[str, dict[str, Any]] = {}
    required: list[str] = []
    for name, field_info in fields.items():
        key = field_info.alias or name
        properties[key] = _describe_field(field_info)
        if field_info.is_required():
            required.append(key)
    return properties, required


def _describe_union(
    union: UnionSchema,
) -> tuple[dict[str, dict[str, Any]], list[str]]:
    properties: dict[str, dict[str, Any]] = {}
    required_per_branch: list[set[str]] = []
    for branch in union.branches:
        branch_properties, branch_required = _describe_fields(branch.model_fields)
        for key, description in branch_properties.items():
            properties.setdefault(key, description)
        required_per_branch.append(set(branch_required))

    if union.discriminator is not None and union.tags:
        discriminator = properties.setdefault(union.discriminator, {"description": ""})
        discriminator["type"] = "string"
        discriminator["enum"] = list(dict.fromkeys(union.tags))

    always_required = set.intersection(*required_per_branch)
    required = [key for key in properties if key in always_required]
    return properties, required


def describe_schema(model: type[BaseModel]) -> dict[str, Any]:
    """Describe a parameters model for advertisement to the host.

    Nested models and unions are flattened on a best-effort basis: a field
    whose shape is not a simple scalar is tagged with a generic type rather
    than failing.

    Args:
        model: Parameters model to describe.

    Returns:
        Mapping with ``type``, ``properties`` and ``required`` keys. Only
        fields without a default (and, for unions, required in every branch)
        appear in ``required``.

    """
    union = union_schema(model)
    if union is not None:
        properties, required = _describe_union(union)
    elif issubclass(model, RootModel):
        properties, required = {}, []
    else:
        properties, required = _describe_fields(model.model_fields)
    return {"type": "object", "properties": properties, "required": required}
