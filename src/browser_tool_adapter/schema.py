"""Translate declarative JSON schemas into pydantic validation types.

The automation engine validates extracted data with pydantic, so the schemas
received over the wire are converted into equivalent annotations: objects
become :class:`pydantic.BaseModel` subclasses, arrays become ``list[...]`` and
primitives map onto the matching strict pydantic types, so a string such as
``"12.5"`` is not coerced into a number.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    create_model,
)

ROOT_MODEL_NAME = "ExtractedData"

_PRIMITIVES: dict[str, Any] = {
    "string": StrictStr,
    # Strict floats still accept integers, as JSON numbers do.
    "number": StrictFloat,
    "integer": StrictInt,
    "boolean": StrictBool,
    "null": type(None),
}


class UnsupportedSchemaError(ValueError):
    """Raised when a schema node uses a type the translator does not know."""


def translate(schema: Mapping[str, Any], *, name: str = ROOT_MODEL_NAME) -> Any:
    """Return the pydantic annotation equivalent to ``schema``."""

    return _translate(schema, name=name, path="$")


def translate_object(schema: Mapping[str, Any], *, name: str = ROOT_MODEL_NAME) -> type[BaseModel]:
    """Translate a schema whose top level must describe an object with properties."""

    translated = translate(schema, name=name)
    try:
        is_model = issubclass(translated, BaseModel)
    except TypeError:
        # Generic aliases such as list[str] are not classes.
        is_model = False
    if not is_model:
        raise UnsupportedSchemaError("Top-level schema must be an object with properties")
    return translated


def _translate(node: Any, *, name: str, path: str) -> Any:
    if not isinstance(node, Mapping):
        raise UnsupportedSchemaError(f"Schema node at {path} must be an object, got {type(node).__name__}")

    kind = node.get("type")
    if kind is None and "properties" in node:
        kind = "object"
    if not isinstance(kind, str):
        raise UnsupportedSchemaError(f"Unsupported schema type at {path}: {kind!r}")

    if kind == "object":
        return _translate_object(node, name=name, path=path)
    if kind == "array":
        items = node.get("items")
        if items is None:
            return list[Any]
        item_type = _translate(items, name=f"{name}Item", path=f"{path}[]")
        return list[item_type]  # type: ignore[valid-type]
    if kind == "string" and node.get("enum"):
        return Literal[tuple(node["enum"])]  # type: ignore[misc]
    if kind in _PRIMITIVES:
        return _PRIMITIVES[kind]
    raise UnsupportedSchemaError(f"Unsupported schema type at {path}: {kind!r}")


def _translate_object(node: Mapping[str, Any], *, name: str, path: str) -> Any:
    properties = node.get("properties")
    if not properties:
        return dict[str, Any]
    if not isinstance(properties, Mapping):
        raise UnsupportedSchemaError(f"Properties at {path} must be an object")

    required = set(node.get("required") or ())
    fields: dict[str, Any] = {}
    for index, (key, child) in enumerate(properties.items()):
        annotation = _translate(child, name=f"{name}{_camel(key)}", path=f"{path}.{key}")
        description = child.get("description") if isinstance(child, Mapping) else None
        # Keys that are not valid pydantic field names keep their wire name as alias.
        field_name = key if _is_safe_field_name(key) else _synthetic_name(index, properties, fields)
        alias = None if field_name == key else key
        if key in required:
            fields[field_name] = (annotation, Field(..., alias=alias, description=description))
        else:
            fields[field_name] = (
                Optional[annotation],
                Field(default=None, alias=alias, description=description),
            )

    extra = "allow" if node.get("additionalProperties") is True else "ignore"
    return create_model(  # type: ignore[call-overload]
        name,
        __config__=ConfigDict(extra=extra, populate_by_name=True),
        __doc__=node.get("description"),
        **fields,
    )


def _is_safe_field_name(key: str) -> bool:
    return (
        key.isidentifier()
        and not key.startswith("_")
        and not key.startswith("model_")
        and not hasattr(BaseModel, key)
    )


def _synthetic_name(index: int, properties: Mapping[str, Any], fields: Mapping[str, Any]) -> str:
    # Must not shadow a real property key or a name handed out earlier.
    candidate = f"field_{index}"
    suffix = 0
    while candidate in properties or candidate in fields:
        suffix += 1
        candidate = f"field_{index}_{suffix}"
    return candidate


def _camel(key: str) -> str:
    parts = [part for part in key.replace("-", "_").split("_") if part]
    return "".join(part[:1].upper() + part[1:] for part in parts) or "Field"
