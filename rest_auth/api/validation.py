"""Translate request validation failures into ordered field-level errors.

Pydantic reports errors in field declaration order; that order is kept, and
multiple failures on one field are merged into a single entry.
"""

from typing import Any, Iterable

from rest_auth.errors import FieldError, ValidationError

# pydantic error type -> (error type label, message template)
_MESSAGES: dict[str, tuple[str, str]] = {
    "missing": ("any.required", '"{label}" is required'),
    "string_type": ("string.base", '"{label}" must be a string'),
    "string_too_short": (
        "string.min",
        '"{label}" length must be at least {min_length} characters long',
    ),
    "string_too_long": (
        "string.max",
        '"{label}" length must be less than or equal to {max_length} characters long',
    ),
    "json_invalid": ("object.base", '"{label}" must be valid JSON'),
    "model_attributes_type": ("object.base", '"{label}" must be an object'),
    "dict_type": ("object.base", '"{label}" must be an object'),
}

# (pydantic error type, field) -> (error type label, message template)
_FIELD_MESSAGES: dict[tuple[str, str], tuple[str, str]] = {
    ("value_error", "email"): ("string.email", '"{label}" must be a valid email'),
}

LOCATIONS = {"body", "query", "path", "header", "cookie"}


def _split_loc(loc: Iterable[Any]) -> tuple[str, list[str]]:
    parts = list(loc)
    location = "body"
    if parts and parts[0] in LOCATIONS:
        location = parts.pop(0)
    # "path" is spelled "params" on the wire
    if location == "path":
        location = "params"
    return location, [str(p) for p in parts if not isinstance(p, int)]


def _describe(error: dict[str, Any], label: str) -> tuple[str, str]:
    error_type = error.get("type", "")
    known = _FIELD_MESSAGES.get((error_type, label)) or _MESSAGES.get(error_type)
    if known is not None:
        type_label, template = known
        ctx = error.get("ctx") or {}
        return type_label, template.format(label=label, **ctx)
    return error_type, f'"{label}" {error.get("msg", "is invalid")}'


def field_errors(errors: Iterable[dict[str, Any]]) -> list[FieldError]:
    """Group pydantic errors into FieldErrors, in first-seen order."""
    grouped: dict[tuple[str, tuple[str, ...]], FieldError] = {}

    for error in errors:
        location, path = _split_loc(error.get("loc", ()))
        label = path[-1] if path else location
        type_label, message = _describe(error, label)

        key = (location, tuple(path))
        entry = grouped.get(key)
        if entry is None:
            entry = FieldError(field=path, location=location, messages=[], types=[])
            grouped[key] = entry
        entry.messages.append(message)
        entry.types.append(type_label)

    return list(grouped.values())


def validation_error(errors: Iterable[dict[str, Any]]) -> ValidationError:
    """Build the 400 ValidationError for a set of pydantic errors."""
    return ValidationError(field_errors(errors))
