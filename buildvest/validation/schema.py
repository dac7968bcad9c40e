"""
Payload validation

Every entity is declared once as a strict pydantic model. The same model serves
two modes:

- full: all required fields present, every supplied field correctly typed
- partial: any subset of fields, every supplied field correctly typed

Unknown fields are dropped. Only the fields the caller supplied are returned,
so a partial result can be merged into a stored document as-is.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, create_model
from pydantic import ValidationError as PydanticValidationError

from buildvest.kernel.errors import ValidationError

# JSON number; integers stay integers. Booleans are rejected.
Number = Union[StrictInt, StrictFloat]


class RecordSchema(BaseModel):
    """Base for declared entity schemas."""

    model_config = ConfigDict(strict=True, extra="ignore")


@lru_cache(maxsize=None)
def partial_schema(schema: type[BaseModel]) -> type[BaseModel]:
    """Derive a model where every field may be omitted.

    Omitted fields get a None default that is never validated, so an explicit
    null for a required field is still rejected.
    """
    fields: dict[str, Any] = {
        name: (field.annotation, None) for name, field in schema.model_fields.items()
    }
    return create_model(f"Partial{schema.__name__}", __base__=schema, **fields)


def flatten_errors(exc: PydanticValidationError) -> dict[str, Any]:
    """Group pydantic errors into `{formErrors: [...], fieldErrors: {field: [...]}}`."""
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        message = error.get("msg", "Invalid value")
        if not loc:
            form_errors.append(message)
            continue
        field_errors.setdefault(str(loc[0]), []).append(message)
    return {"formErrors": form_errors, "fieldErrors": field_errors}


def validate_payload(
    schema: type[BaseModel],
    payload: Any,
    *,
    partial: bool = False,
    message: str = "Invalid payload",
) -> dict[str, Any]:
    """Validate `payload` against `schema` and return the supplied fields.

    Raises ValidationError (with a field-level error map) on any mismatch.
    """
    if not isinstance(payload, dict):
        raise ValidationError(
            message=message,
            errors={"formErrors": ["Expected a JSON object"], "fieldErrors": {}},
        )

    model = partial_schema(schema) if partial else schema
    try:
        instance = model.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(message=message, errors=flatten_errors(exc)) from exc
    return instance.model_dump(exclude_unset=True)
