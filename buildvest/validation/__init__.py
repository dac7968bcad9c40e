"""Request validation against declared schemas."""

from buildvest.validation.schema import Number, RecordSchema, partial_schema, validate_payload
from buildvest.validation.schemas import (
    BuilderRecord,
    LoginCredentials,
    ProjectRecord,
    RegistrationCredentials,
)

__all__ = [
    "Number",
    "RecordSchema",
    "partial_schema",
    "validate_payload",
    "BuilderRecord",
    "ProjectRecord",
    "RegistrationCredentials",
    "LoginCredentials",
]
