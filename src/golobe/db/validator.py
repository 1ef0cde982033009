"""Document validator: key whitelist against the registry, then model rules."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from golobe.db.registry import ID_FIELD, EntitySchema, SchemaRegistry
from golobe.errors import FieldValidationError, TypeMismatchError, UnexpectedFieldsError
from golobe.result import Failure, Result, Success


@dataclass(frozen=True)
class ValidatedRecord:
    entity_name: str
    schema: EntitySchema
    data: dict[str, Any]


def _valid_id(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def field_errors_from(exc: PydanticValidationError) -> dict[str, str]:
    """Map each error to its top-level field; later errors win."""
    errors: dict[str, str] = {}
    for issue in exc.errors():
        key = str(issue["loc"][0]) if issue["loc"] else "__root__"
        errors[key] = issue["msg"]
    return errors


class DocumentValidator:
    def __init__(self, registry: SchemaRegistry) -> None:
        self._registry = registry

    def validate(self, entity_name: Any, record: Any) -> Result[ValidatedRecord]:
        if not isinstance(entity_name, str):
            return Failure(TypeMismatchError(f"{entity_name!r} is not a string. entity name must be a string"))

        if not isinstance(record, Mapping):
            return Failure(TypeMismatchError(f"{record!r} is not a mapping. record must be a mapping"))

        lookup = self._registry.lookup(entity_name)
        if not lookup.ok:
            return lookup
        schema = lookup.value

        allowed = schema.allowed_fields
        extra = [key for key in record if key not in allowed]
        if extra:
            return Failure(UnexpectedFieldsError([str(key) for key in extra], list(schema.field_names)))

        if ID_FIELD in record and not _valid_id(record[ID_FIELD]):
            message = "id must be a non-empty string"
            return Failure(FieldValidationError(message, {ID_FIELD: message}))

        fields = {key: value for key, value in record.items() if key != ID_FIELD}
        try:
            document = schema.model.model_validate(fields)
        except PydanticValidationError as e:
            return Failure(FieldValidationError(str(e), field_errors_from(e)))

        data = document.model_dump(by_alias=True, mode="json", exclude_none=True)
        if ID_FIELD in record:
            data[ID_FIELD] = record[ID_FIELD]
        return Success(ValidatedRecord(entity_name=schema.name, schema=schema, data=data))
