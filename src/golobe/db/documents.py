"""Generic document creation: validate-then-persist for one record, batch insert for many."""

import logging
import uuid
from collections.abc import Mapping
from typing import Any

from golobe.db.dynamo import DynamoDocumentStore
from golobe.db.registry import ID_FIELD, SchemaRegistry
from golobe.db.validator import DocumentValidator
from golobe.errors import PersistenceError, TypeMismatchError
from golobe.result import Failure, Result, Success

logger = logging.getLogger(__name__)


def new_id() -> str:
    return str(uuid.uuid4())


class DocumentCreator:
    def __init__(self, registry: SchemaRegistry, store: DynamoDocumentStore) -> None:
        self._registry = registry
        self._store = store
        self._validator = DocumentValidator(registry)

    def create_one(self, entity_name: Any, record: Any) -> Result[dict[str, Any]]:
        """Validate ``record`` against ``entity_name`` and store it.

        Validation failures are returned as-is. Storage failures, including a
        unique-key conflict, come back as ``PersistenceError``.
        """
        validation = self._validator.validate(entity_name, record)
        if not validation.ok:
            return validation

        validated = validation.value
        document = {ID_FIELD: new_id(), **validated.data}
        try:
            stored = self._store.insert(validated.schema, document)
        except Exception as e:
            logger.exception("Failed to create %s document", validated.entity_name)
            error = PersistenceError(f"Failed to create {validated.entity_name}: {e}")
            error.__cause__ = e
            return Failure(error)

        logger.info("Created %s %s", validated.entity_name, stored[ID_FIELD])
        return Success(stored)

    def create_many(self, entity_name: Any, records: Any) -> Result[list[str]]:
        """Insert pre-validated records in one batch and return their ids.

        Records are not validated here; callers are expected to pass documents
        that already match the entity schema.
        """
        if not isinstance(entity_name, str):
            return Failure(TypeMismatchError(f"{entity_name!r} is not a string. entity name must be a string"))
        if not isinstance(records, list) or not all(isinstance(r, Mapping) for r in records):
            return Failure(TypeMismatchError("records must be a list of mappings"))

        lookup = self._registry.lookup(entity_name)
        if not lookup.ok:
            return lookup
        schema = lookup.value

        if not records:
            return Success([])

        documents = [{ID_FIELD: new_id(), **record} for record in records]
        try:
            ids = self._store.insert_many(schema, documents)
        except Exception as e:
            logger.exception("Bulk insert of %d %s documents failed", len(documents), schema.name)
            error = PersistenceError(f"Failed to create {schema.name} documents: {e}")
            error.__cause__ = e
            return Failure(error)

        return Success(ids)
