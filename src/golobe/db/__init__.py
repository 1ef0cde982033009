"""
Document schemas, validation and DynamoDB persistence for Golobe.
"""

from golobe.db.documents import DocumentCreator
from golobe.db.dynamo import DynamoDocumentStore
from golobe.db.registry import ID_FIELD, EntitySchema, SchemaRegistry, build_registry, normalize_entity_name
from golobe.db.validator import DocumentValidator, ValidatedRecord

__all__ = [
    "ID_FIELD",
    "DocumentCreator",
    "DocumentValidator",
    "DynamoDocumentStore",
    "EntitySchema",
    "SchemaRegistry",
    "ValidatedRecord",
    "build_registry",
    "normalize_entity_name",
]
