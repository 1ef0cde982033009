"""DynamoDB document store used by the document creators.

Every entity lives in its own table keyed on ``id``. Fields an entity declares
unique are enforced with guard items in a shared unique-keys table, written in
the same transaction as the document, so a second write of the same value fails
at the storage layer.
"""

import json
import logging
from decimal import Decimal
from typing import Any

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer

from golobe.db.registry import ID_FIELD, EntitySchema

logger = logging.getLogger(__name__)

MAX_TRANSACTION_ITEMS = 100

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def to_item(document: dict[str, Any]) -> dict[str, Any]:
    """Serialize a JSON-compatible document into DynamoDB attribute values."""
    # DynamoDB rejects float, numbers must travel as Decimal.
    clean = json.loads(json.dumps(document), parse_float=Decimal)
    return {key: _serializer.serialize(value) for key, value in clean.items()}


def _plain(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def from_item(item: dict[str, Any]) -> dict[str, Any]:
    return {key: _plain(_deserializer.deserialize(value)) for key, value in item.items()}


def unique_key(schema: EntitySchema, field: str, value: Any) -> str:
    return f"{schema.name}#{field}#{str(value).strip().lower()}"


class DocumentTransaction:
    """Collects write actions and commits them in one TransactWriteItems call."""

    def __init__(self, store: "DynamoDocumentStore") -> None:
        self._store = store
        self._actions: list[dict[str, Any]] = []

    def put(self, schema: EntitySchema, document: dict[str, Any]) -> "DocumentTransaction":
        self._actions.extend(self._store.put_actions(schema, document))
        return self

    def add(self, action: dict[str, Any]) -> "DocumentTransaction":
        self._actions.append(action)
        return self

    def __len__(self) -> int:
        return len(self._actions)

    def commit(self) -> None:
        if not self._actions:
            return
        if len(self._actions) > MAX_TRANSACTION_ITEMS:
            raise ValueError(f"Transaction has {len(self._actions)} actions, limit is {MAX_TRANSACTION_ITEMS}")
        self._store.dynamo_client.transact_write_items(TransactItems=self._actions)


class DynamoDocumentStore:
    def __init__(self, dynamo_client: Any, unique_keys_table: str) -> None:
        self.dynamo_client = dynamo_client
        self._unique_keys_table = unique_keys_table

    def put_actions(self, schema: EntitySchema, document: dict[str, Any]) -> list[dict[str, Any]]:
        """Transaction actions for one document plus its unique-key guards."""
        actions: list[dict[str, Any]] = [
            {
                "Put": {
                    "TableName": schema.table_name,
                    "Item": to_item(document),
                    "ConditionExpression": "attribute_not_exists(#id)",
                    "ExpressionAttributeNames": {"#id": ID_FIELD},
                }
            }
        ]
        for field in schema.unique_fields:
            if document.get(field) is None:
                continue
            actions.append(
                {
                    "Put": {
                        "TableName": self._unique_keys_table,
                        "Item": {
                            "uniqueKey": {"S": unique_key(schema, field, document[field])},
                            "documentId": {"S": str(document[ID_FIELD])},
                        },
                        "ConditionExpression": "attribute_not_exists(uniqueKey)",
                    }
                }
            )
        return actions

    def transaction(self) -> DocumentTransaction:
        return DocumentTransaction(self)

    def insert(self, schema: EntitySchema, document: dict[str, Any]) -> dict[str, Any]:
        actions = self.put_actions(schema, document)
        if len(actions) == 1:
            self.dynamo_client.put_item(**actions[0]["Put"])
        else:
            self.dynamo_client.transact_write_items(TransactItems=actions)
        return document

    def insert_many(self, schema: EntitySchema, documents: list[dict[str, Any]]) -> list[str]:
        """Write documents in transactions of at most MAX_TRANSACTION_ITEMS actions.

        Each transaction is atomic; a failure in a later chunk leaves earlier
        chunks committed.
        """
        inserted: list[str] = []
        pending: list[str] = []
        tx = self.transaction()
        for document in documents:
            actions = self.put_actions(schema, document)
            if len(tx) + len(actions) > MAX_TRANSACTION_ITEMS:
                tx.commit()
                inserted.extend(pending)
                pending = []
                tx = self.transaction()
            for action in actions:
                tx.add(action)
            pending.append(str(document[ID_FIELD]))
        tx.commit()
        inserted.extend(pending)
        logger.info("Inserted %d %s documents", len(inserted), schema.name)
        return inserted

    def get(self, schema: EntitySchema, document_id: str) -> dict[str, Any] | None:
        response = self.dynamo_client.get_item(TableName=schema.table_name, Key={ID_FIELD: {"S": document_id}})
        item = response.get("Item")
        return from_item(item) if item else None

    def exists(self, schema: EntitySchema, field: str, value: Any) -> bool:
        if field in schema.unique_fields:
            response = self.dynamo_client.get_item(
                TableName=self._unique_keys_table,
                Key={"uniqueKey": {"S": unique_key(schema, field, value)}},
            )
            return "Item" in response

        last_key = None
        while True:
            scan_kwargs: dict[str, Any] = {
                "TableName": schema.table_name,
                "FilterExpression": "#f = :v",
                "ExpressionAttributeNames": {"#f": field, "#id": ID_FIELD},
                "ExpressionAttributeValues": {":v": _serializer.serialize(value)},
                "ProjectionExpression": "#id",
            }
            if last_key:
                scan_kwargs["ExclusiveStartKey"] = last_key

            response = self.dynamo_client.scan(**scan_kwargs)
            if response.get("Items"):
                return True

            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return False
