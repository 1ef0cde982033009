"""Global analytics counters stored as a single DynamoDB item."""

import logging
from typing import Any

from botocore.exceptions import ClientError

from golobe.db.dynamo import to_item
from golobe.db.registry import ID_FIELD
from golobe.models import ANALYTICS_DOCUMENT_ID, Analytics

logger = logging.getLogger(__name__)


def ensure_counters(dynamo_client: Any, analytics_table: str) -> bool:
    """Create the counters item if it is missing. Returns True when created."""
    document = {ID_FIELD: ANALYTICS_DOCUMENT_ID, **Analytics().model_dump(by_alias=True)}
    try:
        dynamo_client.put_item(
            TableName=analytics_table,
            Item=to_item(document),
            ConditionExpression="attribute_not_exists(#id)",
            ExpressionAttributeNames={"#id": ID_FIELD},
        )
    except ClientError as e:
        if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
            return False
        raise
    logger.info("Created analytics counters in %s", analytics_table)
    return True


def _update_kwargs(analytics_table: str, deltas: dict[str, int]) -> dict[str, Any]:
    allowed = set(Analytics().model_dump(by_alias=True))
    unknown = [name for name in deltas if name not in allowed]
    if unknown:
        raise ValueError(f"Unknown analytics counters: {', '.join(unknown)}")
    if not deltas:
        raise ValueError("At least one counter delta is required")

    names = {f"#c{i}": name for i, name in enumerate(deltas)}
    values = {f":d{i}": {"N": str(int(delta))} for i, delta in enumerate(deltas.values())}
    expression = "ADD " + ", ".join(f"#c{i} :d{i}" for i in range(len(deltas)))
    return {
        "TableName": analytics_table,
        "Key": {ID_FIELD: {"S": ANALYTICS_DOCUMENT_ID}},
        "UpdateExpression": expression,
        "ExpressionAttributeNames": names,
        "ExpressionAttributeValues": values,
    }


def increment_counters(dynamo_client: Any, analytics_table: str, deltas: dict[str, int]) -> None:
    """Add signed integer deltas, e.g. ``{"totalUsersSignedUp": 1}``."""
    dynamo_client.update_item(**_update_kwargs(analytics_table, deltas))


def counter_update(analytics_table: str, deltas: dict[str, int]) -> dict[str, Any]:
    """The same increment as a TransactWriteItems ``Update`` action."""
    return {"Update": _update_kwargs(analytics_table, deltas)}
