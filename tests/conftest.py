"""Shared test fixtures for Golobe."""

import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from dotenv import load_dotenv

# Load .env file for test configuration
load_dotenv()

# Unset AWS_PROFILE for local testing (DynamoDB Local doesn't need it)
if "AWS_PROFILE" in os.environ:
    del os.environ["AWS_PROFILE"]

# Add src directory to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from golobe.config import Config  # noqa: E402
from golobe.db import DynamoDocumentStore, build_registry  # noqa: E402

TEST_CONFIG = dict(
    aws_region="us-east-1",
    users_table="Users",
    accounts_table="Accounts",
    bookings_table="Bookings",
    analytics_table="Analytics",
    unique_keys_table="UniqueKeys",
    email_sender="no-reply@golobe.test",
    app_url="https://golobe.test",
    bcrypt_rounds=4,
    environment="test",
)


@pytest.fixture
def config():
    return Config(**TEST_CONFIG)


@pytest.fixture
def registry(config):
    return build_registry(config)


@pytest.fixture
def dynamo_client():
    """MagicMock standing in for a boto3 DynamoDB client."""
    client = MagicMock()
    client.get_item.return_value = {}
    client.scan.return_value = {"Items": []}
    return client


@pytest.fixture
def store(dynamo_client, config):
    return DynamoDocumentStore(dynamo_client, config.unique_keys_table)


# DynamoDB Local fixtures
@pytest.fixture
def local_dynamo_client():
    """Provide a DynamoDB client pointed at DynamoDB Local."""
    import boto3
    from golobe.config import _reset_config, get_config

    if not os.environ.get("DYNAMODB_ENDPOINT"):
        pytest.skip("DYNAMODB_ENDPOINT not set")

    _reset_config()
    config = get_config()
    client = boto3.client(
        "dynamodb",
        endpoint_url=config.dynamodb_endpoint,
        region_name=config.aws_region,
        aws_access_key_id="dummy",
        aws_secret_access_key="dummy",
    )
    yield client
    _reset_config()


@pytest.fixture
def local_registry():
    from golobe.config import get_config

    return build_registry(get_config())


@pytest.fixture
def local_store(local_dynamo_client, local_registry):
    """Document store on DynamoDB Local; every table is emptied afterwards."""
    from golobe.config import get_config

    config = get_config()
    yield DynamoDocumentStore(local_dynamo_client, config.unique_keys_table)

    tables = [(local_registry.lookup(name).unwrap().table_name, "id") for name in local_registry.names()]
    tables.append((config.unique_keys_table, "uniqueKey"))
    for table_name, key in tables:
        response = local_dynamo_client.scan(TableName=table_name)
        for item in response.get("Items", []):
            local_dynamo_client.delete_item(TableName=table_name, Key={key: item[key]})
