from unittest import mock

import boto3
from botocore.exceptions import ClientError
from moto import mock_aws

from dexcom_segment.utils.config import Settings
from scripts import create_cache_table


def make_settings():
    return Settings(_env_file=None, cache_backend="dynamodb", dynamodb_cache_table="prompt_cache", aws_region="us-east-1")


@mock_aws
def test_main_creates_table_with_ttl():
    with mock.patch.object(create_cache_table, "get_settings", return_value=make_settings()):
        assert create_cache_table.main() == 0
        # Running again against an existing table is fine
        assert create_cache_table.main() == 0

    client = boto3.client("dynamodb", region_name="us-east-1")
    assert client.describe_table(TableName="prompt_cache")["Table"]["TableStatus"] == "ACTIVE"
    ttl = client.describe_time_to_live(TableName="prompt_cache")
    assert ttl["TimeToLiveDescription"]["AttributeName"] == "expires_at"


def test_main_reports_client_errors():
    error = ClientError({"Error": {"Code": "AccessDeniedException", "Message": "denied"}}, "CreateTable")
    with mock.patch.object(create_cache_table, "get_settings", return_value=make_settings()), \
            mock.patch.object(create_cache_table.DynamoDBCache, "create_table", side_effect=error):
        assert create_cache_table.main() == 1
