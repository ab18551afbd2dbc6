"""
DynamoDB Memo Store Tests

The boto3 Table is replaced by a MagicMock; no AWS access.
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from memo_store import DynamoDBMemoStore, MemoRecord, MemoStoreError


def _item(owner_id: str, number: int, text: str) -> dict:
    return {
        "lineUserId": owner_id,
        "messageId": Decimal(number),
        "memoText": text,
        "storedTime": "1707500000000",
    }


@pytest.fixture
def table():
    return MagicMock()


@pytest.fixture
def store(table):
    return DynamoDBMemoStore(table_name="memoStore", table=table)


class TestQueries:
    """Test reads."""

    @pytest.mark.asyncio
    async def test_get_by_owner_converts_items(self, store, table):
        table.query.return_value = {"Items": [_item("U1", 2, "b"), _item("U1", 1, "a")]}

        records = await store.get_by_owner("U1")

        assert records == [
            MemoRecord(owner_id="U1", sequence_number=2, memo_text="b", stored_time="1707500000000"),
            MemoRecord(owner_id="U1", sequence_number=1, memo_text="a", stored_time="1707500000000"),
        ]
        assert table.query.call_args.kwargs["ScanIndexForward"] is False

    @pytest.mark.asyncio
    async def test_get_by_owner_follows_pages(self, store, table):
        table.query.side_effect = [
            {"Items": [_item("U1", 3, "c")], "LastEvaluatedKey": {"lineUserId": "U1", "messageId": 3}},
            {"Items": [_item("U1", 2, "b")]},
        ]

        records = await store.get_by_owner("U1")

        assert [record.sequence_number for record in records] == [3, 2]
        assert table.query.call_args_list[1].kwargs["ExclusiveStartKey"] == {"lineUserId": "U1", "messageId": 3}

    @pytest.mark.asyncio
    async def test_get_all_scans(self, store, table):
        table.scan.return_value = {"Items": [_item("U1", 1, "a"), _item("U2", 1, "x")]}

        records = await store.get_all()

        assert [record.owner_id for record in records] == ["U1", "U2"]

    @pytest.mark.asyncio
    async def test_client_error_becomes_store_error(self, store, table):
        table.query.side_effect = ClientError(
            {"Error": {"Code": "ResourceNotFoundException", "Message": "no table"}}, "Query"
        )

        with pytest.raises(MemoStoreError):
            await store.get_by_owner("U1")

    @pytest.mark.asyncio
    async def test_connection_error_becomes_store_error(self, store, table):
        table.scan.side_effect = EndpointConnectionError(endpoint_url="https://dynamodb.local")

        with pytest.raises(MemoStoreError):
            await store.get_all()


class TestPut:
    """Test sequence allocation and conditional writes."""

    @pytest.mark.asyncio
    async def test_first_memo_gets_one(self, store, table):
        table.query.return_value = {"Items": []}

        stored = await store.put(
            MemoRecord(owner_id="U1", sequence_number=0, memo_text="milk", stored_time="1")
        )

        assert stored.sequence_number == 1
        table.put_item.assert_called_once_with(
            Item={"lineUserId": "U1", "messageId": 1, "memoText": "milk", "storedTime": "1"},
            ConditionExpression="attribute_not_exists(messageId)",
        )

    @pytest.mark.asyncio
    async def test_next_number_after_last(self, store, table):
        table.query.return_value = {"Items": [_item("U1", 7, "g")]}

        stored = await store.put(
            MemoRecord(owner_id="U1", sequence_number=0, memo_text="h", stored_time="1")
        )

        assert stored.sequence_number == 8
        assert table.query.call_args.kwargs["Limit"] == 1

    @pytest.mark.asyncio
    async def test_lost_race_raises(self, store, table):
        table.query.return_value = {"Items": [_item("U1", 1, "a")]}
        table.put_item.side_effect = ClientError(
            {"Error": {"Code": "ConditionalCheckFailedException", "Message": "exists"}}, "PutItem"
        )

        with pytest.raises(MemoStoreError, match="Memo number 2 was taken"):
            await store.put(MemoRecord(owner_id="U1", sequence_number=0, memo_text="b", stored_time="1"))

    @pytest.mark.asyncio
    async def test_unreadable_last_item_raises(self, store, table):
        table.query.return_value = {"Items": [{"lineUserId": "U1"}]}

        with pytest.raises(MemoStoreError):
            await store.put(MemoRecord(owner_id="U1", sequence_number=0, memo_text="b", stored_time="1"))

        table.put_item.assert_not_called()


class TestDelete:
    """Test deletes."""

    @pytest.mark.asyncio
    async def test_delete_by_key(self, store, table):
        await store.delete("U1", 4)

        table.delete_item.assert_called_once_with(Key={"lineUserId": "U1", "messageId": 4})
