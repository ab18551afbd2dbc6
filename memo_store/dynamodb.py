"""
DynamoDB-backed memo store.

Table layout (compatible with the existing deployment):
- partition key: lineUserId (S)
- sort key:      messageId (N)
- attributes:    memoText (S), storedTime (S, epoch milliseconds)

boto3 is blocking: every call runs in the default executor.
"""

import asyncio
import logging
from functools import partial
from typing import Any, Callable, Optional, TypeVar

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from memo_store.base import MemoStore, MemoStoreError
from memo_store.types import MemoRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _to_record(item: dict[str, Any]) -> MemoRecord:
    return MemoRecord(
        owner_id=item.get("lineUserId", ""),
        sequence_number=int(item.get("messageId", 0)),
        memo_text=item.get("memoText", ""),
        stored_time=item.get("storedTime", ""),
    )


class DynamoDBMemoStore(MemoStore):
    """
    DynamoDB memo store.

    Puts are conditional on the key not existing yet: if two registrations
    for the same owner race for the same sequence number, the loser fails
    instead of overwriting.
    """

    def __init__(
        self,
        table_name: str,
        region_name: Optional[str] = None,
        table: Any = None,
    ):
        """
        Args:
            table_name: DynamoDB table name
            region_name: AWS region (boto3 default chain when None)
            table: Pre-built boto3 Table resource (tests inject a fake here)
        """
        self.table_name = table_name
        if table is None:
            table = boto3.resource("dynamodb", region_name=region_name).Table(table_name)
        self.table = table

    async def _run(self, operation: Callable[[], T]) -> T:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, operation)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"DynamoDB error on {self.table_name}: {e}", exc_info=True)
            raise MemoStoreError(f"Memo store unavailable: {e}") from e

    def _collect(self, method: Callable[..., dict], **kwargs: Any) -> list[dict]:
        items: list[dict] = []
        while True:
            response = method(**kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    async def get_all(self) -> list[MemoRecord]:
        items = await self._run(partial(self._collect, self.table.scan))
        return [_to_record(item) for item in items]

    async def get_by_owner(self, owner_id: str) -> list[MemoRecord]:
        items = await self._run(
            partial(
                self._collect,
                self.table.query,
                KeyConditionExpression=Key("lineUserId").eq(owner_id),
                ScanIndexForward=False,
            )
        )
        return [_to_record(item) for item in items]

    def _last_sequence_number(self, owner_id: str) -> int:
        response = self.table.query(
            KeyConditionExpression=Key("lineUserId").eq(owner_id),
            ScanIndexForward=False,
            Limit=1,
        )
        items = response.get("Items", [])
        if not items:
            return 0
        if items[0].get("messageId") is None:
            raise MemoStoreError("Failed to read the last memo number")
        return int(items[0]["messageId"])

    async def put(self, record: MemoRecord) -> MemoRecord:
        def insert() -> MemoRecord:
            stored = MemoRecord(
                owner_id=record.owner_id,
                sequence_number=self._last_sequence_number(record.owner_id) + 1,
                memo_text=record.memo_text,
                stored_time=record.stored_time,
            )
            try:
                self.table.put_item(
                    Item={
                        "lineUserId": stored.owner_id,
                        "messageId": stored.sequence_number,
                        "memoText": stored.memo_text,
                        "storedTime": stored.stored_time,
                    },
                    ConditionExpression="attribute_not_exists(messageId)",
                )
            except ClientError as e:
                if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                    raise MemoStoreError(
                        f"Memo number {stored.sequence_number} was taken concurrently, please retry"
                    ) from e
                raise
            return stored

        stored = await self._run(insert)
        logger.info(
            f"Memo stored: owner_id={stored.owner_id}, sequence_number={stored.sequence_number}"
        )
        return stored

    async def delete(self, owner_id: str, sequence_number: int) -> None:
        await self._run(
            partial(
                self.table.delete_item,
                Key={"lineUserId": owner_id, "messageId": sequence_number},
            )
        )
        logger.info(f"Memo deleted: owner_id={owner_id}, sequence_number={sequence_number}")
