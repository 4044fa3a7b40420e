import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError

from subveris.db.base import StorageError, SubscriptionStore
from subveris.models.bank import BankConnection, BankConnectionCreate, Transaction, TransactionCreate
from subveris.models.insight import Insight, InsightCreate
from subveris.models.spending import SpendingSnapshot
from subveris.models.subscription import Subscription, SubscriptionCreate

logger = logging.getLogger(__name__)


class DynamoStore(SubscriptionStore):
    """
    DynamoDB-backed store. Every entity table uses ``id`` as its partition
    key, except spending snapshots which are keyed by ``month``. Items are
    stored with snake_case attribute names (``next_billing_date``).
    """

    def __init__(
        self,
        region: str,
        subscriptions_table: str,
        insights_table: str,
        bank_connections_table: str,
        transactions_table: str,
        snapshots_table: str,
        dynamodb: Any = None,
    ) -> None:
        dynamodb = dynamodb or boto3.resource("dynamodb", region_name=region)
        self.subscriptions_table = dynamodb.Table(subscriptions_table)
        self.insights_table = dynamodb.Table(insights_table)
        self.bank_connections_table = dynamodb.Table(bank_connections_table)
        self.transactions_table = dynamodb.Table(transactions_table)
        self.snapshots_table = dynamodb.Table(snapshots_table)

    # Subscriptions

    def list_subscriptions(self) -> List[Subscription]:
        return [Subscription.model_validate(row) for row in self._scan(self.subscriptions_table)]

    def get_subscription(self, subscription_id: str) -> Optional[Subscription]:
        row = self._get_item(self.subscriptions_table, {"id": subscription_id})
        return Subscription.model_validate(row) if row else None

    def create_subscription(self, data: SubscriptionCreate) -> Subscription:
        subscription = Subscription(**data.model_dump())
        self._put_item(self.subscriptions_table, _to_row(subscription))
        return subscription

    def set_subscription_status(self, subscription_id: str, status: str) -> Optional[Subscription]:
        row = self._update_item(self.subscriptions_table, {"id": subscription_id}, {"status": status})
        return Subscription.model_validate(row) if row else None

    def set_subscription_usage(self, subscription_id: str, usage_count: int) -> Optional[Subscription]:
        row = self._update_item(
            self.subscriptions_table,
            {"id": subscription_id},
            {"usage_count": usage_count, "last_used_date": date.today().isoformat()},
        )
        return Subscription.model_validate(row) if row else None

    def record_usage(self, subscription_id: str) -> Optional[Subscription]:
        row = self._update_item(
            self.subscriptions_table,
            {"id": subscription_id},
            {"last_used_date": date.today().isoformat(), "status": "active"},
            increments={"usage_count": 1},
        )
        return Subscription.model_validate(row) if row else None

    def delete_subscription(self, subscription_id: str) -> bool:
        if not self._delete_item(self.subscriptions_table, {"id": subscription_id}):
            return False

        for table in (self.insights_table, self.transactions_table):
            dependents = self._scan(table, FilterExpression=Attr("subscription_id").eq(subscription_id))
            for row in dependents:
                self._update_item(table, {"id": row["id"]}, {"subscription_id": None})
        return True

    # Bank connections

    def list_bank_connections(self) -> List[BankConnection]:
        return [BankConnection.model_validate(row) for row in self._scan(self.bank_connections_table)]

    def get_bank_connection(self, connection_id: str) -> Optional[BankConnection]:
        row = self._get_item(self.bank_connections_table, {"id": connection_id})
        return BankConnection.model_validate(row) if row else None

    def create_bank_connection(self, data: BankConnectionCreate) -> BankConnection:
        connection = BankConnection(**data.model_dump())
        self._put_item(self.bank_connections_table, _to_row(connection))
        return connection

    def sync_bank_connection(self, connection_id: str) -> Optional[BankConnection]:
        row = self._update_item(
            self.bank_connections_table,
            {"id": connection_id},
            {"last_sync": datetime.utcnow().isoformat()},
        )
        return BankConnection.model_validate(row) if row else None

    def delete_bank_connection(self, connection_id: str) -> bool:
        return self._delete_item(self.bank_connections_table, {"id": connection_id})

    # Insights

    def list_insights(self) -> List[Insight]:
        return [Insight.model_validate(row) for row in self._scan(self.insights_table)]

    def create_insight(self, data: InsightCreate) -> Insight:
        insight = Insight(**data.model_dump())
        self._put_item(self.insights_table, _to_row(insight))
        return insight

    def mark_insight_read(self, insight_id: str, is_read: bool = True) -> Optional[Insight]:
        row = self._update_item(self.insights_table, {"id": insight_id}, {"is_read": is_read})
        return Insight.model_validate(row) if row else None

    # Transactions

    def list_transactions(self) -> List[Transaction]:
        return [Transaction.model_validate(row) for row in self._scan(self.transactions_table)]

    def create_transaction(self, data: TransactionCreate) -> Transaction:
        transaction = Transaction(**data.model_dump())
        self._put_item(self.transactions_table, _to_row(transaction))
        return transaction

    # Spending snapshots

    def list_spending_snapshots(self) -> List[SpendingSnapshot]:
        rows = self._scan(self.snapshots_table)
        return sorted((SpendingSnapshot.model_validate(row) for row in rows), key=lambda snap: snap.month)

    def save_spending_snapshot(self, snapshot: SpendingSnapshot) -> SpendingSnapshot:
        self._put_item(self.snapshots_table, _to_row(snapshot))
        return snapshot

    def ping(self) -> bool:
        try:
            self.subscriptions_table.scan(Limit=1)
            return True
        except ClientError as e:
            logger.error(f"DynamoDB ping failed: {e.response['Error']['Message']}")
            return False

    def is_empty(self) -> bool:
        try:
            response = self.subscriptions_table.scan(Limit=1)
        except ClientError as e:
            raise _storage_error("is_empty", e) from e
        return not response.get("Items")

    # Low-level helpers

    def _scan(self, table, **kwargs) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        try:
            response = table.scan(**kwargs)
            items.extend(response.get("Items", []))
            while "LastEvaluatedKey" in response:
                response = table.scan(ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs)
                items.extend(response.get("Items", []))
        except ClientError as e:
            raise _storage_error(f"scan {table.name}", e) from e
        return [_from_dynamo(item) for item in items]

    def _get_item(self, table, key: Dict[str, str]) -> Optional[Dict[str, Any]]:
        try:
            response = table.get_item(Key=key)
        except ClientError as e:
            raise _storage_error(f"get_item {table.name}", e) from e
        item = response.get("Item")
        return _from_dynamo(item) if item else None

    def _put_item(self, table, item: Dict[str, Any]) -> None:
        try:
            table.put_item(Item=_convert_for_dynamo(item))
        except ClientError as e:
            raise _storage_error(f"put_item {table.name}", e) from e

    def _delete_item(self, table, key: Dict[str, str]) -> bool:
        try:
            response = table.delete_item(Key=key, ReturnValues="ALL_OLD")
        except ClientError as e:
            raise _storage_error(f"delete_item {table.name}", e) from e
        return "Attributes" in response

    def _update_item(
        self,
        table,
        key: Dict[str, str],
        updates: Dict[str, Any],
        increments: Optional[Dict[str, int]] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Apply partial updates to an existing item. ``increments`` are added
        server-side in the same write. Returns the updated item, or None when
        no item has that key.
        """
        update_expression_parts = []
        add_expression_parts = []
        expression_attribute_values = {}
        expression_attribute_names = {}

        for idx, (attr, value) in enumerate(updates.items()):
            placeholder = f"#f{idx}"
            value_placeholder = f":v{idx}"
            update_expression_parts.append(f"{placeholder} = {value_placeholder}")
            expression_attribute_names[placeholder] = attr
            expression_attribute_values[value_placeholder] = value

        for idx, (attr, amount) in enumerate((increments or {}).items()):
            placeholder = f"#a{idx}"
            value_placeholder = f":a{idx}"
            add_expression_parts.append(f"{placeholder} {value_placeholder}")
            expression_attribute_names[placeholder] = attr
            expression_attribute_values[value_placeholder] = amount

        update_expression = "SET " + ", ".join(update_expression_parts)
        if add_expression_parts:
            update_expression += " ADD " + ", ".join(add_expression_parts)

        try:
            response = table.update_item(
                Key=key,
                UpdateExpression=update_expression,
                ConditionExpression=Attr("id").exists(),
                ExpressionAttributeNames=expression_attribute_names,
                ExpressionAttributeValues=_convert_for_dynamo(expression_attribute_values),
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                return None
            raise _storage_error(f"update_item {table.name}", e) from e
        attributes = response.get("Attributes")
        return _from_dynamo(attributes) if attributes else None


def _storage_error(operation: str, error: ClientError) -> StorageError:
    message = error.response.get("Error", {}).get("Message", str(error))
    logger.error(f"{operation} failed: {message}")
    return StorageError(f"{operation} failed: {message}")


def _to_row(model) -> Dict[str, Any]:
    """Model -> item with snake_case attribute names and ISO date strings."""
    return model.model_dump(mode="json")


def _convert_for_dynamo(obj: Any):
    """
    Recursively convert floats to Decimal for DynamoDB compatibility.
    """
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: _convert_for_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_convert_for_dynamo(v) for v in obj]
    return obj


def _from_dynamo(obj: Any):
    """
    Recursively convert Decimal instances back to native Python numeric types.
    """
    if isinstance(obj, list):
        return [_from_dynamo(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _from_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        return float(obj)
    return obj
