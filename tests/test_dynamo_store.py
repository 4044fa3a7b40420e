from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from subveris.db.base import StorageError
from subveris.db.dynamo import DynamoStore, _convert_for_dynamo, _from_dynamo
from subveris.models.subscription import SubscriptionCreate

subscription_row = {
    "id": "sub-1",
    "name": "Netflix",
    "category": "streaming",
    "amount": Decimal("15.99"),
    "currency": "USD",
    "frequency": "monthly",
    "next_billing_date": "2024-02-15",
    "status": "active",
    "usage_count": Decimal("12"),
    "last_used_date": "2024-01-28",
    "logo_url": None,
    "description": "Streaming service",
    "is_detected": True,
}


def client_error(code, message="boom"):
    return ClientError({"Error": {"Code": code, "Message": message}}, "Operation")


def make_store():
    tables = {}

    def table(name):
        return tables.setdefault(name, MagicMock(name=name))

    resource = MagicMock()
    resource.Table.side_effect = table
    store = DynamoStore(
        region="eu-west-1",
        subscriptions_table="subscriptions",
        insights_table="insights",
        bank_connections_table="bank-connections",
        transactions_table="transactions",
        snapshots_table="snapshots",
        dynamodb=resource,
    )
    return store, tables


def test_decimal_conversion():
    item = _convert_for_dynamo({"amount": 15.99, "nested": [1.5, {"x": 2.0}], "name": "a"})
    assert item == {"amount": Decimal("15.99"), "nested": [Decimal("1.5"), {"x": Decimal("2.0")}], "name": "a"}
    assert _from_dynamo({"amount": Decimal("15.99"), "count": Decimal("3")}) == {"amount": 15.99, "count": 3}


def test_list_subscriptions_translates_rows_and_paginates():
    store, tables = make_store()
    tables["subscriptions"].scan.side_effect = [
        {"Items": [subscription_row], "LastEvaluatedKey": {"id": "sub-1"}},
        {"Items": [dict(subscription_row, id="sub-2", name="Hulu")]},
    ]

    subs = store.list_subscriptions()
    assert [s.id for s in subs] == ["sub-1", "sub-2"]
    assert subs[0].next_billing_date == date(2024, 2, 15)
    assert subs[0].usage_count == 12
    assert subs[0].to_wire()["nextBillingDate"] == "2024-02-15"
    assert tables["subscriptions"].scan.call_args_list[1].kwargs["ExclusiveStartKey"] == {"id": "sub-1"}


def test_create_subscription_writes_snake_case_item():
    store, tables = make_store()
    sub = store.create_subscription(
        SubscriptionCreate(
            name="Netflix",
            category="streaming",
            amount=15.99,
            frequency="monthly",
            next_billing_date=date(2024, 2, 15),
        )
    )

    item = tables["subscriptions"].put_item.call_args.kwargs["Item"]
    assert item["id"] == sub.id
    assert item["next_billing_date"] == "2024-02-15"
    assert item["amount"] == Decimal("15.99")
    assert item["usage_count"] == 0
    assert "nextBillingDate" not in item


def test_get_missing_subscription():
    store, tables = make_store()
    tables["subscriptions"].get_item.return_value = {}
    assert store.get_subscription("missing") is None


def test_update_on_missing_item_returns_none():
    store, tables = make_store()
    tables["subscriptions"].update_item.side_effect = client_error("ConditionalCheckFailedException")
    assert store.set_subscription_status("missing", "unused") is None


def test_record_usage_increments_in_one_write():
    store, tables = make_store()
    tables["subscriptions"].update_item.return_value = {
        "Attributes": dict(subscription_row, usage_count=Decimal("13"), status="active")
    }

    sub = store.record_usage("sub-1")
    assert sub.usage_count == 13
    assert sub.status == "active"

    # no read-modify-write: the count is added by DynamoDB itself
    tables["subscriptions"].get_item.assert_not_called()
    kwargs = tables["subscriptions"].update_item.call_args.kwargs
    assert kwargs["UpdateExpression"] == "SET #f0 = :v0, #f1 = :v1 ADD #a0 :a0"
    names = kwargs["ExpressionAttributeNames"]
    values = kwargs["ExpressionAttributeValues"]
    assert names["#a0"] == "usage_count"
    assert values[":a0"] == 1
    assert dict(zip(names.values(), values.values()))["status"] == "active"
    assert dict(zip(names.values(), values.values()))["last_used_date"] == date.today().isoformat()


def test_record_usage_on_missing_item_returns_none():
    store, tables = make_store()
    tables["subscriptions"].update_item.side_effect = client_error("ConditionalCheckFailedException")
    assert store.record_usage("missing") is None


def test_delete_subscription_clears_dependents():
    store, tables = make_store()
    tables["subscriptions"].delete_item.return_value = {"Attributes": subscription_row}
    tables["insights"].scan.return_value = {"Items": [{"id": "insight-1", "subscription_id": "sub-1"}]}
    tables["transactions"].scan.return_value = {"Items": []}
    tables["insights"].update_item.return_value = {"Attributes": {}}

    assert store.delete_subscription("sub-1") is True
    update = tables["insights"].update_item.call_args.kwargs
    assert update["Key"] == {"id": "insight-1"}
    assert list(update["ExpressionAttributeValues"].values()) == [None]
    tables["transactions"].update_item.assert_not_called()


def test_delete_missing_subscription():
    store, tables = make_store()
    tables["subscriptions"].delete_item.return_value = {}
    assert store.delete_subscription("missing") is False
    tables["insights"].scan.assert_not_called()


def test_client_errors_raise_storage_error():
    store, tables = make_store()
    tables["subscriptions"].scan.side_effect = client_error("ResourceNotFoundException", "Table missing")
    with pytest.raises(StorageError):
        store.list_subscriptions()
    assert store.ping() is False
