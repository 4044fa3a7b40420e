from datetime import date, datetime
from typing import Dict, List, Optional

from subveris.db.base import SubscriptionStore
from subveris.models.bank import BankConnection, BankConnectionCreate, Transaction, TransactionCreate
from subveris.models.insight import Insight, InsightCreate
from subveris.models.spending import SpendingSnapshot
from subveris.models.subscription import Subscription, SubscriptionCreate


class MemoryStore(SubscriptionStore):
    """
    Process-local store backed by plain dicts. Not thread-safe and not
    durable; insertion order is preserved for listings.
    """

    def __init__(self) -> None:
        self._subscriptions: Dict[str, Subscription] = {}
        self._bank_connections: Dict[str, BankConnection] = {}
        self._insights: Dict[str, Insight] = {}
        self._transactions: Dict[str, Transaction] = {}
        self._snapshots: Dict[str, SpendingSnapshot] = {}

    def list_subscriptions(self) -> List[Subscription]:
        return list(self._subscriptions.values())

    def get_subscription(self, subscription_id: str) -> Optional[Subscription]:
        return self._subscriptions.get(subscription_id)

    def create_subscription(self, data: SubscriptionCreate) -> Subscription:
        subscription = Subscription(**data.model_dump())
        self._subscriptions[subscription.id] = subscription
        return subscription

    def _update_subscription(self, subscription_id: str, **changes) -> Optional[Subscription]:
        subscription = self._subscriptions.get(subscription_id)
        if subscription is None:
            return None
        updated = subscription.model_copy(update=changes)
        self._subscriptions[subscription_id] = updated
        return updated

    def set_subscription_status(self, subscription_id: str, status: str) -> Optional[Subscription]:
        return self._update_subscription(subscription_id, status=status)

    def set_subscription_usage(self, subscription_id: str, usage_count: int) -> Optional[Subscription]:
        return self._update_subscription(
            subscription_id, usage_count=usage_count, last_used_date=date.today()
        )

    def record_usage(self, subscription_id: str) -> Optional[Subscription]:
        subscription = self._subscriptions.get(subscription_id)
        if subscription is None:
            return None
        return self._update_subscription(
            subscription_id,
            usage_count=subscription.usage_count + 1,
            last_used_date=date.today(),
            status="active",
        )

    def delete_subscription(self, subscription_id: str) -> bool:
        if self._subscriptions.pop(subscription_id, None) is None:
            return False

        for key, insight in self._insights.items():
            if insight.subscription_id == subscription_id:
                self._insights[key] = insight.model_copy(update={"subscription_id": None})
        for key, transaction in self._transactions.items():
            if transaction.subscription_id == subscription_id:
                self._transactions[key] = transaction.model_copy(update={"subscription_id": None})
        return True

    def list_bank_connections(self) -> List[BankConnection]:
        return list(self._bank_connections.values())

    def get_bank_connection(self, connection_id: str) -> Optional[BankConnection]:
        return self._bank_connections.get(connection_id)

    def create_bank_connection(self, data: BankConnectionCreate) -> BankConnection:
        connection = BankConnection(**data.model_dump())
        self._bank_connections[connection.id] = connection
        return connection

    def sync_bank_connection(self, connection_id: str) -> Optional[BankConnection]:
        connection = self._bank_connections.get(connection_id)
        if connection is None:
            return None
        updated = connection.model_copy(update={"last_sync": datetime.utcnow()})
        self._bank_connections[connection_id] = updated
        return updated

    def delete_bank_connection(self, connection_id: str) -> bool:
        return self._bank_connections.pop(connection_id, None) is not None

    def list_insights(self) -> List[Insight]:
        return list(self._insights.values())

    def create_insight(self, data: InsightCreate) -> Insight:
        insight = Insight(**data.model_dump())
        self._insights[insight.id] = insight
        return insight

    def mark_insight_read(self, insight_id: str, is_read: bool = True) -> Optional[Insight]:
        insight = self._insights.get(insight_id)
        if insight is None:
            return None
        updated = insight.model_copy(update={"is_read": is_read})
        self._insights[insight_id] = updated
        return updated

    def list_transactions(self) -> List[Transaction]:
        return list(self._transactions.values())

    def create_transaction(self, data: TransactionCreate) -> Transaction:
        transaction = Transaction(**data.model_dump())
        self._transactions[transaction.id] = transaction
        return transaction

    def list_spending_snapshots(self) -> List[SpendingSnapshot]:
        return sorted(self._snapshots.values(), key=lambda snap: snap.month)

    def save_spending_snapshot(self, snapshot: SpendingSnapshot) -> SpendingSnapshot:
        self._snapshots[snapshot.month] = snapshot
        return snapshot

    def ping(self) -> bool:
        return True
