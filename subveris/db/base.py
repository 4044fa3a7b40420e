"""
Storage port shared by every backend.

Routers and the analytics engine only ever talk to ``SubscriptionStore``;
backend row shapes (snake_case columns, Decimal numbers) stay inside the
concrete implementations.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from subveris.models.bank import BankConnection, BankConnectionCreate, Transaction, TransactionCreate
from subveris.models.insight import Insight, InsightCreate
from subveris.models.spending import SpendingSnapshot
from subveris.models.subscription import Subscription, SubscriptionCreate


class StorageError(Exception):
    """The backing store could not complete an operation (connectivity, serialization)."""


class SubscriptionStore(ABC):
    # Subscriptions
    @abstractmethod
    def list_subscriptions(self) -> List[Subscription]:
        ...

    @abstractmethod
    def get_subscription(self, subscription_id: str) -> Optional[Subscription]:
        ...

    @abstractmethod
    def create_subscription(self, data: SubscriptionCreate) -> Subscription:
        ...

    @abstractmethod
    def set_subscription_status(self, subscription_id: str, status: str) -> Optional[Subscription]:
        ...

    @abstractmethod
    def set_subscription_usage(self, subscription_id: str, usage_count: int) -> Optional[Subscription]:
        """Overwrite the usage count and stamp last_used_date with today."""

    @abstractmethod
    def record_usage(self, subscription_id: str) -> Optional[Subscription]:
        """Add one use, stamp last_used_date and force the status back to active."""

    @abstractmethod
    def delete_subscription(self, subscription_id: str) -> bool:
        """
        Remove a subscription. Insights and transactions pointing at it keep
        their rows but have subscription_id cleared.
        """

    # Bank connections
    @abstractmethod
    def list_bank_connections(self) -> List[BankConnection]:
        ...

    @abstractmethod
    def get_bank_connection(self, connection_id: str) -> Optional[BankConnection]:
        ...

    @abstractmethod
    def create_bank_connection(self, data: BankConnectionCreate) -> BankConnection:
        ...

    @abstractmethod
    def sync_bank_connection(self, connection_id: str) -> Optional[BankConnection]:
        ...

    @abstractmethod
    def delete_bank_connection(self, connection_id: str) -> bool:
        ...

    # Insights
    @abstractmethod
    def list_insights(self) -> List[Insight]:
        ...

    @abstractmethod
    def create_insight(self, data: InsightCreate) -> Insight:
        ...

    @abstractmethod
    def mark_insight_read(self, insight_id: str, is_read: bool = True) -> Optional[Insight]:
        ...

    # Transactions
    @abstractmethod
    def list_transactions(self) -> List[Transaction]:
        ...

    @abstractmethod
    def create_transaction(self, data: TransactionCreate) -> Transaction:
        ...

    # Monthly spending history
    @abstractmethod
    def list_spending_snapshots(self) -> List[SpendingSnapshot]:
        ...

    @abstractmethod
    def save_spending_snapshot(self, snapshot: SpendingSnapshot) -> SpendingSnapshot:
        """Insert or replace the snapshot for ``snapshot.month``."""

    # Housekeeping
    @abstractmethod
    def ping(self) -> bool:
        ...

    def is_empty(self) -> bool:
        return not self.list_subscriptions()
