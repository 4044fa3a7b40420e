import logging

from subveris.core.config import Settings
from subveris.db.base import SubscriptionStore
from subveris.db.dynamo import DynamoStore
from subveris.db.memory import MemoryStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> SubscriptionStore:
    """Construct the configured store once at startup."""
    backend = settings.STORAGE_BACKEND.lower()

    if backend == "dynamo":
        logger.info(f"Using DynamoDB storage in {settings.DYNAMO_REGION}")
        return DynamoStore(
            region=settings.DYNAMO_REGION,
            subscriptions_table=settings.DYNAMO_SUBSCRIPTIONS_TABLE,
            insights_table=settings.DYNAMO_INSIGHTS_TABLE,
            bank_connections_table=settings.DYNAMO_BANK_CONNECTIONS_TABLE,
            transactions_table=settings.DYNAMO_TRANSACTIONS_TABLE,
            snapshots_table=settings.DYNAMO_SNAPSHOTS_TABLE,
        )

    if backend != "memory":
        raise ValueError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND!r}")

    logger.info("Using in-memory storage")
    return MemoryStore()
