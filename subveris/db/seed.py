"""
Demo data for a fresh store.

Usage:
    python -m subveris.db.seed
"""
import logging
from datetime import date

from subveris.core.config import settings
from subveris.db.base import SubscriptionStore
from subveris.db.factory import build_store
from subveris.models.bank import BankConnectionCreate
from subveris.models.insight import InsightCreate
from subveris.models.subscription import SubscriptionCreate

logger = logging.getLogger(__name__)

# name, category, amount, next billing, status, usage, last used, description
DEMO_SUBSCRIPTIONS = [
    ("Netflix", "streaming", 15.99, "2024-02-15", "active", 12, "2024-01-28", "Streaming service"),
    ("Spotify Premium", "streaming", 10.99, "2024-02-10", "active", 25, "2024-01-29", "Music streaming"),
    ("Adobe Creative Cloud", "software", 54.99, "2024-02-05", "active", 3, "2024-01-15", "Design software suite"),
    ("Planet Fitness", "fitness", 24.99, "2024-02-01", "unused", 1, "2024-01-02", "Gym membership"),
    ("Dropbox Plus", "cloud-storage", 11.99, "2024-02-20", "active", 8, "2024-01-27", "Cloud storage"),
    ("New York Times", "news", 17.00, "2024-02-08", "unused", 2, "2024-01-10", "News subscription"),
    ("Xbox Game Pass", "gaming", 14.99, "2024-02-12", "active", 15, "2024-01-29", "Gaming subscription"),
    ("LinkedIn Premium", "productivity", 29.99, "2024-02-18", "to-cancel", 0, None, "Professional networking"),
]

DEMO_INSIGHTS = [
    (
        "savings",
        "Cancel unused gym membership",
        "You've only used Planet Fitness once this month. Consider cancelling to save $24.99/mo.",
        24.99,
        1,
    ),
    (
        "alternative",
        "Switch to Affinity Photo",
        "Affinity Photo offers similar features to Adobe Photoshop for a one-time payment of $69.99.",
        54.99,
        2,
    ),
    (
        "tip",
        "Bundle your streaming services",
        "Consider Disney+ Bundle to get Hulu and ESPN+ included, potentially saving on separate subscriptions.",
        10.00,
        3,
    ),
]


def seed_store(store: SubscriptionStore) -> bool:
    """Load the demo data unless the store already has subscriptions."""
    if not store.is_empty():
        logger.info("Store already has data, skipping seed")
        return False

    for name, category, amount, next_billing, status, usage, last_used, description in DEMO_SUBSCRIPTIONS:
        store.create_subscription(
            SubscriptionCreate(
                name=name,
                category=category,
                amount=amount,
                frequency="monthly",
                next_billing_date=date.fromisoformat(next_billing),
                status=status,
                usage_count=usage,
                last_used_date=date.fromisoformat(last_used) if last_used else None,
                description=description,
                is_detected=True,
            )
        )

    store.create_bank_connection(
        BankConnectionCreate(bank_name="Chase Bank", account_type="checking", account_mask="4521")
    )

    for insight_type, title, description, savings, priority in DEMO_INSIGHTS:
        store.create_insight(
            InsightCreate(
                type=insight_type,
                title=title,
                description=description,
                potential_savings=savings,
                priority=priority,
            )
        )

    logger.info(f"Seeded {len(DEMO_SUBSCRIPTIONS)} subscriptions and {len(DEMO_INSIGHTS)} insights")
    return True


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    seed_store(build_store(settings))
