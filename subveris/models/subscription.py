from datetime import date
from typing import Any, Literal, Optional, get_args
from uuid import uuid4

from pydantic import Field

from subveris.models.base import CamelModel

SubscriptionStatus = Literal["active", "unused", "to-cancel"]
SubscriptionCategory = Literal[
    "streaming",
    "software",
    "fitness",
    "cloud-storage",
    "news",
    "gaming",
    "productivity",
    "finance",
    "education",
    "other",
]
BillingFrequency = Literal["weekly", "monthly", "quarterly", "yearly"]

SUBSCRIPTION_STATUSES = get_args(SubscriptionStatus)


class SubscriptionCreate(CamelModel):
    name: str = Field(min_length=1)
    category: SubscriptionCategory
    amount: float = Field(gt=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    frequency: BillingFrequency
    next_billing_date: date
    status: SubscriptionStatus = "active"
    usage_count: int = Field(default=0, ge=0)
    last_used_date: Optional[date] = None
    logo_url: Optional[str] = None
    description: Optional[str] = None
    is_detected: bool = False


class Subscription(SubscriptionCreate):
    id: str = Field(default_factory=lambda: str(uuid4()))


class StatusUpdate(CamelModel):
    status: Any = None


class UsageUpdate(CamelModel):
    # Left untyped so the route can answer 400 for non-numbers
    usage_count: Any = None
