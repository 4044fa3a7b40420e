from __future__ import annotations

import math
import uuid
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from pydantic.alias_generators import to_camel

from subveris.models.spending import SpendingSnapshot
from subveris.models.subscription import Subscription

# Namespace for recommendation ids derived from (type, subscription_id)
RECOMMENDATION_NAMESPACE = uuid.UUID("5b0f3c1e-8a57-4f7e-9d43-2f1c6a9e0b7d")

# Reference basket for opportunity costs: (item, unit cost, icon)
DEFAULT_BASKET: Tuple[Tuple[str, float, str], ...] = (
    ("coffee drinks", 5.0, "coffee"),
    ("movie tickets", 15.0, "film"),
    ("lunch meals", 12.0, "utensils"),
)

MAX_EQUIVALENTS = 3
COST_PER_USE_LIMIT = 5
STREAMING_ROTATION_THRESHOLD = 25.0
STREAMING_ROTATION_COST = 15.99


def monthly_cost(amount: float, frequency: str, weekly_multiplier: float = 4.0) -> float:
    """
    Normalize a billing amount to its per-month equivalent.
    Unknown frequencies are treated as monthly.
    """
    if frequency == "yearly":
        return amount / 12
    if frequency == "quarterly":
        return amount / 3
    if frequency == "weekly":
        return amount * weekly_multiplier
    return amount


def value_rating(cost_per_use: float) -> str:
    if cost_per_use <= 2:
        return "excellent"
    if cost_per_use <= 5:
        return "good"
    if cost_per_use <= 10:
        return "fair"
    return "poor"


def recommendation_id(rec_type: str, subscription_id: str) -> str:
    return str(uuid.uuid5(RECOMMENDATION_NAMESPACE, f"{rec_type}:{subscription_id}"))


class _Row:
    """Dataclass mixin rendering rows with camelCase keys for JSON responses."""

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        return {to_camel(k): v for k, v in data.items() if v is not None}


@dataclass
class DashboardMetrics(_Row):
    total_monthly_spend: float = 0.0
    active_subscriptions: int = 0
    potential_savings: float = 0.0
    this_month_savings: float = 0.0
    unused_subscriptions: int = 0
    average_cost_per_use: float = 0.0


@dataclass
class CategorySpending(_Row):
    category: str
    amount: float
    percentage: float
    count: int


@dataclass
class CostPerUse(_Row):
    subscription_id: str
    name: str
    monthly_amount: float
    usage_count: int
    cost_per_use: float
    value_rating: str


@dataclass
class OpportunityCost(_Row):
    subscription_id: str
    subscription_name: str
    monthly_amount: float
    equivalents: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class Recommendation(_Row):
    id: str
    type: str
    title: str
    description: str
    current_cost: float
    suggested_cost: float
    savings: float
    subscription_id: str
    confidence: float
    alternative_name: Optional[str] = None


@dataclass
class SavingsProjection(_Row):
    monthly_savings: float = 0.0
    yearly_savings: float = 0.0
    unused_count: int = 0
    to_cancel_count: int = 0
    actionable_items: int = 0


@dataclass
class MonthlySpending(_Row):
    month: str
    amount: float


class SubscriptionAnalyzer:
    """
    Pure analytics over a snapshot of subscriptions. Every method takes the
    full list fetched from the store and never mutates it; empty input gives
    zero-valued or empty results.
    """

    def __init__(
        self,
        weekly_multiplier: float = 4.0,
        basket: Sequence[Tuple[str, float, str]] = DEFAULT_BASKET,
    ) -> None:
        self._weekly_multiplier = weekly_multiplier
        self._basket = tuple(basket)

    def monthly_cost(self, sub: Subscription) -> float:
        return monthly_cost(sub.amount, sub.frequency, self._weekly_multiplier)

    def total_monthly_spend(self, subs: Iterable[Subscription]) -> float:
        return sum(self.monthly_cost(sub) for sub in subs if sub.status != "to-cancel")

    def potential_savings(self, subs: Iterable[Subscription]) -> float:
        return sum(
            self.monthly_cost(sub) for sub in subs if sub.status in ("unused", "to-cancel")
        )

    def metrics(self, subs: List[Subscription]) -> DashboardMetrics:
        total = self.total_monthly_spend(subs)
        savings = self.potential_savings(subs)
        total_usage = sum(sub.usage_count for sub in subs)
        average = total / total_usage if total_usage > 0 else 0.0

        return DashboardMetrics(
            total_monthly_spend=round(total, 2),
            active_subscriptions=sum(1 for sub in subs if sub.status == "active"),
            potential_savings=round(savings, 2),
            # Projected, not realized: mirrors potential_savings
            this_month_savings=round(savings, 2),
            unused_subscriptions=sum(1 for sub in subs if sub.status == "unused"),
            average_cost_per_use=round(average, 2),
        )

    def spending_by_category(self, subs: List[Subscription]) -> List[CategorySpending]:
        # dicts keep first-occurrence order of categories
        amounts: Dict[str, float] = defaultdict(float)
        counts: Dict[str, int] = defaultdict(int)
        for sub in subs:
            if sub.status == "to-cancel":
                continue
            amounts[sub.category] += self.monthly_cost(sub)
            counts[sub.category] += 1

        total = sum(amounts.values())
        return [
            CategorySpending(
                category=category,
                amount=round(amount, 2),
                percentage=round(amount / total * 100, 2) if total > 0 else 0.0,
                count=counts[category],
            )
            for category, amount in amounts.items()
        ]

    def cost_per_use(self, subs: List[Subscription]) -> List[CostPerUse]:
        """
        Worst-value subscriptions first, capped at the top five.
        Zero usage counts as one use at full monthly cost.
        """
        scored = []
        for sub in subs:
            if sub.status == "to-cancel":
                continue
            monthly = self.monthly_cost(sub)
            per_use = monthly / sub.usage_count if sub.usage_count > 0 else monthly
            scored.append((per_use, monthly, sub))

        scored.sort(key=lambda item: item[0], reverse=True)
        return [
            CostPerUse(
                subscription_id=sub.id,
                name=sub.name,
                monthly_amount=round(monthly, 2),
                usage_count=sub.usage_count,
                cost_per_use=round(per_use, 2),
                value_rating=value_rating(per_use),
            )
            for per_use, monthly, sub in scored[:COST_PER_USE_LIMIT]
        ]

    def opportunity_costs(self, monthly_amount: float) -> List[Dict[str, Any]]:
        equivalents = []
        for item, unit_cost, icon in self._basket:
            count = math.floor(monthly_amount / unit_cost)
            if count >= 1:
                equivalents.append({"item": item, "count": count, "icon": icon})
        return equivalents[:MAX_EQUIVALENTS]

    def behavioral_insights(self, subs: List[Subscription]) -> List[OpportunityCost]:
        results = []
        for sub in subs:
            if sub.status != "unused":
                continue
            monthly = self.monthly_cost(sub)
            results.append(
                OpportunityCost(
                    subscription_id=sub.id,
                    subscription_name=sub.name,
                    monthly_amount=round(monthly, 2),
                    equivalents=self.opportunity_costs(monthly),
                )
            )
        return results

    def recommendations(self, subs: List[Subscription]) -> List[Recommendation]:
        """
        Rule-based suggestions. Rules are independent and may overlap;
        ids are stable for the same (type, subscription) pair.
        """
        recommendations: List[Recommendation] = []

        adobe = next((sub for sub in subs if "adobe" in sub.name.lower()), None)
        if adobe is not None:
            cost = round(self.monthly_cost(adobe), 2)
            recommendations.append(
                Recommendation(
                    id=recommendation_id("alternative", adobe.id),
                    type="alternative",
                    title="Switch from Adobe to Affinity",
                    description=(
                        "Affinity offers similar professional design tools with a "
                        "one-time purchase instead of monthly fees."
                    ),
                    current_cost=cost,
                    suggested_cost=0.0,
                    savings=cost,
                    subscription_id=adobe.id,
                    alternative_name="Affinity Suite",
                    confidence=0.85,
                )
            )

        for sub in subs:
            if sub.status != "unused":
                continue
            cost = round(self.monthly_cost(sub), 2)
            recommendations.append(
                Recommendation(
                    id=recommendation_id("cancel", sub.id),
                    type="cancel",
                    title=f"Cancel {sub.name}",
                    description=(
                        f"You've barely used {sub.name} this month. "
                        "Consider cancelling to save money."
                    ),
                    current_cost=cost,
                    suggested_cost=0.0,
                    savings=cost,
                    subscription_id=sub.id,
                    confidence=0.92,
                )
            )

        streaming = [sub for sub in subs if sub.category == "streaming" and sub.status == "active"]
        if len(streaming) > 1:
            combined = sum(self.monthly_cost(sub) for sub in streaming)
            if combined > STREAMING_ROTATION_THRESHOLD:
                recommendations.append(
                    Recommendation(
                        id=recommendation_id("negotiate", streaming[0].id),
                        type="negotiate",
                        title="Rotate streaming services",
                        description=(
                            "Consider subscribing to one streaming service at a time and "
                            "rotating monthly based on what you want to watch."
                        ),
                        current_cost=round(combined, 2),
                        suggested_cost=STREAMING_ROTATION_COST,
                        savings=round(combined - STREAMING_ROTATION_COST, 2),
                        subscription_id=streaming[0].id,
                        confidence=0.78,
                    )
                )

        return recommendations

    def savings_projection(self, subs: List[Subscription]) -> SavingsProjection:
        savings = self.potential_savings(subs)
        unused = sum(1 for sub in subs if sub.status == "unused")
        to_cancel = sum(1 for sub in subs if sub.status == "to-cancel")
        return SavingsProjection(
            monthly_savings=round(savings, 2),
            yearly_savings=round(savings * 12, 2),
            unused_count=unused,
            to_cancel_count=to_cancel,
            actionable_items=unused + to_cancel,
        )

    def monthly_trend(
        self,
        snapshots: List[SpendingSnapshot],
        subs: List[Subscription],
        today: Optional[date] = None,
        months: int = 6,
    ) -> List[MonthlySpending]:
        """
        Recorded monthly totals, oldest first, with the current month
        replaced by the live total of the given subscriptions.
        """
        today = today or date.today()
        by_month = {snap.month: snap.amount for snap in snapshots}
        by_month[today.strftime("%Y-%m")] = self.total_monthly_spend(subs)

        ordered = sorted(by_month.items())[-months:] if months > 0 else []
        return [MonthlySpending(month=month, amount=round(amount, 2)) for month, amount in ordered]
