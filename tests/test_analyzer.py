from datetime import date

import pytest

from subveris.models.spending import SpendingSnapshot
from subveris.models.subscription import Subscription
from subveris.utils.analyzer import SubscriptionAnalyzer, monthly_cost, value_rating


def make_sub(name, category, amount, status="active", usage=0, frequency="monthly", sub_id=None):
    extra = {"id": sub_id} if sub_id else {}
    return Subscription(
        name=name,
        category=category,
        amount=amount,
        frequency=frequency,
        next_billing_date=date(2024, 2, 1),
        status=status,
        usage_count=usage,
        **extra,
    )


sample_subscriptions = [
    make_sub("Netflix", "streaming", 15.99, usage=12, sub_id="netflix"),
    make_sub("Spotify Premium", "streaming", 10.99, usage=25, sub_id="spotify"),
    make_sub("Adobe Creative Cloud", "software", 54.99, usage=3, sub_id="adobe"),
    make_sub("Planet Fitness", "fitness", 24.99, status="unused", usage=1, sub_id="gym"),
    make_sub("Dropbox Plus", "cloud-storage", 11.99, usage=8, sub_id="dropbox"),
    make_sub("New York Times", "news", 17.00, status="unused", usage=2, sub_id="nyt"),
    make_sub("Xbox Game Pass", "gaming", 14.99, usage=15, sub_id="xbox"),
    make_sub("LinkedIn Premium", "productivity", 29.99, status="to-cancel", usage=0, sub_id="linkedin"),
]


@pytest.mark.parametrize("amount", [0.99, 9.99, 54.99, 120.0, 1000.0])
def test_monthly_cost_frequencies(amount):
    assert monthly_cost(amount, "yearly") * 12 == pytest.approx(amount)
    assert monthly_cost(amount, "quarterly") * 3 == pytest.approx(amount)
    assert monthly_cost(amount, "weekly") == pytest.approx(amount * 4)
    assert monthly_cost(amount, "monthly") == amount


def test_monthly_cost_unknown_frequency_is_monthly():
    assert monthly_cost(12.5, "fortnightly") == 12.5


def test_weekly_multiplier_is_configurable():
    analyzer = SubscriptionAnalyzer(weekly_multiplier=52 / 12)
    sub = make_sub("Meal kit", "other", 12.0, frequency="weekly")
    assert analyzer.monthly_cost(sub) == pytest.approx(52.0)


def test_metrics():
    metrics = SubscriptionAnalyzer().metrics(sample_subscriptions)
    assert metrics.total_monthly_spend == 150.94
    assert metrics.active_subscriptions == 5
    assert metrics.unused_subscriptions == 2
    assert metrics.potential_savings == 71.98
    assert metrics.this_month_savings == metrics.potential_savings
    assert metrics.average_cost_per_use == pytest.approx(150.94 / 66, abs=0.01)


def test_metrics_keys_are_camel_case():
    data = SubscriptionAnalyzer().metrics(sample_subscriptions).to_dict()
    assert set(data) == {
        "totalMonthlySpend",
        "activeSubscriptions",
        "potentialSavings",
        "thisMonthSavings",
        "unusedSubscriptions",
        "averageCostPerUse",
    }


def test_empty_snapshot():
    analyzer = SubscriptionAnalyzer()
    assert analyzer.metrics([]).to_dict() == {
        "totalMonthlySpend": 0,
        "activeSubscriptions": 0,
        "potentialSavings": 0,
        "thisMonthSavings": 0,
        "unusedSubscriptions": 0,
        "averageCostPerUse": 0,
    }
    assert analyzer.spending_by_category([]) == []
    assert analyzer.cost_per_use([]) == []
    assert analyzer.behavioral_insights([]) == []
    assert analyzer.recommendations([]) == []


def test_average_cost_per_use_without_usage():
    subs = [make_sub("Idle", "other", 9.99, usage=0)]
    assert SubscriptionAnalyzer().metrics(subs).average_cost_per_use == 0


def test_spending_by_category():
    rows = SubscriptionAnalyzer().spending_by_category(sample_subscriptions)
    assert [row.category for row in rows] == [
        "streaming",
        "software",
        "fitness",
        "cloud-storage",
        "news",
        "gaming",
    ]
    streaming = rows[0]
    assert streaming.amount == 26.98
    assert streaming.count == 2
    assert "productivity" not in {row.category for row in rows}


def test_spending_by_category_matches_total_spend():
    analyzer = SubscriptionAnalyzer()
    rows = analyzer.spending_by_category(sample_subscriptions)
    assert sum(row.amount for row in rows) == pytest.approx(
        analyzer.metrics(sample_subscriptions).total_monthly_spend, abs=0.01
    )
    assert sum(row.percentage for row in rows) == pytest.approx(100, abs=0.05)


def test_spending_by_category_only_cancelled():
    subs = [make_sub("Gone", "news", 5.0, status="to-cancel")]
    assert SubscriptionAnalyzer().spending_by_category(subs) == []


@pytest.mark.parametrize(
    "cost, rating",
    [
        (2.00, "excellent"),
        (2.01, "good"),
        (5.00, "good"),
        (5.01, "fair"),
        (10.00, "fair"),
        (10.01, "poor"),
    ],
)
def test_value_rating_boundaries(cost, rating):
    assert value_rating(cost) == rating


def test_cost_per_use_top_offenders():
    rows = SubscriptionAnalyzer().cost_per_use(sample_subscriptions)
    assert len(rows) == 5
    assert [row.name for row in rows] == [
        "Planet Fitness",
        "Adobe Creative Cloud",
        "New York Times",
        "Dropbox Plus",
        "Netflix",
    ]
    costs = [row.cost_per_use for row in rows]
    assert costs == sorted(costs, reverse=True)
    assert rows[0].value_rating == "poor"
    assert rows[2].value_rating == "fair"
    assert rows[-1].value_rating == "excellent"


def test_cost_per_use_zero_usage_is_full_monthly_cost():
    subs = [make_sub("Unused gym", "fitness", 30.0, usage=0)]
    row = SubscriptionAnalyzer().cost_per_use(subs)[0]
    assert row.cost_per_use == 30.0
    assert row.value_rating == "poor"


def test_behavioral_insights():
    rows = SubscriptionAnalyzer().behavioral_insights(sample_subscriptions)
    assert [row.subscription_name for row in rows] == ["Planet Fitness", "New York Times"]
    gym = rows[0]
    assert gym.equivalents == [
        {"item": "coffee drinks", "count": 4, "icon": "coffee"},
        {"item": "movie tickets", "count": 1, "icon": "film"},
        {"item": "lunch meals", "count": 2, "icon": "utensils"},
    ]


def test_behavioral_insights_drop_unaffordable_items():
    subs = [make_sub("Cheap app", "other", 6.0, status="unused")]
    row = SubscriptionAnalyzer().behavioral_insights(subs)[0]
    assert row.equivalents == [{"item": "coffee drinks", "count": 1, "icon": "coffee"}]


def test_behavioral_insights_custom_basket():
    basket = [("books", 10.0, "book"), ("pizzas", 8.0, "pizza"), ("bus rides", 2.5, "bus"), ("snacks", 1.0, "cookie")]
    subs = [make_sub("Magazine", "news", 20.0, status="unused")]
    row = SubscriptionAnalyzer(basket=basket).behavioral_insights(subs)[0]
    assert [item["item"] for item in row.equivalents] == ["books", "pizzas", "bus rides"]


def test_recommendations():
    recs = SubscriptionAnalyzer().recommendations(sample_subscriptions)
    assert [rec.type for rec in recs] == ["alternative", "cancel", "cancel", "negotiate"]

    negotiate = recs[-1]
    assert negotiate.current_cost == 26.98
    assert negotiate.suggested_cost == 15.99
    assert negotiate.savings == pytest.approx(10.99)
    assert negotiate.subscription_id == "netflix"
    assert negotiate.confidence == 0.78


def test_adobe_alternative():
    subs = [make_sub("Adobe Creative Cloud", "software", 54.99, usage=3)]
    recs = SubscriptionAnalyzer().recommendations(subs)
    alternatives = [rec for rec in recs if rec.type == "alternative"]
    assert len(alternatives) == 1
    assert alternatives[0].savings == 54.99
    assert alternatives[0].confidence == 0.85
    assert alternatives[0].to_dict()["alternativeName"] == "Affinity Suite"


def test_cancel_recommendation_has_no_alternative_name():
    subs = [make_sub("Planet Fitness", "fitness", 24.99, status="unused")]
    rec = SubscriptionAnalyzer().recommendations(subs)[0]
    assert rec.type == "cancel"
    assert rec.confidence == 0.92
    assert "alternativeName" not in rec.to_dict()


def test_streaming_rotation_needs_combined_cost_over_threshold():
    subs = [
        make_sub("Netflix", "streaming", 12.0),
        make_sub("Spotify", "streaming", 10.0),
    ]
    assert SubscriptionAnalyzer().recommendations(subs) == []


def test_recommendation_ids_are_stable():
    analyzer = SubscriptionAnalyzer()
    first = [rec.id for rec in analyzer.recommendations(sample_subscriptions)]
    second = [rec.id for rec in analyzer.recommendations(sample_subscriptions)]
    assert first == second
    assert len(set(first)) == len(first)


def test_savings_projection():
    projection = SubscriptionAnalyzer().savings_projection(sample_subscriptions)
    assert projection.monthly_savings == 71.98
    assert projection.yearly_savings == pytest.approx(863.76)
    assert projection.unused_count == 2
    assert projection.to_cancel_count == 1
    assert projection.actionable_items == 3


def test_monthly_trend_uses_live_total_for_current_month():
    snapshots = [
        SpendingSnapshot(month="2026-07", amount=100.0),
        SpendingSnapshot(month="2026-09", amount=120.0),
        SpendingSnapshot(month="2026-10", amount=1.0),
    ]
    trend = SubscriptionAnalyzer().monthly_trend(snapshots, sample_subscriptions, today=date(2026, 10, 19))
    assert [row.month for row in trend] == ["2026-07", "2026-09", "2026-10"]
    assert trend[-1].amount == 150.94


def test_monthly_trend_keeps_latest_months():
    snapshots = [SpendingSnapshot(month=f"2026-0{m}", amount=float(m)) for m in range(1, 10)]
    trend = SubscriptionAnalyzer().monthly_trend(snapshots, [], today=date(2026, 10, 1), months=3)
    assert [row.month for row in trend] == ["2026-08", "2026-09", "2026-10"]
    assert trend[-1].amount == 0
