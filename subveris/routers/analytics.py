"""
Analytics Router
Dashboard metrics, spending breakdowns and rule-based savings advice.
Each request reads the full subscription list once; nothing is cached.
"""
from typing import Dict, List

from fastapi import APIRouter, Depends

from subveris.core.deps import get_analyzer, get_store
from subveris.db.base import SubscriptionStore
from subveris.utils.analyzer import SubscriptionAnalyzer

router = APIRouter()


@router.get("/metrics")
def get_metrics(
    store: SubscriptionStore = Depends(get_store),
    analyzer: SubscriptionAnalyzer = Depends(get_analyzer),
) -> Dict:
    return analyzer.metrics(store.list_subscriptions()).to_dict()


@router.get("/spending/monthly")
def get_monthly_spending(
    months: int = 6,
    store: SubscriptionStore = Depends(get_store),
    analyzer: SubscriptionAnalyzer = Depends(get_analyzer),
) -> List[Dict]:
    """
    Recorded monthly totals (oldest first) ending with the live figure for
    the current month.
    """
    trend = analyzer.monthly_trend(
        store.list_spending_snapshots(),
        store.list_subscriptions(),
        months=months,
    )
    return [row.to_dict() for row in trend]


@router.get("/spending/category")
def get_spending_by_category(
    store: SubscriptionStore = Depends(get_store),
    analyzer: SubscriptionAnalyzer = Depends(get_analyzer),
) -> List[Dict]:
    return [row.to_dict() for row in analyzer.spending_by_category(store.list_subscriptions())]


@router.get("/analysis/cost-per-use")
def get_cost_per_use(
    store: SubscriptionStore = Depends(get_store),
    analyzer: SubscriptionAnalyzer = Depends(get_analyzer),
) -> List[Dict]:
    return [row.to_dict() for row in analyzer.cost_per_use(store.list_subscriptions())]


@router.get("/savings/projection")
def get_savings_projection(
    store: SubscriptionStore = Depends(get_store),
    analyzer: SubscriptionAnalyzer = Depends(get_analyzer),
) -> Dict:
    return analyzer.savings_projection(store.list_subscriptions()).to_dict()


@router.get("/insights/behavioral")
def get_behavioral_insights(
    store: SubscriptionStore = Depends(get_store),
    analyzer: SubscriptionAnalyzer = Depends(get_analyzer),
) -> List[Dict]:
    return [row.to_dict() for row in analyzer.behavioral_insights(store.list_subscriptions())]


@router.get("/recommendations")
def get_recommendations(
    store: SubscriptionStore = Depends(get_store),
    analyzer: SubscriptionAnalyzer = Depends(get_analyzer),
) -> List[Dict]:
    return [row.to_dict() for row in analyzer.recommendations(store.list_subscriptions())]
