from fastapi import Request

from subveris.db.base import SubscriptionStore
from subveris.utils.analyzer import SubscriptionAnalyzer


def get_store(request: Request) -> SubscriptionStore:
    return request.app.state.store


def get_analyzer(request: Request) -> SubscriptionAnalyzer:
    return request.app.state.analyzer
