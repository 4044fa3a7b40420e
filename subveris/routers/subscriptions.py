import math
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from subveris.core.deps import get_store
from subveris.db.base import SubscriptionStore
from subveris.models.subscription import (
    SUBSCRIPTION_STATUSES,
    StatusUpdate,
    Subscription,
    SubscriptionCreate,
    UsageUpdate,
)

router = APIRouter()


@router.get("", response_model=List[Subscription])
def list_subscriptions(store: SubscriptionStore = Depends(get_store)):
    return store.list_subscriptions()


@router.get("/{subscription_id}", response_model=Subscription)
def get_subscription(subscription_id: str, store: SubscriptionStore = Depends(get_store)):
    subscription = store.get_subscription(subscription_id)
    if not subscription:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return subscription


@router.post("", response_model=Subscription, status_code=status.HTTP_201_CREATED)
def create_subscription(subscription: SubscriptionCreate, store: SubscriptionStore = Depends(get_store)):
    return store.create_subscription(subscription)


@router.patch("/{subscription_id}/status", response_model=Subscription)
def update_subscription_status(
    subscription_id: str,
    update: StatusUpdate,
    store: SubscriptionStore = Depends(get_store),
):
    if update.status not in SUBSCRIPTION_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status")

    subscription = store.set_subscription_status(subscription_id, update.status)
    if not subscription:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return subscription


@router.patch("/{subscription_id}/usage", response_model=Subscription)
def update_subscription_usage(
    subscription_id: str,
    update: UsageUpdate,
    store: SubscriptionStore = Depends(get_store),
):
    usage_count = update.usage_count
    # bool is an int subclass; JSON true/false is not a count. NaN and
    # Infinity parse as floats but cannot be stored as a count
    if (
        isinstance(usage_count, bool)
        or not isinstance(usage_count, (int, float))
        or (isinstance(usage_count, float) and not math.isfinite(usage_count))
        or usage_count < 0
    ):
        raise HTTPException(status_code=400, detail="Invalid usage count")

    subscription = store.set_subscription_usage(subscription_id, int(usage_count))
    if not subscription:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return subscription


@router.post("/{subscription_id}/log-usage", response_model=Subscription)
def log_subscription_usage(subscription_id: str, store: SubscriptionStore = Depends(get_store)):
    subscription = store.record_usage(subscription_id)
    if not subscription:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return subscription


@router.delete("/{subscription_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_subscription(subscription_id: str, store: SubscriptionStore = Depends(get_store)):
    deleted = store.delete_subscription(subscription_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return None
