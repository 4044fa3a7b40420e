from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from subveris.core.deps import get_store
from subveris.db.base import SubscriptionStore
from subveris.models.base import CamelModel
from subveris.models.insight import Insight, InsightCreate

router = APIRouter()


class ReadFlagUpdate(CamelModel):
    is_read: bool = True


@router.get("", response_model=List[Insight])
def list_insights(store: SubscriptionStore = Depends(get_store)):
    return store.list_insights()


@router.post("", response_model=Insight, status_code=status.HTTP_201_CREATED)
def create_insight(insight: InsightCreate, store: SubscriptionStore = Depends(get_store)):
    return store.create_insight(insight)


@router.patch("/{insight_id}/read", response_model=Insight)
def mark_insight_read(
    insight_id: str,
    update: Optional[ReadFlagUpdate] = None,
    store: SubscriptionStore = Depends(get_store),
):
    """Mark an insight as read; send ``{"isRead": false}`` to flag it unread again."""
    is_read = update.is_read if update else True
    insight = store.mark_insight_read(insight_id, is_read)
    if not insight:
        raise HTTPException(status_code=404, detail="Insight not found")
    return insight
