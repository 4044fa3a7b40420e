from datetime import datetime
from typing import Literal, Optional
from uuid import uuid4

from pydantic import Field

from subveris.models.base import CamelModel

InsightType = Literal["savings", "alternative", "warning", "tip"]


class InsightCreate(CamelModel):
    type: InsightType
    title: str = Field(min_length=1)
    description: str
    potential_savings: Optional[float] = None
    subscription_id: Optional[str] = None  # weak reference, not enforced
    priority: int = Field(default=1, ge=1, le=3)  # 1 = high, 3 = low
    is_read: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Insight(InsightCreate):
    id: str = Field(default_factory=lambda: str(uuid4()))
