from datetime import datetime

from pydantic import Field

from subveris.models.base import CamelModel


class SpendingSnapshot(CamelModel):
    month: str = Field(pattern=r"^\d{4}-\d{2}$")  # YYYY-MM
    amount: float
    recorded_at: datetime = Field(default_factory=datetime.utcnow)
