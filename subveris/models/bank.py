from datetime import date as date_type, datetime
from typing import Literal, Optional
from uuid import uuid4

from pydantic import Field

from subveris.models.base import CamelModel

AccountType = Literal["checking", "savings", "credit"]


class BankConnectionCreate(CamelModel):
    bank_name: str = Field(min_length=1)
    account_type: AccountType
    last_sync: datetime = Field(default_factory=datetime.utcnow)
    is_connected: bool = True
    account_mask: Optional[str] = Field(default=None, max_length=4)  # Last 4 digits


class BankConnection(BankConnectionCreate):
    id: str = Field(default_factory=lambda: str(uuid4()))


class TransactionCreate(CamelModel):
    description: str
    amount: float
    date: date_type
    category: Optional[str] = None
    is_recurring: bool = False
    merchant_name: Optional[str] = None
    subscription_id: Optional[str] = None  # weak reference, not enforced


class Transaction(TransactionCreate):
    id: str = Field(default_factory=lambda: str(uuid4()))
