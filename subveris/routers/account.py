"""
Account Router
Account management stubs (no real verification) and data export
"""
import csv
import io
import logging
from datetime import datetime
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from subveris.core.deps import get_store
from subveris.db.base import SubscriptionStore
from subveris.models.base import CamelModel

router = APIRouter()
logger = logging.getLogger(__name__)

EXPORT_FILENAME = "subveris-data"
CSV_FIELDS = [
    "id",
    "name",
    "category",
    "amount",
    "currency",
    "frequency",
    "nextBillingDate",
    "status",
    "usageCount",
    "lastUsedDate",
]


class EmailUpdate(CamelModel):
    email: Optional[str] = None


class PasswordUpdate(CamelModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class TwoFactorSetup(CamelModel):
    code: Optional[str] = None


@router.patch("/email")
def update_email(update: EmailUpdate) -> Dict:
    if not update.email or "@" not in update.email:
        raise HTTPException(status_code=400, detail="Invalid email address")

    logger.info("Account email change requested")
    return {"success": True, "message": "Email updated successfully"}


@router.patch("/password")
def update_password(update: PasswordUpdate) -> Dict:
    if not update.current_password or not update.new_password:
        raise HTTPException(status_code=400, detail="Missing password fields")
    if len(update.new_password) < 8:
        raise HTTPException(status_code=400, detail="Password must be at least 8 characters")

    logger.info("Account password change requested")
    return {"success": True, "message": "Password updated successfully"}


@router.post("/2fa")
def enable_two_factor(setup: TwoFactorSetup) -> Dict:
    if not setup.code or len(setup.code) != 6:
        raise HTTPException(status_code=400, detail="Invalid authentication code")

    logger.info("Two-factor authentication enabled")
    return {"success": True, "message": "Two-factor authentication enabled"}


@router.get("/export")
def export_data(store: SubscriptionStore = Depends(get_store)):
    """
    Download subscriptions, transactions and insights as a single JSON file.
    """
    export = {
        "exportDate": datetime.utcnow().isoformat(),
        "subscriptions": store.list_subscriptions(),
        "transactions": store.list_transactions(),
        "insights": store.list_insights(),
    }
    return JSONResponse(
        content=jsonable_encoder(export),
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}.json"},
    )


@router.get("/export.csv")
def export_subscriptions_csv(store: SubscriptionStore = Depends(get_store)):
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=CSV_FIELDS, extrasaction="ignore")
    writer.writeheader()
    for subscription in store.list_subscriptions():
        writer.writerow(subscription.to_wire())

    return Response(
        content=output.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}.csv"},
    )


@router.delete("")
def delete_account() -> Dict:
    logger.info("Account deletion requested")
    return {"success": True, "message": "Account deleted successfully"}
