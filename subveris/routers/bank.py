"""
Bank Router
Simulated bank connections and the transactions imported through them
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from subveris.core.deps import get_store
from subveris.db.base import SubscriptionStore
from subveris.models.bank import BankConnection, BankConnectionCreate, Transaction, TransactionCreate

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/bank-connections", response_model=List[BankConnection])
def list_bank_connections(store: SubscriptionStore = Depends(get_store)):
    return store.list_bank_connections()


@router.post("/bank-connections", response_model=BankConnection, status_code=status.HTTP_201_CREATED)
def create_bank_connection(connection: BankConnectionCreate, store: SubscriptionStore = Depends(get_store)):
    created = store.create_bank_connection(connection)
    logger.info(f"Connected {created.bank_name} ({created.account_type}) as {created.id}")
    return created


@router.patch("/bank-connections/{connection_id}/sync", response_model=BankConnection)
def sync_bank_connection(connection_id: str, store: SubscriptionStore = Depends(get_store)):
    connection = store.sync_bank_connection(connection_id)
    if not connection:
        raise HTTPException(status_code=404, detail="Bank connection not found")
    return connection


@router.delete("/bank-connections/{connection_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_bank_connection(connection_id: str, store: SubscriptionStore = Depends(get_store)):
    deleted = store.delete_bank_connection(connection_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Bank connection not found")
    return None


@router.get("/transactions", response_model=List[Transaction])
def list_transactions(store: SubscriptionStore = Depends(get_store)):
    return store.list_transactions()


@router.post("/transactions", response_model=Transaction, status_code=status.HTTP_201_CREATED)
def create_transaction(transaction: TransactionCreate, store: SubscriptionStore = Depends(get_store)):
    return store.create_transaction(transaction)
