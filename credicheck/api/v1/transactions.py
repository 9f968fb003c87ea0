"""GET /v1/transactions - ledger history"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from credicheck.api.v1.schemas import TransactionSchema
from credicheck.infrastructure.database.session import get_db
from credicheck.infrastructure.database.repositories import TransactionRepository

router = APIRouter()


@router.get("/transactions", response_model=List[TransactionSchema])
def list_transactions(
    payer_id: Optional[str] = Query(None, description="Restrict to one payer; omit for the admin view"),
    db: Session = Depends(get_db),
):
    """
    Retrieve ledger transactions, newest first.

    Returns:
        Every transaction for the payer, or all transactions when no payer is given
    """
    repo = TransactionRepository(db)
    transactions = repo.list_by_payer(payer_id) if payer_id else repo.list_all()
    return [TransactionSchema.model_validate(t) for t in transactions]
