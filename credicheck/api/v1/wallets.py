"""Partner wallet endpoints - balance, gateway recharge, admin adjustments"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from credicheck.api.v1.schemas import AdjustmentRequest, RechargeRequest, TransactionSchema, WalletResponse
from credicheck.api.dependencies import get_ledger, get_request_id
from credicheck.domain.exceptions import AccountNotFoundError, InvalidAmountError, NotAPartnerError
from credicheck.services.ledger import PricingLedger
from credicheck.infrastructure.observability.logging import log_wallet_event

router = APIRouter()


def _wallet_error(e: Exception, request_id: str) -> HTTPException:
    logging.warning(f"Wallet operation rejected: {e}", extra={"request_id": request_id})
    if isinstance(e, AccountNotFoundError):
        return HTTPException(status_code=404, detail="Partner not found")
    return HTTPException(status_code=422, detail=str(e))


@router.get("/wallets/{partner_id}", response_model=WalletResponse)
def get_wallet(partner_id: str, request: Request, ledger: PricingLedger = Depends(get_ledger)):
    try:
        return WalletResponse(partner_id=partner_id, balance=ledger.balance(partner_id))
    except (AccountNotFoundError, NotAPartnerError) as e:
        raise _wallet_error(e, get_request_id(request))


@router.post("/wallets/{partner_id}/recharge", response_model=TransactionSchema)
def recharge_wallet(
    partner_id: str,
    request_body: RechargeRequest,
    request: Request,
    ledger: PricingLedger = Depends(get_ledger),
):
    """Top up a partner wallet through the payment gateway"""
    request_id = get_request_id(request)
    try:
        transaction = ledger.recharge(partner_id, request_body.amount)
    except (AccountNotFoundError, NotAPartnerError, InvalidAmountError) as e:
        raise _wallet_error(e, request_id)

    log_wallet_event(request_id, partner_id, transaction.purpose.value, transaction.amount, ledger.balance(partner_id))
    return TransactionSchema.model_validate(transaction)


@router.post("/wallets/{partner_id}/adjustments", response_model=TransactionSchema)
def adjust_wallet(
    partner_id: str,
    request_body: AdjustmentRequest,
    request: Request,
    ledger: PricingLedger = Depends(get_ledger),
):
    """Administrative credit or debit; no sufficiency check"""
    request_id = get_request_id(request)
    try:
        transaction = ledger.adjust_balance(
            partner_id, request_body.amount, request_body.direction, request_body.reason
        )
    except (AccountNotFoundError, NotAPartnerError, InvalidAmountError) as e:
        raise _wallet_error(e, request_id)

    log_wallet_event(request_id, partner_id, transaction.purpose.value, transaction.amount, ledger.balance(partner_id))
    return TransactionSchema.model_validate(transaction)
