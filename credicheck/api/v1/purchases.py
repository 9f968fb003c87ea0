"""POST /v1/quote and POST /v1/purchases - report purchase endpoints"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from credicheck.api.v1.schemas import BureauResult, PurchaseRequest, PurchaseResponse, QuoteRequest, QuoteResponse
from credicheck.api.dependencies import get_purchase_service, get_request_id
from credicheck.domain.exceptions import (
    AccountNotFoundError,
    EmptyBureauSelectionError,
    InvalidAmountError,
    NotAPartnerError,
)
from credicheck.domain.models import ReportStatus
from credicheck.domain.pricing import normalize_bureaus
from credicheck.services.purchases import PurchaseService
from credicheck.infrastructure.observability.logging import log_purchase

router = APIRouter()


@router.post("/quote", response_model=QuoteResponse)
def quote(request_body: QuoteRequest, service: PurchaseService = Depends(get_purchase_service)):
    """Price a bureau selection at the requester's rate"""
    try:
        total = service.quote(request_body.requester_id, request_body.bureaus)
        requester = service.accounts.get(request_body.requester_id)
    except AccountNotFoundError:
        raise HTTPException(status_code=404, detail="Requester not found")

    return QuoteResponse(
        requester_id=request_body.requester_id,
        requester_class=requester.requester_class.value,
        bureaus=normalize_bureaus(request_body.bureaus),
        total=total,
    )


@router.post("/purchases", response_model=PurchaseResponse)
def create_purchase(
    request_body: PurchaseRequest,
    request: Request,
    service: PurchaseService = Depends(get_purchase_service),
):
    """
    Buy credit reports.

    Flow:
    1. Quote the selection at the requester's rate
    2. Authorize payment (partner wallet or gateway)
    3. Generate one report per bureau
    4. Return per-bureau results

    Returns 402 when the partner wallet cannot cover the quote.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    consumer_id = request_body.consumer_id or request_body.requester_id

    try:
        outcome = service.purchase(
            request_body.requester_id,
            request_body.bureaus,
            consumer_id=request_body.consumer_id,
            funding_method=request_body.funding_method,
        )

    except AccountNotFoundError as e:
        logging.warning(f"Purchase rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail=str(e))

    except NotAPartnerError as e:
        logging.warning(f"Purchase rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except (EmptyBureauSelectionError, InvalidAmountError) as e:
        raise HTTPException(status_code=422, detail=str(e))

    duration_ms = (time.time() - start_time) * 1000
    bureaus = [b.value for b in request_body.bureaus]

    if not outcome.authorized:
        shortfall = outcome.authorization
        log_purchase(request_id, request_body.requester_id, consumer_id, bureaus, "insufficient_funds", outcome.quote, duration_ms)
        raise HTTPException(
            status_code=402,
            detail={
                "message": "Insufficient wallet balance",
                "balance": shortfall.balance,
                "required": shortfall.required,
            },
        )

    log_purchase(request_id, request_body.requester_id, consumer_id, bureaus, "authorized", outcome.quote, duration_ms)

    return PurchaseResponse(
        transaction_id=outcome.authorization.transaction_id,
        amount=outcome.quote,
        purpose=outcome.purpose,
        results=[
            BureauResult(
                bureau=o.bureau,
                status=ReportStatus.SUCCESS if o.succeeded else ReportStatus.FAILED,
                report_id=o.record.id if o.record else None,
                revision=o.record.revision if o.record else None,
                error=o.error,
            )
            for o in outcome.outcomes
        ],
    )
