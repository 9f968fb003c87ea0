"""GET/PUT /v1/pricing - per-bureau fee schedules"""

import logging

from fastapi import APIRouter, Depends, Request

from credicheck.api.v1.schemas import PricingSchema
from credicheck.api.dependencies import get_pricing_repository, get_request_id
from credicheck.domain.models import PricingTable
from credicheck.infrastructure.database.repositories import PricingRepository, SqlUnitOfWork

router = APIRouter()


def to_schema(pricing: PricingTable) -> PricingSchema:
    return PricingSchema(user=dict(pricing.user), partner=dict(pricing.partner))


@router.get("/pricing", response_model=PricingSchema)
def get_pricing(pricing: PricingRepository = Depends(get_pricing_repository)):
    return to_schema(pricing.get())


@router.put("/pricing", response_model=PricingSchema)
def replace_pricing(
    request_body: PricingSchema,
    request: Request,
    pricing: PricingRepository = Depends(get_pricing_repository),
):
    """Replace the whole pricing table; applies to subsequent purchases only"""
    table = PricingTable(user=dict(request_body.user), partner=dict(request_body.partner))
    with SqlUnitOfWork(pricing.db).transaction():
        pricing.set(table)
    logging.info("Pricing updated", extra={"request_id": get_request_id(request)})
    return to_schema(pricing.get())
