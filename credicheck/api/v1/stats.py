"""Dashboard statistics endpoints"""

from fastapi import APIRouter, Depends, HTTPException

from credicheck.api.v1.schemas import AdminStatsResponse, PartnerStatsResponse
from credicheck.api.dependencies import get_stats_service
from credicheck.services.stats import StatsService

router = APIRouter()


@router.get("/stats/admin", response_model=AdminStatsResponse)
def admin_stats(service: StatsService = Depends(get_stats_service)):
    """Totals across all accounts, reports and report-purchase revenue"""
    return AdminStatsResponse.model_validate(service.admin_stats())


@router.get("/stats/partners/{partner_id}", response_model=PartnerStatsResponse)
def partner_stats(partner_id: str, service: StatsService = Depends(get_stats_service)):
    partner = service.accounts.get(partner_id)
    if partner is None or not partner.is_partner:
        raise HTTPException(status_code=404, detail="Partner not found")

    stats = service.partner_stats(partner_id)
    return PartnerStatsResponse(
        partner_id=partner_id,
        wallet_balance=stats.wallet_balance,
        reports_sold=stats.reports_sold,
    )
