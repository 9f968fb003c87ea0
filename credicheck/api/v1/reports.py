"""Report read endpoints - by consumer, by generating actor, and admin listings"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from credicheck.api.v1.schemas import ReportListItem, ReportResponse
from credicheck.api.dependencies import get_report_service, get_stats_service
from credicheck.domain.exceptions import ReportNotFoundError
from credicheck.services.reports import ReportService
from credicheck.services.stats import ReportListing, StatsService

router = APIRouter()


def to_list_item(listing: ReportListing) -> ReportListItem:
    report = listing.report
    return ReportListItem(
        report_id=report.id,
        bureau=report.bureau,
        status=report.status,
        score=report.score,
        score_band=report.score_band,
        risk_tier=report.risk_tier,
        revision=report.revision,
        report_date=report.report_date,
        consumer_id=report.consumer_id,
        generated_by=report.generated_by,
        transaction_id=report.transaction_id,
        customer_name=listing.customer_name,
        generator_name=listing.generator_name,
        partner_franchise_id=listing.partner_franchise_id,
        transaction_amount=listing.transaction_amount,
    )


@router.get("/reports", response_model=List[ReportResponse])
def list_reports(
    consumer_id: Optional[str] = Query(None, description="Owning consumer"),
    generated_by: Optional[str] = Query(None, description="Generating actor"),
    service: ReportService = Depends(get_report_service),
):
    """
    Reports for a consumer or generated by an actor, newest first.

    Every revision is returned; grouping by bureau is the caller's concern.
    """
    if consumer_id:
        records = service.list_by_consumer(consumer_id)
        if generated_by:
            records = [r for r in records if r.generated_by == generated_by]
    elif generated_by:
        records = service.list_by_generator(generated_by)
    else:
        raise HTTPException(status_code=422, detail="consumer_id or generated_by is required")

    return [ReportResponse.model_validate(r) for r in records]


@router.get("/reports/{report_id}", response_model=ReportResponse)
def get_report(report_id: str, service: ReportService = Depends(get_report_service)):
    try:
        return ReportResponse.model_validate(service.get(report_id))
    except ReportNotFoundError:
        raise HTTPException(status_code=404, detail="Report not found")


@router.get("/listings/reports", response_model=List[ReportListItem])
def list_all_reports(service: StatsService = Depends(get_stats_service)):
    """Admin view: every report with customer and generator names"""
    return [to_list_item(listing) for listing in service.all_report_listings()]


@router.get("/listings/partners/{partner_id}/reports", response_model=List[ReportListItem])
def list_partner_reports(partner_id: str, service: StatsService = Depends(get_stats_service)):
    """Reports a partner sold, with the funding transaction amount"""
    return [to_list_item(listing) for listing in service.partner_report_listings(partner_id)]
