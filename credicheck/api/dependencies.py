"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from credicheck.config import settings
from credicheck.domain.models import PricingTable
from credicheck.infrastructure.clients.gateway import PaymentGateway
from credicheck.infrastructure.database.repositories import (
    AccountRepository,
    PricingRepository,
    ReportRepository,
    SqlUnitOfWork,
    TransactionRepository,
)
from credicheck.infrastructure.database.session import get_db
from credicheck.services.accounts import AccountService
from credicheck.services.ledger import PricingLedger
from credicheck.services.purchases import PurchaseService
from credicheck.services.reports import ReportService
from credicheck.services.stats import StatsService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_payment_gateway() -> PaymentGateway:
    """Provide payment gateway client instance"""
    return PaymentGateway()


def get_pricing_repository(db: Session = Depends(get_db)) -> PricingRepository:
    return PricingRepository(db, default=PricingTable.flat(settings.default_user_price, settings.default_partner_price))


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    return AccountService(AccountRepository(db), SqlUnitOfWork(db))


def get_ledger(
    db: Session = Depends(get_db),
    pricing: PricingRepository = Depends(get_pricing_repository),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> PricingLedger:
    accounts = AccountRepository(db)
    return PricingLedger(
        accounts=accounts,
        ledger=accounts,
        transactions=TransactionRepository(db),
        pricing=pricing,
        uow=SqlUnitOfWork(db),
        gateway=gateway,
    )


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    return ReportService(AccountRepository(db), ReportRepository(db), SqlUnitOfWork(db))


def get_purchase_service(
    db: Session = Depends(get_db),
    ledger: PricingLedger = Depends(get_ledger),
    reports: ReportService = Depends(get_report_service),
) -> PurchaseService:
    return PurchaseService(AccountRepository(db), ledger, reports)


def get_stats_service(db: Session = Depends(get_db)) -> StatsService:
    return StatsService(AccountRepository(db), ReportRepository(db), TransactionRepository(db))
