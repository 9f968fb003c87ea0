"""Dashboard statistics and enriched report listings"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional

from credicheck.domain.models import REPORT_PURCHASE_PURPOSES, CreditReportRecord, RiskTier
from credicheck.domain.stores import AccountStore, ReportStore, TransactionStore


@dataclass
class AdminStats:
    total_users: int
    total_reports: int
    total_revenue: int
    avg_score: int
    high_risk_count: int
    loan_distribution: Dict[str, int]
    bureau_distribution: Dict[str, int]


@dataclass
class PartnerStats:
    wallet_balance: int
    reports_sold: int


@dataclass
class ReportListing:
    report: CreditReportRecord
    customer_name: str
    generator_name: str
    partner_franchise_id: Optional[str] = None
    transaction_amount: Optional[int] = None


class StatsService:
    def __init__(self, accounts: AccountStore, reports: ReportStore, transactions: TransactionStore):
        self.accounts = accounts
        self.reports = reports
        self.transactions = transactions

    def admin_stats(self) -> AdminStats:
        """Revenue counts report purchases only; top-ups and adjustments are excluded"""
        reports = self.reports.list_all()
        revenue = sum(t.amount for t in self.transactions.list_all() if t.purpose in REPORT_PURCHASE_PURPOSES)
        loan_types = Counter(loan.account_type for r in reports for loan in r.loans)

        return AdminStats(
            total_users=len(self.accounts.list_all()),
            total_reports=len(reports),
            total_revenue=revenue,
            avg_score=sum(r.score for r in reports) // len(reports) if reports else 0,
            high_risk_count=sum(1 for r in reports if r.risk_tier == RiskTier.HIGH),
            loan_distribution=dict(loan_types.most_common()),
            bureau_distribution=dict(Counter(r.bureau.value for r in reports)),
        )

    def partner_stats(self, partner_id: str) -> PartnerStats:
        partner = self.accounts.get(partner_id)
        return PartnerStats(
            wallet_balance=(partner.wallet_balance or 0) if partner else 0,
            reports_sold=len(self.reports.list_by_generator(partner_id)),
        )

    def all_report_listings(self) -> List[ReportListing]:
        accounts = {a.id: a for a in self.accounts.list_all()}
        listings = []
        for report in self.reports.list_all():
            generator = accounts.get(report.generated_by)
            customer = accounts.get(report.consumer_id)
            listings.append(
                ReportListing(
                    report=report,
                    customer_name=report.consumer.name or (customer.profile.full_name if customer else "Unknown"),
                    generator_name=(
                        "Self"
                        if generator is None or report.generated_by == report.consumer_id
                        else generator.profile.full_name
                    ),
                    partner_franchise_id=generator.franchise_id if generator and generator.is_partner else None,
                )
            )
        return listings

    def partner_report_listings(self, partner_id: str) -> List[ReportListing]:
        """Reports a partner generated, with the funding transaction amount"""
        amounts = {t.id: t.amount for t in self.transactions.list_by_payer(partner_id)}
        partner = self.accounts.get(partner_id)
        return [
            ReportListing(
                report=report,
                customer_name=report.consumer.name,
                generator_name=partner.profile.full_name if partner else "Unknown",
                partner_franchise_id=partner.franchise_id if partner else None,
                transaction_amount=amounts.get(report.transaction_id),
            )
            for report in self.reports.list_by_generator(partner_id)
        ]
