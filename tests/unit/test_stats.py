"""Unit tests for dashboard statistics and listings"""

from credicheck.domain.models import AdjustmentDirection, Bureau


def test_admin_stats_empty(services):
    stats = services.stats_service.admin_stats()
    assert stats.total_reports == 0
    assert stats.total_revenue == 0
    assert stats.avg_score == 0
    assert stats.loan_distribution == {}


def test_revenue_counts_report_purchases_only(services):
    """Top-ups and adjustments are not revenue"""
    services.add_partner(balance=0)
    services.add_consumer()
    services.ledger.recharge("partner-1", 1000)
    services.ledger.adjust_balance("partner-1", 200, AdjustmentDirection.CREDIT, "Promo")
    services.purchase_service.purchase("partner-1", [Bureau.CIBIL, Bureau.CRIF], consumer_id="consumer-1")
    services.purchase_service.purchase("consumer-1", [Bureau.EXPERIAN])

    stats = services.stats_service.admin_stats()

    assert stats.total_revenue == 98 + 99
    assert stats.total_users == 2
    assert stats.total_reports == 3
    assert stats.bureau_distribution == {"CIBIL": 1, "CRIF": 1, "EXPERIAN": 1}


def test_admin_stats_aggregates_reports(services):
    services.add_consumer()
    services.purchase_service.purchase("consumer-1", list(Bureau))
    reports = services.report_service.list_all()

    stats = services.stats_service.admin_stats()

    assert stats.avg_score == sum(r.score for r in reports) // len(reports)
    assert stats.high_risk_count == sum(1 for r in reports if r.risk_tier.value == "HIGH")
    assert sum(stats.loan_distribution.values()) == sum(len(r.loans) for r in reports)


def test_partner_stats(services):
    services.add_partner(balance=100)
    services.add_consumer()
    services.purchase_service.purchase("partner-1", [Bureau.CIBIL], consumer_id="consumer-1")

    stats = services.stats_service.partner_stats("partner-1")

    assert stats.wallet_balance == 51
    assert stats.reports_sold == 1


def test_report_listings_name_generators(services):
    """Self-purchased reports list the generator as Self"""
    services.add_partner(balance=100)
    services.add_consumer()
    services.purchase_service.purchase("partner-1", [Bureau.CIBIL], consumer_id="consumer-1")
    services.purchase_service.purchase("consumer-1", [Bureau.CRIF])

    listings = {item.report.bureau: item for item in services.stats_service.all_report_listings()}

    assert listings[Bureau.CIBIL].generator_name == "Partner One"
    assert listings[Bureau.CIBIL].partner_franchise_id == "FR-1001"
    assert listings[Bureau.CRIF].generator_name == "Self"
    assert listings[Bureau.CRIF].partner_franchise_id is None
    assert listings[Bureau.CRIF].customer_name == "Asha Verma"


def test_partner_listings_carry_transaction_amount(services):
    services.add_partner(balance=200)
    services.add_consumer()
    services.purchase_service.purchase("partner-1", [Bureau.CIBIL, Bureau.EQUIFAX], consumer_id="consumer-1")

    listings = services.stats_service.partner_report_listings("partner-1")

    assert len(listings) == 2
    assert {item.transaction_amount for item in listings} == {98}
    assert {item.customer_name for item in listings} == {"Asha Verma"}
