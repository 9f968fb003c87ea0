"""Unit tests for payment authorization and wallet movements"""

import threading
import time
import pytest
from credicheck.domain.exceptions import AccountNotFoundError, InvalidAmountError, NotAPartnerError
from credicheck.domain.models import (
    AdjustmentDirection,
    Authorized,
    Bureau,
    FundingMethod,
    InsufficientFunds,
    RequesterClass,
    TransactionPurpose,
)
from credicheck.infrastructure.clients.gateway import PaymentGateway


def test_quote_uses_pricing_store(services):
    assert services.ledger.quote(RequesterClass.PARTNER, [Bureau.CIBIL]) == 49
    assert services.ledger.quote(RequesterClass.USER, [Bureau.CIBIL, Bureau.CRIF]) == 198


def test_wallet_debit(services):
    """Partner with 100 paying 49 ends at 51 with one WALLET transaction"""
    services.add_partner(balance=100)

    result = services.ledger.authorize("partner-1", 49, FundingMethod.WALLET, bureaus=[Bureau.CIBIL])

    assert isinstance(result, Authorized)
    assert services.balance("partner-1") == 51
    transactions = services.transactions.list_by_payer("partner-1")
    assert len(transactions) == 1
    assert transactions[0].id == result.transaction_id
    assert transactions[0].amount == 49
    assert transactions[0].funding_method == FundingMethod.WALLET
    assert transactions[0].bureaus == (Bureau.CIBIL,)


def test_wallet_insufficient_funds(services):
    """Partner with 10 paying 49 is refused and nothing is written"""
    services.add_partner(balance=10)

    result = services.ledger.authorize("partner-1", 49, FundingMethod.WALLET)

    assert result == InsufficientFunds(payer_id="partner-1", balance=10, required=49)
    assert services.balance("partner-1") == 10
    assert services.transactions.list_all() == []


def test_wallet_exact_balance(services):
    services.add_partner(balance=49)
    assert isinstance(services.ledger.authorize("partner-1", 49, FundingMethod.WALLET), Authorized)
    assert services.balance("partner-1") == 0


def test_wallet_requires_partner(services):
    services.add_consumer()
    with pytest.raises(NotAPartnerError):
        services.ledger.authorize("consumer-1", 10, FundingMethod.WALLET)


def test_negative_amount_rejected(services):
    services.add_partner(balance=100)
    with pytest.raises(InvalidAmountError):
        services.ledger.authorize("partner-1", -1, FundingMethod.WALLET)
    assert services.balance("partner-1") == 100


def test_gateway_payment_leaves_wallet_untouched(services):
    """Gateway payments always confirm and never move a balance"""
    services.add_partner(balance=5)
    services.add_consumer()

    user_result = services.ledger.authorize("consumer-1", 99, FundingMethod.GATEWAY)
    partner_result = services.ledger.authorize("partner-1", 49, FundingMethod.GATEWAY)

    assert isinstance(user_result, Authorized)
    assert isinstance(partner_result, Authorized)
    assert user_result.transaction.funding_method == FundingMethod.GATEWAY
    assert services.balance("partner-1") == 5
    assert len(services.transactions.list_all()) == 2


def test_gateway_unknown_payer(services):
    with pytest.raises(AccountNotFoundError):
        services.ledger.authorize("ghost", 99, FundingMethod.GATEWAY)


def test_admin_credit(services):
    """Admin credit of 500 to a partner at 51 ends at 551"""
    services.add_partner(balance=51)

    transaction = services.ledger.adjust_balance("partner-1", 500, AdjustmentDirection.CREDIT, "Goodwill")

    assert services.balance("partner-1") == 551
    assert transaction.id.startswith("TXN-ADJ-")
    assert transaction.funding_method == FundingMethod.ADMIN_ADJUSTMENT
    assert transaction.purpose == TransactionPurpose.ADMIN_ADJUSTMENT
    assert transaction.direction == AdjustmentDirection.CREDIT
    assert transaction.description == "CREDIT: Goodwill"


def test_admin_debit_skips_sufficiency_check(services):
    services.add_partner(balance=20)
    transaction = services.ledger.adjust_balance("partner-1", 50, AdjustmentDirection.DEBIT, "Chargeback")
    assert services.balance("partner-1") == -30
    assert transaction.direction == AdjustmentDirection.DEBIT


def test_authorize_admin_adjustment_delegates(services):
    services.add_partner(balance=0)
    result = services.ledger.authorize(
        "partner-1",
        25,
        FundingMethod.ADMIN_ADJUSTMENT,
        description="Promo",
        direction=AdjustmentDirection.CREDIT,
    )
    assert isinstance(result, Authorized)
    assert services.balance("partner-1") == 25


def test_authorize_admin_adjustment_needs_direction(services):
    services.add_partner(balance=0)
    with pytest.raises(ValueError):
        services.ledger.authorize("partner-1", 25, FundingMethod.ADMIN_ADJUSTMENT)


@pytest.mark.parametrize("amount", [0, -10])
def test_adjustment_requires_positive_amount(services, amount):
    services.add_partner(balance=10)
    with pytest.raises(InvalidAmountError):
        services.ledger.adjust_balance("partner-1", amount, AdjustmentDirection.CREDIT, "x")


def test_recharge(services):
    """Gateway-confirmed top-up credits the wallet and logs a WALLET_TOPUP"""
    services.add_partner(balance=0)

    transaction = services.ledger.recharge("partner-1", 1000)

    assert services.balance("partner-1") == 1000
    assert transaction.id.startswith("TXN-W-")
    assert transaction.purpose == TransactionPurpose.WALLET_TOPUP
    assert transaction.funding_method == FundingMethod.GATEWAY
    assert "PG-" in transaction.description


def test_recharge_rejects_non_partner(services):
    services.add_consumer()
    with pytest.raises(NotAPartnerError):
        services.ledger.recharge("consumer-1", 100)


def test_balance_lookup(services):
    services.add_partner(balance=42)
    assert services.ledger.balance("partner-1") == 42
    with pytest.raises(AccountNotFoundError):
        services.ledger.balance("ghost")


def test_failed_record_rolls_back_debit(services, monkeypatch):
    """Debit and transaction record commit together or not at all"""
    services.add_partner(balance=100)

    def fail(transaction):
        raise RuntimeError("store unavailable")

    monkeypatch.setattr(services.transactions, "append", fail)

    with pytest.raises(RuntimeError):
        services.ledger.authorize("partner-1", 49, FundingMethod.WALLET)

    assert services.balance("partner-1") == 100


def test_concurrent_wallet_debits_never_overspend(services):
    """Ten parallel 49-unit purchases against 100 succeed exactly twice"""
    services.add_partner(balance=100)
    results = []
    barrier = threading.Barrier(10)

    def buy():
        barrier.wait()
        results.append(services.ledger.authorize("partner-1", 49, FundingMethod.WALLET))

    threads = [threading.Thread(target=buy) for _ in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sum(1 for r in results if isinstance(r, Authorized)) == 2
    assert services.balance("partner-1") == 2
    assert len(services.transactions.list_by_payer("partner-1")) == 2


def test_gateway_charge_confirmation():
    assert PaymentGateway().charge("payer", 99).startswith("PG-")
    with pytest.raises(InvalidAmountError):
        PaymentGateway().charge("payer", 0)


def test_zero_amount_authorizes_without_moving_balance(services):
    """An all-free selection records a zero transaction; negatives are refused"""
    services.add_partner(balance=0)

    result = services.ledger.authorize("partner-1", 0, FundingMethod.WALLET, bureaus=[Bureau.CIBIL])

    assert isinstance(result, Authorized)
    assert result.transaction.amount == 0
    assert services.balance("partner-1") == 0
    with pytest.raises(InvalidAmountError):
        services.ledger.authorize("partner-1", -5, FundingMethod.GATEWAY)


def test_rollback_keeps_other_payers_commits(services, monkeypatch):
    """A failed debit for one partner does not undo a debit another partner made meanwhile"""
    services.add_partner("p1", balance=100)
    services.add_partner("p2", balance=100)
    started = threading.Event()
    release = threading.Event()
    original_append = services.transactions.append
    errors = []

    def slow_failing_append(transaction):
        if transaction.payer_id == "p1":
            started.set()
            release.wait(timeout=5)
            raise RuntimeError("store unavailable")
        original_append(transaction)

    monkeypatch.setattr(services.transactions, "append", slow_failing_append)

    def buy_p1():
        try:
            services.ledger.authorize("p1", 40, FundingMethod.WALLET)
        except RuntimeError as e:
            errors.append(e)

    first = threading.Thread(target=buy_p1)
    first.start()
    assert started.wait(timeout=5)
    second = threading.Thread(target=services.ledger.authorize, args=("p2", 30, FundingMethod.WALLET))
    second.start()
    time.sleep(0.05)
    release.set()
    first.join()
    second.join()

    assert len(errors) == 1
    assert services.balance("p1") == 100
    assert services.balance("p2") == 70
    assert len(services.transactions.list_by_payer("p2")) == 1
