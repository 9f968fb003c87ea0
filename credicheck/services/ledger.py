"""Pricing & ledger - quotes, payment authorization and wallet movements"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional

from credicheck.domain.exceptions import AccountNotFoundError, InvalidAmountError, NotAPartnerError
from credicheck.domain.models import (
    Account,
    AdjustmentDirection,
    Authorization,
    Authorized,
    Bureau,
    FundingMethod,
    InsufficientFunds,
    RequesterClass,
    Transaction,
    TransactionPurpose,
)
from credicheck.domain.pricing import normalize_bureaus, quote
from credicheck.domain.stores import AccountStore, LedgerStore, PricingStore, TransactionStore, UnitOfWork
from credicheck.infrastructure.clients.gateway import PaymentGateway
from credicheck.infrastructure.observability.metrics import record_wallet_movement
from credicheck.utils.locks import KeyedLocks

logger = logging.getLogger(__name__)


# Process-wide, keyed by payer id
payer_locks = KeyedLocks()


def new_transaction_id(prefix: str = "TXN") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12].upper()}"


class PricingLedger:
    """
    Quotes report prices and moves money.

    Every wallet read-modify-write runs inside the payer's lock and a single
    unit of work, so a debit is never committed without its transaction
    record (or the other way round) and two concurrent purchases cannot
    both spend the same balance.
    """

    def __init__(
        self,
        accounts: AccountStore,
        ledger: LedgerStore,
        transactions: TransactionStore,
        pricing: PricingStore,
        uow: UnitOfWork,
        gateway: PaymentGateway | None = None,
        locks: KeyedLocks = payer_locks,
    ):
        self.accounts = accounts
        self.ledger = ledger
        self.transactions = transactions
        self.pricing = pricing
        self.uow = uow
        self.gateway = gateway or PaymentGateway()
        self.locks = locks

    def quote(self, requester_class: RequesterClass, bureaus: Iterable[Bureau]) -> int:
        return quote(self.pricing.get(), requester_class, bureaus)

    def balance(self, partner_id: str) -> int:
        self._require_partner(partner_id)
        return self.ledger.get_balance(partner_id) or 0

    def authorize(
        self,
        payer_id: str,
        amount: int,
        funding_method: FundingMethod,
        *,
        bureaus: Iterable[Bureau] = (),
        purpose: TransactionPurpose = TransactionPurpose.INITIAL,
        description: str = "",
        direction: Optional[AdjustmentDirection] = None,
    ) -> Authorization:
        """
        Authorize a payment and record it.

        Returns InsufficientFunds (nothing written) when a wallet payment
        exceeds the balance; every other path returns Authorized.

        A zero amount is a free selection: it is recorded but moves no
        balance and never reaches the gateway.

        Raises:
            InvalidAmountError: amount is negative
        """
        if amount < 0:
            raise InvalidAmountError(f"Amount must not be negative, got {amount}")
        bureau_set = tuple(normalize_bureaus(bureaus)) if bureaus else ()

        if funding_method == FundingMethod.ADMIN_ADJUSTMENT:
            if direction is None:
                raise ValueError("Administrative adjustments require a direction")
            return Authorized(self.adjust_balance(payer_id, amount, direction, description))

        if funding_method == FundingMethod.WALLET:
            self._require_partner(payer_id)
            with self.locks.for_key(payer_id):
                with self.uow.transaction():
                    balance = self.ledger.get_balance(payer_id, for_update=True) or 0
                    if balance < amount:
                        logger.info(
                            "Insufficient wallet balance",
                            extra={"payer_id": payer_id, "balance": balance, "required": amount},
                        )
                        return InsufficientFunds(payer_id=payer_id, balance=balance, required=amount)

                    self.ledger.set_balance(payer_id, balance - amount)
                    transaction = self._record(
                        payer_id, amount, FundingMethod.WALLET, purpose, bureaus=bureau_set, description=description
                    )
            record_wallet_movement(purpose.value, AdjustmentDirection.DEBIT.value)
            return Authorized(transaction)

        self._require_account(payer_id)
        confirmation = self.gateway.charge(payer_id, amount) if amount > 0 else "NO-CHARGE"
        with self.uow.transaction():
            transaction = self._record(
                payer_id,
                amount,
                FundingMethod.GATEWAY,
                purpose,
                bureaus=bureau_set,
                description=description or f"Gateway payment {confirmation}",
            )
        return Authorized(transaction)

    def adjust_balance(
        self, partner_id: str, amount: int, direction: AdjustmentDirection, reason: str
    ) -> Transaction:
        """Operator credit/debit; skips the sufficiency check but always logs"""
        _require_positive(amount)
        self._require_partner(partner_id)
        with self.locks.for_key(partner_id):
            with self.uow.transaction():
                balance = self.ledger.get_balance(partner_id, for_update=True) or 0
                delta = amount if direction == AdjustmentDirection.CREDIT else -amount
                self.ledger.set_balance(partner_id, balance + delta)
                transaction = self._record(
                    partner_id,
                    amount,
                    FundingMethod.ADMIN_ADJUSTMENT,
                    TransactionPurpose.ADMIN_ADJUSTMENT,
                    description=f"{direction.value}: {reason}",
                    direction=direction,
                    prefix="TXN-ADJ",
                )
        record_wallet_movement(TransactionPurpose.ADMIN_ADJUSTMENT.value, direction.value)
        logger.info(
            "Wallet adjusted",
            extra={"partner_id": partner_id, "direction": direction.value, "amount": amount},
        )
        return transaction

    def recharge(self, payer_id: str, amount: int) -> Transaction:
        """Gateway-confirmed wallet top-up"""
        _require_positive(amount)
        self._require_partner(payer_id)
        confirmation = self.gateway.charge(payer_id, amount)
        with self.locks.for_key(payer_id):
            with self.uow.transaction():
                balance = self.ledger.get_balance(payer_id, for_update=True) or 0
                self.ledger.set_balance(payer_id, balance + amount)
                transaction = self._record(
                    payer_id,
                    amount,
                    FundingMethod.GATEWAY,
                    TransactionPurpose.WALLET_TOPUP,
                    description=f"Wallet Recharge via Gateway ({confirmation})",
                    prefix="TXN-W",
                )
        record_wallet_movement(TransactionPurpose.WALLET_TOPUP.value, AdjustmentDirection.CREDIT.value)
        return transaction

    def _record(
        self,
        payer_id: str,
        amount: int,
        funding_method: FundingMethod,
        purpose: TransactionPurpose,
        *,
        bureaus: tuple = (),
        description: str = "",
        direction: Optional[AdjustmentDirection] = None,
        prefix: str = "TXN",
    ) -> Transaction:
        transaction = Transaction(
            id=new_transaction_id(prefix),
            payer_id=payer_id,
            amount=amount,
            bureaus=bureaus,
            created_at=datetime.now(timezone.utc),
            funding_method=funding_method,
            purpose=purpose,
            description=description,
            direction=direction,
        )
        self.transactions.append(transaction)
        return transaction

    def _require_account(self, account_id: str) -> Account:
        account = self.accounts.get(account_id)
        if account is None:
            raise AccountNotFoundError(f"Account {account_id} not found")
        return account

    def _require_partner(self, partner_id: str) -> Account:
        account = self._require_account(partner_id)
        if not account.is_partner:
            raise NotAPartnerError(f"Account {partner_id} has no wallet")
        return account


def _require_positive(amount: int) -> None:
    if amount <= 0:
        raise InvalidAmountError(f"Amount must be positive, got {amount}")
