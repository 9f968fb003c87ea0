"""Purchase flow - quote, authorize, then generate one report per bureau"""

import logging
from typing import Iterable, Optional

from credicheck.domain.exceptions import AccountNotFoundError, ConsumerNotFoundError
from credicheck.domain.models import (
    Account,
    Bureau,
    FundingMethod,
    PurchaseOutcome,
    TransactionPurpose,
)
from credicheck.domain.pricing import normalize_bureaus
from credicheck.domain.stores import AccountStore
from credicheck.infrastructure.observability.metrics import record_purchase
from credicheck.services.ledger import PricingLedger
from credicheck.services.reports import ReportService

logger = logging.getLogger(__name__)


class PurchaseService:
    """Orchestrates a report purchase for a requester"""

    def __init__(self, accounts: AccountStore, ledger: PricingLedger, reports: ReportService):
        self.accounts = accounts
        self.ledger = ledger
        self.reports = reports

    def quote(self, requester_id: str, bureaus: Iterable[Bureau]) -> int:
        requester = self._require_requester(requester_id)
        return self.ledger.quote(requester.requester_class, bureaus)

    def purchase(
        self,
        requester_id: str,
        bureaus: Iterable[Bureau],
        *,
        consumer_id: Optional[str] = None,
        funding_method: Optional[FundingMethod] = None,
    ) -> PurchaseOutcome:
        """
        Buy reports for a consumer.

        Flow:
        1. Resolve requester and consumer (consumer defaults to requester)
        2. Quote at the requester's rate
        3. Authorize payment (wallet for partners, gateway otherwise)
        4. Generate one report per bureau, isolating per-bureau failures

        Insufficient wallet funds come back in the outcome; no report is
        generated in that case.
        """
        selection = normalize_bureaus(bureaus)
        requester = self._require_requester(requester_id)
        consumer_id = consumer_id or requester_id
        if self.accounts.get(consumer_id) is None:
            raise ConsumerNotFoundError(f"Consumer {consumer_id} not found")

        if funding_method is None:
            funding_method = FundingMethod.WALLET if requester.is_partner else FundingMethod.GATEWAY
        purpose = (
            TransactionPurpose.REFRESH
            if self.reports.has_reports(consumer_id, selection)
            else TransactionPurpose.INITIAL
        )

        total = self.ledger.quote(requester.requester_class, selection)
        authorization = self.ledger.authorize(
            requester_id,
            total,
            funding_method,
            bureaus=selection,
            purpose=purpose,
            description=f"{purpose.value.title()} report purchase for {consumer_id}",
        )
        outcome = PurchaseOutcome(quote=total, authorization=authorization, purpose=purpose)
        record_purchase(outcome.authorized, funding_method.value, requester.requester_class.value, total)

        if not outcome.authorized:
            return outcome

        outcome.outcomes = self.reports.generate_batch(
            consumer_id, requester_id, selection, authorization.transaction_id
        )
        failed = [o.bureau.value for o in outcome.outcomes if not o.succeeded]
        if failed:
            logger.warning(
                "Purchase completed with failed bureaus",
                extra={"transaction_id": authorization.transaction_id, "failed_bureaus": failed},
            )
        return outcome

    def _require_requester(self, requester_id: str) -> Account:
        requester = self.accounts.get(requester_id)
        if requester is None:
            raise AccountNotFoundError(f"Account {requester_id} not found")
        return requester
