"""Payment gateway client for on-demand report purchases and wallet top-ups"""

import logging
import uuid

from credicheck.domain.exceptions import InvalidAmountError

logger = logging.getLogger(__name__)


class PaymentGateway:
    """
    Simulated external gateway.

    Every charge is confirmed; declines are not modeled. The returned
    confirmation reference is recorded in the transaction description.
    """

    def charge(self, payer_id: str, amount: int) -> str:
        if amount <= 0:
            raise InvalidAmountError(f"Gateway charge must be positive, got {amount}")
        confirmation = f"PG-{uuid.uuid4().hex[:10].upper()}"
        logger.info("Gateway charge confirmed", extra={"payer_id": payer_id, "amount": amount, "confirmation": confirmation})
        return confirmation
