"""Storage contracts the services depend on.

Reports and transactions are append-only. Any backend satisfying these
protocols (SQL repositories, in-memory maps) can be injected.
"""

from typing import ContextManager, List, Optional, Protocol

from credicheck.domain.models import Account, Bureau, CreditReportRecord, PricingTable, Transaction


class ReportStore(Protocol):
    def put(self, record: CreditReportRecord) -> None: ...

    def get(self, report_id: str) -> Optional[CreditReportRecord]: ...

    def list_by_consumer(self, consumer_id: str) -> List[CreditReportRecord]: ...

    def list_by_generator(self, actor_id: str) -> List[CreditReportRecord]: ...

    def list_all(self) -> List[CreditReportRecord]: ...

    def latest_revision(self, consumer_id: str, bureau: Bureau) -> int: ...


class TransactionStore(Protocol):
    def append(self, transaction: Transaction) -> None: ...

    def list_by_payer(self, payer_id: str) -> List[Transaction]: ...

    def list_all(self) -> List[Transaction]: ...


class LedgerStore(Protocol):
    def get_balance(self, partner_id: str, for_update: bool = False) -> Optional[int]: ...

    def set_balance(self, partner_id: str, balance: int) -> None: ...


class PricingStore(Protocol):
    def get(self) -> PricingTable: ...

    def set(self, pricing: PricingTable) -> None: ...


class AccountStore(Protocol):
    def add(self, account: Account) -> None: ...

    def get(self, account_id: str) -> Optional[Account]: ...

    def find_by_mobile_or_pan(self, mobile: str, pan: str) -> Optional[Account]: ...

    def list_all(self) -> List[Account]: ...

    def save(self, account: Account) -> None: ...

    def delete(self, account_id: str) -> None: ...


class UnitOfWork(Protocol):
    def transaction(self) -> ContextManager[None]:
        """Commit on normal exit, roll back when the block raises"""
        ...
