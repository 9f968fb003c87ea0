"""In-memory store implementations backed by plain dicts and lists"""

import copy
import threading
from contextlib import contextmanager
from dataclasses import replace
from typing import Dict, Iterator, List, Optional

from credicheck.domain.exceptions import RevisionConflictError
from credicheck.domain.models import Account, Bureau, CreditReportRecord, PricingTable, Transaction


class MemoryState:
    """Shared state behind all in-memory stores"""

    def __init__(self, pricing: PricingTable):
        self.accounts: Dict[str, Account] = {}
        self.reports: List[CreditReportRecord] = []
        self.transactions: List[Transaction] = []
        self.pricing = pricing
        # Held for a whole unit of work; a rollback restores the full state
        self.lock = threading.RLock()

    def snapshot(self) -> dict:
        return {
            "accounts": copy.deepcopy(self.accounts),
            "reports": list(self.reports),
            "transactions": list(self.transactions),
            "pricing": self.pricing,
        }

    def restore(self, snapshot: dict) -> None:
        self.accounts = snapshot["accounts"]
        self.reports = snapshot["reports"]
        self.transactions = snapshot["transactions"]
        self.pricing = snapshot["pricing"]


class MemoryUnitOfWork:
    """
    Serializes units of work on the shared state and restores the
    pre-transaction snapshot when the block raises.

    Restoring is only safe because no other unit of work can commit
    between the snapshot and the restore.
    """

    def __init__(self, state: MemoryState):
        self.state = state

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self.state.lock:
            snapshot = self.state.snapshot()
            try:
                yield
            except Exception:
                self.state.restore(snapshot)
                raise


class MemoryAccountStore:
    def __init__(self, state: MemoryState):
        self.state = state

    def add(self, account: Account) -> None:
        self.state.accounts[account.id] = replace(account)

    def get(self, account_id: str) -> Optional[Account]:
        account = self.state.accounts.get(account_id)
        return replace(account) if account else None

    def find_by_mobile_or_pan(self, mobile: str, pan: str) -> Optional[Account]:
        for account in self.state.accounts.values():
            if account.profile.mobile == mobile or account.profile.pan == pan:
                return replace(account)
        return None

    def list_all(self) -> List[Account]:
        return [replace(a) for a in self.state.accounts.values()]

    def save(self, account: Account) -> None:
        self.state.accounts[account.id] = replace(account)

    def delete(self, account_id: str) -> None:
        self.state.accounts.pop(account_id, None)


class MemoryLedgerStore:
    def __init__(self, state: MemoryState):
        self.state = state

    def get_balance(self, partner_id: str, for_update: bool = False) -> Optional[int]:
        account = self.state.accounts.get(partner_id)
        return account.wallet_balance if account else None

    def set_balance(self, partner_id: str, balance: int) -> None:
        self.state.accounts[partner_id].wallet_balance = balance


class MemoryTransactionStore:
    def __init__(self, state: MemoryState):
        self.state = state

    def append(self, transaction: Transaction) -> None:
        self.state.transactions.append(transaction)

    def list_by_payer(self, payer_id: str) -> List[Transaction]:
        return [t for t in reversed(self.state.transactions) if t.payer_id == payer_id]

    def list_all(self) -> List[Transaction]:
        return list(reversed(self.state.transactions))


class MemoryReportStore:
    def __init__(self, state: MemoryState):
        self.state = state

    def put(self, record: CreditReportRecord) -> None:
        lineage = (record.consumer_id, record.bureau, record.revision)
        if any((r.consumer_id, r.bureau, r.revision) == lineage for r in self.state.reports):
            raise RevisionConflictError(
                f"Revision {record.revision} already exists for {record.consumer_id}/{record.bureau.value}"
            )
        self.state.reports.append(record)

    def get(self, report_id: str) -> Optional[CreditReportRecord]:
        return next((r for r in self.state.reports if r.id == report_id), None)

    def list_by_consumer(self, consumer_id: str) -> List[CreditReportRecord]:
        return [r for r in reversed(self.state.reports) if r.consumer_id == consumer_id]

    def list_by_generator(self, actor_id: str) -> List[CreditReportRecord]:
        return [r for r in reversed(self.state.reports) if r.generated_by == actor_id]

    def list_all(self) -> List[CreditReportRecord]:
        return list(reversed(self.state.reports))

    def latest_revision(self, consumer_id: str, bureau: Bureau) -> int:
        revisions = [r.revision for r in self.state.reports if r.consumer_id == consumer_id and r.bureau == bureau]
        return max(revisions, default=0)


class MemoryPricingStore:
    def __init__(self, state: MemoryState):
        self.state = state

    def get(self) -> PricingTable:
        return self.state.pricing

    def set(self, pricing: PricingTable) -> None:
        self.state.pricing = pricing
