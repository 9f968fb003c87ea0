"""Data access layer - SQLAlchemy implementations of the domain stores"""

from contextlib import contextmanager
from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from credicheck.domain.exceptions import RevisionConflictError
from credicheck.infrastructure.database.models import (
    AccountRow,
    CreditReportRow,
    LedgerTransactionRow,
    PricingConfigRow,
)
from credicheck.domain.models import (
    Account,
    AccountRole,
    AccountsSummary,
    AdjustmentDirection,
    Bureau,
    BureauAddress,
    BureauContact,
    BureauEmployment,
    BureauIdentification,
    ConsumerProfile,
    ConsumerSection,
    CreditReportRecord,
    Enquiry,
    FundingMethod,
    Loan,
    PaymentHistoryMonth,
    PricingTable,
    ReportStatus,
    RiskTier,
    ScoreBand,
    Transaction,
    TransactionPurpose,
    TransactionStatus,
)


class SqlUnitOfWork:
    """Commits the session once per unit of work"""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def transaction(self) -> Iterator[None]:
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


class AccountRepository:
    """Repository for accounts; also serves as the ledger balance store"""

    def __init__(self, db: Session):
        self.db = db

    def add(self, account: Account) -> None:
        row = AccountRow(id=account.id, created_at=account.created_at)
        _copy_account_fields(account, row)
        self.db.add(row)
        self.db.flush()

    def get(self, account_id: str) -> Optional[Account]:
        row = self.db.get(AccountRow, account_id)
        return _to_account(row) if row else None

    def find_by_mobile_or_pan(self, mobile: str, pan: str) -> Optional[Account]:
        row = (
            self.db.query(AccountRow)
            .filter((AccountRow.mobile == mobile) | (AccountRow.pan == pan))
            .order_by(AccountRow.created_at)
            .first()
        )
        return _to_account(row) if row else None

    def list_all(self) -> List[Account]:
        rows = self.db.query(AccountRow).order_by(AccountRow.created_at.desc()).all()
        return [_to_account(row) for row in rows]

    def save(self, account: Account) -> None:
        row = self.db.get(AccountRow, account.id)
        _copy_account_fields(account, row)
        self.db.flush()

    def delete(self, account_id: str) -> None:
        row = self.db.get(AccountRow, account_id)
        if row is not None:
            self.db.delete(row)
            self.db.flush()

    def get_balance(self, partner_id: str, for_update: bool = False) -> Optional[int]:
        """Wallet balance; row lock held until commit when for_update is set"""
        query = self.db.query(AccountRow).filter(AccountRow.id == partner_id)
        if for_update:
            query = query.with_for_update().populate_existing()
        row = query.first()
        return row.wallet_balance if row else None

    def set_balance(self, partner_id: str, balance: int) -> None:
        row = self.db.get(AccountRow, partner_id)
        row.wallet_balance = balance
        self.db.flush()


class TransactionRepository:
    """Append-only repository for ledger transactions"""

    def __init__(self, db: Session):
        self.db = db

    def append(self, transaction: Transaction) -> None:
        self.db.add(
            LedgerTransactionRow(
                id=transaction.id,
                payer_id=transaction.payer_id,
                amount=transaction.amount,
                bureaus=[b.value for b in transaction.bureaus],
                funding_method=transaction.funding_method.value,
                purpose=transaction.purpose.value,
                status=transaction.status.value,
                direction=transaction.direction.value if transaction.direction else None,
                description=transaction.description,
                created_at=transaction.created_at,
            )
        )
        self.db.flush()

    def list_by_payer(self, payer_id: str) -> List[Transaction]:
        rows = (
            self.db.query(LedgerTransactionRow)
            .filter(LedgerTransactionRow.payer_id == payer_id)
            .order_by(LedgerTransactionRow.created_at.desc())
            .all()
        )
        return [_to_transaction(row) for row in rows]

    def list_all(self) -> List[Transaction]:
        rows = self.db.query(LedgerTransactionRow).order_by(LedgerTransactionRow.created_at.desc()).all()
        return [_to_transaction(row) for row in rows]


class ReportRepository:
    """Append-only repository for credit reports"""

    def __init__(self, db: Session):
        self.db = db

    def put(self, record: CreditReportRecord) -> None:
        self.db.add(
            CreditReportRow(
                id=record.id,
                consumer_id=record.consumer_id,
                generated_by=record.generated_by,
                transaction_id=record.transaction_id,
                bureau=record.bureau.value,
                revision=record.revision,
                status=record.status.value,
                score=record.score,
                risk_tier=record.risk_tier.value,
                payload=report_to_payload(record),
                created_at=record.report_date,
            )
        )
        try:
            self.db.flush()
        except IntegrityError as e:
            raise RevisionConflictError(
                f"Revision {record.revision} already exists for {record.consumer_id}/{record.bureau.value}"
            ) from e

    def get(self, report_id: str) -> Optional[CreditReportRecord]:
        row = self.db.get(CreditReportRow, report_id)
        return payload_to_report(row.payload) if row else None

    def list_by_consumer(self, consumer_id: str) -> List[CreditReportRecord]:
        return self._list(CreditReportRow.consumer_id == consumer_id)

    def list_by_generator(self, actor_id: str) -> List[CreditReportRecord]:
        return self._list(CreditReportRow.generated_by == actor_id)

    def list_all(self) -> List[CreditReportRecord]:
        return self._list()

    def latest_revision(self, consumer_id: str, bureau: Bureau) -> int:
        latest = (
            self.db.query(func.max(CreditReportRow.revision))
            .filter(CreditReportRow.consumer_id == consumer_id, CreditReportRow.bureau == bureau.value)
            .scalar()
        )
        return latest or 0

    def _list(self, *criteria) -> List[CreditReportRecord]:
        rows = (
            self.db.query(CreditReportRow)
            .filter(*criteria)
            .order_by(CreditReportRow.created_at.desc(), CreditReportRow.revision.desc())
            .all()
        )
        return [payload_to_report(row.payload) for row in rows]


class PricingRepository:
    """Single-row pricing table; writes replace it wholesale"""

    def __init__(self, db: Session, default: Optional[PricingTable] = None):
        self.db = db
        self.default = default

    def exists(self) -> bool:
        return self.db.get(PricingConfigRow, 1) is not None

    def get(self) -> PricingTable:
        row = self.db.get(PricingConfigRow, 1)
        if row is None:
            if self.default is None:
                raise LookupError("Pricing table has not been configured")
            return self.default
        return PricingTable(
            user={Bureau(k): int(v) for k, v in row.user_prices.items()},
            partner={Bureau(k): int(v) for k, v in row.partner_prices.items()},
        )

    def set(self, pricing: PricingTable) -> None:
        user_prices = {b.value: p for b, p in pricing.user.items()}
        partner_prices = {b.value: p for b, p in pricing.partner.items()}
        row = self.db.get(PricingConfigRow, 1)
        if row is None:
            self.db.add(PricingConfigRow(id=1, user_prices=user_prices, partner_prices=partner_prices))
        else:
            row.user_prices = user_prices
            row.partner_prices = partner_prices
        self.db.flush()


# ── Row <-> domain mapping ────────────────────────────


def _copy_account_fields(account: Account, row: AccountRow) -> None:
    profile = account.profile
    row.role = account.role.value
    row.full_name = profile.full_name
    row.pan = profile.pan
    row.mobile = profile.mobile
    row.email = profile.email
    row.dob = profile.dob
    row.gender = profile.gender
    row.addresses = list(profile.addresses)
    row.occupation = profile.occupation
    row.income = profile.income
    row.id_type = profile.id_type
    row.id_number = profile.id_number
    row.franchise_id = account.franchise_id
    row.referred_by = account.referred_by
    row.wallet_balance = account.wallet_balance


def _to_account(row: AccountRow) -> Account:
    return Account(
        id=row.id,
        role=AccountRole(row.role),
        profile=ConsumerProfile(
            full_name=row.full_name,
            pan=row.pan,
            mobile=row.mobile,
            email=row.email,
            dob=row.dob,
            gender=row.gender,
            addresses=tuple(row.addresses or ()),
            occupation=row.occupation,
            income=row.income,
            id_type=row.id_type,
            id_number=row.id_number,
        ),
        created_at=row.created_at,
        franchise_id=row.franchise_id,
        referred_by=row.referred_by,
        wallet_balance=row.wallet_balance,
    )


def _to_transaction(row: LedgerTransactionRow) -> Transaction:
    return Transaction(
        id=row.id,
        payer_id=row.payer_id,
        amount=row.amount,
        bureaus=tuple(Bureau(b) for b in row.bureaus),
        created_at=row.created_at,
        funding_method=FundingMethod(row.funding_method),
        purpose=TransactionPurpose(row.purpose),
        status=TransactionStatus(row.status),
        description=row.description,
        direction=AdjustmentDirection(row.direction) if row.direction else None,
    )


def report_to_payload(record: CreditReportRecord) -> Dict[str, Any]:
    """JSON-safe document for a report"""
    payload = asdict(record)
    payload["bureau"] = record.bureau.value
    payload["status"] = record.status.value
    payload["score_band"] = record.score_band.value
    payload["risk_tier"] = record.risk_tier.value
    payload["report_date"] = record.report_date.isoformat()
    return payload


def payload_to_report(payload: Dict[str, Any]) -> CreditReportRecord:
    consumer = payload["consumer"]
    data = dict(payload)
    data.update(
        bureau=Bureau(payload["bureau"]),
        status=ReportStatus(payload["status"]),
        score_band=ScoreBand(payload["score_band"]),
        risk_tier=RiskTier(payload["risk_tier"]),
        report_date=datetime.fromisoformat(payload["report_date"]),
        accounts_summary=AccountsSummary(**payload["accounts_summary"]),
        enquiries=tuple(Enquiry(**e) for e in payload["enquiries"]),
        loans=tuple(
            Loan(**{**loan, "payment_history": tuple(PaymentHistoryMonth(**m) for m in loan["payment_history"])})
            for loan in payload["loans"]
        ),
        consumer=ConsumerSection(
            name=consumer["name"],
            dob=consumer["dob"],
            gender=consumer["gender"],
            pan=consumer["pan"],
            mobile=consumer["mobile"],
            addresses=tuple(BureauAddress(**a) for a in consumer["addresses"]),
            identifications=tuple(BureauIdentification(**i) for i in consumer["identifications"]),
            contacts=tuple(BureauContact(**c) for c in consumer["contacts"]),
            employments=tuple(BureauEmployment(**e) for e in consumer["employments"]),
        ),
    )
    return CreditReportRecord(**data)
