"""Pytest fixtures for testing"""

import pytest
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from credicheck.api.main import create_app
from credicheck.domain.models import Account, AccountRole, ConsumerProfile, PricingTable
from credicheck.infrastructure.database.models import Base
from credicheck.infrastructure.database.session import get_db, seed_defaults
from credicheck.infrastructure.memory.stores import (
    MemoryAccountStore,
    MemoryLedgerStore,
    MemoryPricingStore,
    MemoryReportStore,
    MemoryState,
    MemoryTransactionStore,
    MemoryUnitOfWork,
)
from credicheck.services.accounts import AccountService
from credicheck.services.ledger import PricingLedger
from credicheck.services.purchases import PurchaseService
from credicheck.services.reports import ReportService
from credicheck.services.stats import StatsService
from credicheck.utils.locks import KeyedLocks


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session with admin account and default pricing"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    seed_defaults(db)
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@dataclass
class MemoryServices:
    """Service graph wired to in-memory stores"""

    state: MemoryState
    accounts: MemoryAccountStore
    transactions: MemoryTransactionStore
    reports: MemoryReportStore
    pricing: MemoryPricingStore
    ledger: PricingLedger
    report_service: ReportService
    purchase_service: PurchaseService
    account_service: AccountService
    stats_service: StatsService

    def add_partner(self, account_id: str = "partner-1", balance: int = 0) -> Account:
        account = Account(
            id=account_id,
            role=AccountRole.PARTNER_ADMIN,
            profile=make_profile(pan="PARTN1234P", mobile="9000000001", full_name="Partner One"),
            created_at=datetime.now(timezone.utc),
            franchise_id="FR-1001",
            wallet_balance=balance,
        )
        self.accounts.add(account)
        return account

    def add_consumer(self, account_id: str = "consumer-1", pan: str = "ABCDE1234F", mobile: str = "9876543210") -> Account:
        account = Account(
            id=account_id,
            role=AccountRole.USER,
            profile=make_profile(pan=pan, mobile=mobile),
            created_at=datetime.now(timezone.utc),
        )
        self.accounts.add(account)
        return account

    def balance(self, account_id: str) -> int:
        return self.state.accounts[account_id].wallet_balance


def make_profile(**overrides) -> ConsumerProfile:
    fields = dict(
        full_name="Asha Verma",
        pan="ABCDE1234F",
        mobile="9876543210",
        email="asha@example.com",
        dob="1991-04-12",
        gender="Female",
        addresses=("12 MG Road, Bengaluru 560001",),
        occupation="Salaried",
        income="10-15 Lakhs",
        id_type="PAN",
        id_number="ABCDE1234F",
    )
    fields.update(overrides)
    return ConsumerProfile(**fields)


def build_memory_services(pricing: PricingTable, jitter_points: int = 0) -> MemoryServices:
    state = MemoryState(pricing)
    accounts = MemoryAccountStore(state)
    transactions = MemoryTransactionStore(state)
    reports = MemoryReportStore(state)
    pricing_store = MemoryPricingStore(state)
    uow = MemoryUnitOfWork(state)

    ledger = PricingLedger(
        accounts=accounts,
        ledger=MemoryLedgerStore(state),
        transactions=transactions,
        pricing=pricing_store,
        uow=uow,
        locks=KeyedLocks(),
    )
    report_service = ReportService(accounts, reports, uow, jitter_points=jitter_points)
    return MemoryServices(
        state=state,
        accounts=accounts,
        transactions=transactions,
        reports=reports,
        pricing=pricing_store,
        ledger=ledger,
        report_service=report_service,
        purchase_service=PurchaseService(accounts, ledger, report_service),
        account_service=AccountService(accounts, uow),
        stats_service=StatsService(accounts, reports, transactions),
    )


@pytest.fixture
def profile() -> ConsumerProfile:
    return make_profile()


@pytest.fixture
def services() -> MemoryServices:
    """In-memory services with USER 99 / PARTNER 49 for every bureau"""
    return build_memory_services(PricingTable.flat(99, 49))


@pytest.fixture
def consumer_payload() -> dict:
    return {
        "full_name": "Rahul Mehta",
        "pan": "BCDEF2345G",
        "mobile": "9123456780",
        "email": "rahul@example.com",
        "dob": "1988-09-30",
        "gender": "Male",
        "addresses": ["44 Park Street, Kolkata 700016"],
        "occupation": "Self Employed",
        "income": "5-10 Lakhs",
    }


@pytest.fixture
def partner_payload() -> dict:
    return {
        "full_name": "Sharma Finserv",
        "pan": "CDEFG3456H",
        "mobile": "9012345678",
        "email": "ops@sharmafinserv.in",
        "dob": "1980-01-01",
        "addresses": ["Shop 7, Sector 18, Noida 201301"],
    }


@pytest.fixture
def profile_factory():
    """Build a ConsumerProfile with keyword overrides"""
    return make_profile


@pytest.fixture
def services_factory():
    """Build in-memory services over a custom pricing table"""
    return build_memory_services
