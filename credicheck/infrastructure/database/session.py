"""Database session management with connection pooling"""

from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from credicheck.config import settings
from credicheck.domain.models import Account, AccountRole, ConsumerProfile, PricingTable
from credicheck.infrastructure.database.models import Base
from credicheck.infrastructure.database.repositories import AccountRepository, PricingRepository, SqlUnitOfWork

# Connection pool: max 20 connections, recycle after 1 hour to avoid stale connections
engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,  # Verify connections before using
    pool_size=10,
    max_overflow=10,
    pool_recycle=3600,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """Dependency injection for database sessions"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def seed_defaults(db: Session) -> None:
    """Insert the master admin account and default pricing when missing"""
    accounts = AccountRepository(db)
    pricing = PricingRepository(db)
    with SqlUnitOfWork(db).transaction():
        if accounts.get(settings.admin_account_id) is None:
            accounts.add(
                Account(
                    id=settings.admin_account_id,
                    role=AccountRole.MASTER_ADMIN,
                    profile=ConsumerProfile(
                        full_name="Master Admin",
                        pan="ADMIN0000X",
                        mobile="0000000000",
                        email=settings.admin_email,
                        dob="1990-01-01",
                        gender="Male",
                        addresses=("HQ",),
                        occupation="Admin",
                        income="N/A",
                        id_number="ADMIN0000X",
                    ),
                    created_at=datetime.now(timezone.utc),
                )
            )
        if not pricing.exists():
            pricing.set(PricingTable.flat(settings.default_user_price, settings.default_partner_price))


def init_db(bind: Engine = engine) -> None:
    """Create tables and seed defaults"""
    Base.metadata.create_all(bind=bind)
    db = sessionmaker(autocommit=False, autoflush=False, bind=bind)()
    try:
        seed_defaults(db)
    finally:
        db.close()
