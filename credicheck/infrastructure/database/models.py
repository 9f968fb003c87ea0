"""SQLAlchemy ORM models for accounts, ledger, reports and pricing"""

from sqlalchemy import Column, String, BigInteger, DateTime, Integer, Text, JSON, UniqueConstraint
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class AccountRow(Base):
    """Consumer, partner or admin account"""

    __tablename__ = "account"

    id = Column(String(64), primary_key=True)
    role = Column(Text, nullable=False, index=True)
    full_name = Column(Text, nullable=False)
    pan = Column(String(10), nullable=False, index=True)
    mobile = Column(String(10), nullable=False, index=True)
    email = Column(Text, nullable=False)
    dob = Column(Text, nullable=False)
    gender = Column(Text, nullable=False)
    addresses = Column(JSON, nullable=False)
    occupation = Column(Text, nullable=False)
    income = Column(Text, nullable=False)
    id_type = Column(Text, nullable=False)
    id_number = Column(Text, nullable=False)
    franchise_id = Column(Text, nullable=True)
    referred_by = Column(String(64), nullable=True)
    wallet_balance = Column(BigInteger, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class LedgerTransactionRow(Base):
    """Append-only ledger entry"""

    __tablename__ = "ledger_transaction"

    id = Column(String(64), primary_key=True)
    payer_id = Column(String(64), nullable=False, index=True)
    amount = Column(BigInteger, nullable=False)
    bureaus = Column(JSON, nullable=False)
    funding_method = Column(Text, nullable=False)
    purpose = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="SUCCESS")
    direction = Column(Text, nullable=True)
    description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False)


class CreditReportRow(Base):
    """Generated credit report; full document kept in payload"""

    __tablename__ = "credit_report"
    __table_args__ = (UniqueConstraint("consumer_id", "bureau", "revision", name="uq_report_lineage"),)

    id = Column(String(64), primary_key=True)
    consumer_id = Column(String(64), nullable=False, index=True)
    generated_by = Column(String(64), nullable=False, index=True)
    transaction_id = Column(String(64), nullable=False)
    bureau = Column(Text, nullable=False)
    revision = Column(Integer, nullable=False)
    status = Column(Text, nullable=False)
    score = Column(Integer, nullable=False)
    risk_tier = Column(Text, nullable=False)
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)


class PricingConfigRow(Base):
    """Single-row pricing table, replaced wholesale on update"""

    __tablename__ = "pricing_config"

    id = Column(Integer, primary_key=True, default=1)
    user_prices = Column(JSON, nullable=False)
    partner_prices = Column(JSON, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
