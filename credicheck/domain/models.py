"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union


class Bureau(str, Enum):
    """Credit bureaus the service simulates"""

    CIBIL = "CIBIL"
    EXPERIAN = "EXPERIAN"
    EQUIFAX = "EQUIFAX"
    CRIF = "CRIF"


class AccountRole(str, Enum):
    USER = "USER"
    PARTNER_ADMIN = "PARTNER_ADMIN"
    MASTER_ADMIN = "MASTER_ADMIN"


class RequesterClass(str, Enum):
    """Fee schedule a requester is billed from"""

    USER = "USER"  # direct consumer, standard rate
    PARTNER = "PARTNER"  # reseller, discounted rate


class FundingMethod(str, Enum):
    GATEWAY = "GATEWAY"
    WALLET = "WALLET"
    ADMIN_ADJUSTMENT = "ADMIN_ADJUSTMENT"


class TransactionPurpose(str, Enum):
    INITIAL = "INITIAL"
    REFRESH = "REFRESH"
    WALLET_TOPUP = "WALLET_TOPUP"
    ADMIN_ADJUSTMENT = "ADMIN_ADJUSTMENT"


class AdjustmentDirection(str, Enum):
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"


class TransactionStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class ReportStatus(str, Enum):
    """PENDING -> SUCCESS | FAILED. Synchronous generation only emits SUCCESS."""

    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class ScoreBand(str, Enum):
    POOR = "POOR"
    FAIR = "FAIR"
    GOOD = "GOOD"
    EXCELLENT = "EXCELLENT"


class RiskTier(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


REPORT_PURCHASE_PURPOSES = (TransactionPurpose.INITIAL, TransactionPurpose.REFRESH)


@dataclass(frozen=True)
class ConsumerProfile:
    """Identity snapshot used as report generation input"""

    full_name: str
    pan: str
    mobile: str
    email: str
    dob: str
    gender: str = "Unknown"
    addresses: Tuple[str, ...] = ()
    occupation: str = "Salaried"
    income: str = "5-10 Lakhs"
    id_type: str = "PAN"
    id_number: str = ""


@dataclass
class Account:
    """Registered account - consumer, partner or master admin"""

    id: str
    role: AccountRole
    profile: ConsumerProfile
    created_at: datetime
    franchise_id: Optional[str] = None
    referred_by: Optional[str] = None
    wallet_balance: Optional[int] = None  # partners only

    @property
    def requester_class(self) -> RequesterClass:
        if self.role == AccountRole.PARTNER_ADMIN:
            return RequesterClass.PARTNER
        return RequesterClass.USER

    @property
    def is_partner(self) -> bool:
        return self.role == AccountRole.PARTNER_ADMIN


@dataclass(frozen=True)
class PricingTable:
    """Per-bureau unit prices for each requester class"""

    user: Dict[Bureau, int]
    partner: Dict[Bureau, int]

    def schedule_for(self, requester_class: RequesterClass) -> Dict[Bureau, int]:
        if requester_class == RequesterClass.PARTNER:
            return self.partner
        return self.user

    @classmethod
    def flat(cls, user_price: int, partner_price: int) -> "PricingTable":
        """Same price for every bureau within each schedule"""
        return cls(
            user={bureau: user_price for bureau in Bureau},
            partner={bureau: partner_price for bureau in Bureau},
        )


@dataclass(frozen=True)
class Transaction:
    """Immutable ledger entry"""

    id: str
    payer_id: str
    amount: int
    bureaus: Tuple[Bureau, ...]
    created_at: datetime
    funding_method: FundingMethod
    purpose: TransactionPurpose
    status: TransactionStatus = TransactionStatus.SUCCESS
    description: str = ""
    direction: Optional[AdjustmentDirection] = None


@dataclass(frozen=True)
class PaymentHistoryMonth:
    """One cell of the 24-month payment history grid"""

    month: str
    year: int
    status: str  # STD, 000, XXX, SMA, SUB, DBT, LSS
    days_past_due: str
    asset_classification: str


@dataclass(frozen=True)
class Loan:
    """Credit account as it appears on a bureau report"""

    member_name: str
    account_type: str
    account_number: str
    ownership: str
    date_opened: str
    date_last_payment: str
    date_reported: str
    date_closed: Optional[str]
    sanctioned_amount: int
    credit_limit: Optional[int]
    cash_limit: Optional[int]
    current_balance: int
    amount_overdue: int
    rate_of_interest: str
    repayment_tenure: Optional[int]
    emi_amount: int
    payment_frequency: str
    collateral_type: str
    collateral_value: int
    suit_filed_status: str
    wilful_default_status: str
    written_off_status: str
    written_off_amount_total: int
    settlement_amount: int
    settlement_date: Optional[str]
    is_open: bool
    status: str  # Active | Closed | Settled | Written Off
    payment_history: Tuple[PaymentHistoryMonth, ...] = ()


@dataclass(frozen=True)
class Enquiry:
    member_name: str
    date: str
    purpose: str
    amount: int


@dataclass(frozen=True)
class AccountsSummary:
    total_loans: int
    active_loans: int
    closed_loans: int
    overdue_accounts: int


@dataclass(frozen=True)
class BureauAddress:
    address: str
    category: str  # Permanent, Residence, Office
    residence_code: str
    date_reported: str


@dataclass(frozen=True)
class BureauIdentification:
    type: str
    number: str
    issue_date: Optional[str] = None


@dataclass(frozen=True)
class BureauContact:
    type: str
    value: str


@dataclass(frozen=True)
class BureauEmployment:
    occupation: str
    employer_name: str
    income: str
    net_gross_indicator: str
    frequency: str
    date_reported: str


@dataclass(frozen=True)
class ConsumerSection:
    """Consumer identity block printed on a report"""

    name: str
    dob: str
    gender: str
    pan: str
    mobile: str
    addresses: Tuple[BureauAddress, ...] = ()
    identifications: Tuple[BureauIdentification, ...] = ()
    contacts: Tuple[BureauContact, ...] = ()
    employments: Tuple[BureauEmployment, ...] = ()


@dataclass(frozen=True)
class ScoreAssessment:
    score: int
    band: ScoreBand
    tier: RiskTier


@dataclass(frozen=True)
class GeneratedContent:
    """Output of the random content generator"""

    loans: Tuple[Loan, ...]
    enquiries: Tuple[Enquiry, ...]
    summary: AccountsSummary
    consumer: ConsumerSection
    reference_id: str
    control_number: str


@dataclass(frozen=True)
class CreditReportRecord:
    """One report per (consumer, bureau, revision); never mutated after creation"""

    id: str
    bureau: Bureau
    status: ReportStatus
    reference_id: str
    control_number: str
    score: int
    score_band: ScoreBand
    risk_tier: RiskTier
    report_date: datetime
    consumer: ConsumerSection
    accounts_summary: AccountsSummary
    loans: Tuple[Loan, ...]
    enquiries: Tuple[Enquiry, ...]
    consumer_id: str
    generated_by: str
    transaction_id: str
    revision: int
    report_type: str = "Consumer Credit Report"
    score_range: str = "300-900"
    score_description: str = ""
    bureau_remarks: str = "Data reported by members is subject to updates."
    legal_disclaimer: str = (
        "The information contained in this report has been collated from data "
        "provided by credit institutions."
    )


@dataclass(frozen=True)
class Authorized:
    """Payment authorized and logged"""

    transaction: Transaction

    @property
    def transaction_id(self) -> str:
        return self.transaction.id


@dataclass(frozen=True)
class InsufficientFunds:
    """Wallet balance below the requested amount; nothing was written"""

    payer_id: str
    balance: int
    required: int


Authorization = Union[Authorized, InsufficientFunds]


@dataclass(frozen=True)
class BureauOutcome:
    """Per-bureau result of a batch generation"""

    bureau: Bureau
    record: Optional[CreditReportRecord] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.record is not None


@dataclass
class PurchaseOutcome:
    quote: int
    authorization: Authorization
    purpose: TransactionPurpose
    outcomes: List[BureauOutcome] = field(default_factory=list)

    @property
    def authorized(self) -> bool:
        return isinstance(self.authorization, Authorized)
