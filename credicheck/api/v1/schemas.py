"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator, model_validator

from credicheck.domain.models import (
    AccountRole,
    AdjustmentDirection,
    Bureau,
    FundingMethod,
    ReportStatus,
    RiskTier,
    ScoreBand,
    TransactionPurpose,
    TransactionStatus,
)

PAN_PATTERN = r"^[A-Z]{5}[0-9]{4}[A-Z]$"
MOBILE_PATTERN = r"^[0-9]{10}$"


class AttributeModel(BaseModel):
    """Response model built from domain dataclasses"""

    model_config = ConfigDict(from_attributes=True)


# ── Accounts ──────────────────────────────────────────


class ProfileSchema(BaseModel):
    """Consumer identity as submitted on registration"""

    full_name: str = Field(..., min_length=1)
    pan: str = Field(..., pattern=PAN_PATTERN, description="PAN, e.g. ABCDE1234F")
    mobile: str = Field(..., pattern=MOBILE_PATTERN, description="10-digit mobile number")
    email: str = Field(..., min_length=3)
    dob: str = Field(..., min_length=1, description="Date of birth, YYYY-MM-DD")
    gender: Optional[str] = None
    addresses: List[str] = Field(default_factory=list)
    occupation: Optional[str] = None
    income: Optional[str] = None
    id_type: Optional[str] = None
    id_number: Optional[str] = None

    @field_validator("pan", mode="before")
    @classmethod
    def upper_pan(cls, v):
        return v.strip().upper() if isinstance(v, str) else v


class RegisterConsumerRequest(ProfileSchema):
    referred_by: Optional[str] = None


class ProfileUpdateRequest(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1)
    pan: Optional[str] = Field(None, pattern=PAN_PATTERN)
    mobile: Optional[str] = Field(None, pattern=MOBILE_PATTERN)
    email: Optional[str] = None
    dob: Optional[str] = None
    gender: Optional[str] = None
    addresses: Optional[List[str]] = None
    occupation: Optional[str] = None
    income: Optional[str] = None
    id_type: Optional[str] = None
    id_number: Optional[str] = None


class RoleUpdateRequest(BaseModel):
    role: AccountRole


class AccountResponse(BaseModel):
    id: str
    role: AccountRole
    full_name: str
    pan: str
    mobile: str
    email: str
    dob: str
    gender: str
    addresses: List[str]
    occupation: str
    income: str
    id_type: str
    id_number: str
    franchise_id: Optional[str] = None
    referred_by: Optional[str] = None
    wallet_balance: Optional[int] = None
    created_at: datetime


# ── Pricing & purchases ───────────────────────────────


class PricingSchema(BaseModel):
    """Full pricing table; PUT replaces it wholesale"""

    user: Dict[Bureau, NonNegativeInt]
    partner: Dict[Bureau, NonNegativeInt]

    @model_validator(mode="after")
    def every_bureau_priced(self):
        for name, schedule in (("user", self.user), ("partner", self.partner)):
            missing = [b.value for b in Bureau if b not in schedule]
            if missing:
                raise ValueError(f"{name} schedule missing prices for {', '.join(missing)}")
        return self


class QuoteRequest(BaseModel):
    requester_id: str = Field(..., min_length=1)
    bureaus: List[Bureau] = Field(..., min_length=1)


class QuoteResponse(BaseModel):
    requester_id: str
    requester_class: str
    bureaus: List[Bureau]
    total: int


class PurchaseRequest(BaseModel):
    requester_id: str = Field(..., min_length=1, description="Account paying for the reports")
    consumer_id: Optional[str] = Field(None, description="Report subject; defaults to the requester")
    bureaus: List[Bureau] = Field(..., min_length=1)
    funding_method: Optional[FundingMethod] = None

    @field_validator("funding_method")
    @classmethod
    def no_admin_funding(cls, v):
        if v == FundingMethod.ADMIN_ADJUSTMENT:
            raise ValueError("Purchases are funded by GATEWAY or WALLET")
        return v


class BureauResult(BaseModel):
    bureau: Bureau
    status: ReportStatus
    report_id: Optional[str] = None
    revision: Optional[int] = None
    error: Optional[str] = None


class PurchaseResponse(BaseModel):
    transaction_id: str
    amount: int
    purpose: TransactionPurpose
    results: List[BureauResult]


# ── Wallets & transactions ────────────────────────────


class WalletResponse(BaseModel):
    partner_id: str
    balance: int


class RechargeRequest(BaseModel):
    amount: int = Field(..., gt=0)


class AdjustmentRequest(BaseModel):
    amount: int = Field(..., gt=0)
    direction: AdjustmentDirection
    reason: str = Field(..., min_length=1)


class TransactionSchema(AttributeModel):
    id: str
    payer_id: str
    amount: int
    bureaus: List[Bureau]
    created_at: datetime
    funding_method: FundingMethod
    purpose: TransactionPurpose
    status: TransactionStatus
    description: str
    direction: Optional[AdjustmentDirection] = None


# ── Reports ───────────────────────────────────────────


class PaymentHistoryMonthSchema(AttributeModel):
    month: str
    year: int
    status: str
    days_past_due: str
    asset_classification: str


class LoanSchema(AttributeModel):
    member_name: str
    account_type: str
    account_number: str
    ownership: str
    date_opened: str
    date_last_payment: str
    date_reported: str
    date_closed: Optional[str] = None
    sanctioned_amount: int
    credit_limit: Optional[int] = None
    cash_limit: Optional[int] = None
    current_balance: int
    amount_overdue: int
    rate_of_interest: str
    repayment_tenure: Optional[int] = None
    emi_amount: int
    payment_frequency: str
    collateral_type: str
    collateral_value: int
    suit_filed_status: str
    wilful_default_status: str
    written_off_status: str
    written_off_amount_total: int
    settlement_amount: int
    settlement_date: Optional[str] = None
    is_open: bool
    status: str
    payment_history: List[PaymentHistoryMonthSchema]


class EnquirySchema(AttributeModel):
    member_name: str
    date: str
    purpose: str
    amount: int


class AccountsSummarySchema(AttributeModel):
    total_loans: int
    active_loans: int
    closed_loans: int
    overdue_accounts: int


class BureauAddressSchema(AttributeModel):
    address: str
    category: str
    residence_code: str
    date_reported: str


class BureauIdentificationSchema(AttributeModel):
    type: str
    number: str
    issue_date: Optional[str] = None


class BureauContactSchema(AttributeModel):
    type: str
    value: str


class BureauEmploymentSchema(AttributeModel):
    occupation: str
    employer_name: str
    income: str
    net_gross_indicator: str
    frequency: str
    date_reported: str


class ConsumerSectionSchema(AttributeModel):
    name: str
    dob: str
    gender: str
    pan: str
    mobile: str
    addresses: List[BureauAddressSchema]
    identifications: List[BureauIdentificationSchema]
    contacts: List[BureauContactSchema]
    employments: List[BureauEmploymentSchema]


class ReportResponse(AttributeModel):
    """Full credit report document"""

    id: str
    bureau: Bureau
    report_type: str
    status: ReportStatus
    reference_id: str
    control_number: str
    score: int
    score_band: ScoreBand
    score_range: str
    score_description: str
    risk_tier: RiskTier
    report_date: datetime
    consumer: ConsumerSectionSchema
    accounts_summary: AccountsSummarySchema
    loans: List[LoanSchema]
    enquiries: List[EnquirySchema]
    bureau_remarks: str
    legal_disclaimer: str
    consumer_id: str
    generated_by: str
    transaction_id: str
    revision: int


class ReportListItem(BaseModel):
    report_id: str
    bureau: Bureau
    status: ReportStatus
    score: int
    score_band: ScoreBand
    risk_tier: RiskTier
    revision: int
    report_date: datetime
    consumer_id: str
    generated_by: str
    transaction_id: str
    customer_name: str
    generator_name: str
    partner_franchise_id: Optional[str] = None
    transaction_amount: Optional[int] = None


# ── Statistics ────────────────────────────────────────


class AdminStatsResponse(AttributeModel):
    total_users: int
    total_reports: int
    total_revenue: int
    avg_score: int
    high_risk_count: int
    loan_distribution: Dict[str, int]
    bureau_distribution: Dict[str, int]


class PartnerStatsResponse(AttributeModel):
    partner_id: str
    wallet_balance: int
    reports_sold: int
