"""Random content generator - synthetic accounts, enquiries and consumer sections.

Every draw comes from the ``random.Random`` passed in, so a report seeded
from the same (PAN, bureau, revision) reproduces the same content. Output
cardinalities are randomized within fixed bounds:

 - 2-8 loans (range narrows as risk improves)
 - 24-month payment history per loan, weighted by risk tier
 - 0-3 credit enquiries
 - accounts summary counted from the loan list, never drawn independently
"""

import random
from datetime import date, timedelta
from typing import Dict, List, Tuple

from credicheck.domain.models import (
    AccountsSummary,
    BureauAddress,
    BureauContact,
    BureauEmployment,
    BureauIdentification,
    ConsumerProfile,
    ConsumerSection,
    Enquiry,
    GeneratedContent,
    Loan,
    PaymentHistoryMonth,
    RiskTier,
)
from credicheck.utils.date_utils import days_before, months_back

# ── Reference data ────────────────────────────────────

LENDERS = [
    "HDFC Bank",
    "SBI Cards",
    "ICICI Bank",
    "Axis Bank",
    "Bajaj Finance",
    "Kotak Mahindra",
    "Citibank NA",
    "American Express",
    "Bank of Baroda",
    "Punjab National Bank",
]

ACCOUNT_TYPES = [
    "Personal Loan",
    "Credit Card",
    "Auto Loan",
    "Housing Loan",
    "Consumer Loan",
    "Business Loan",
    "Kisan Credit Card",
    "Gold Loan",
]

CREDIT_CARD_TYPES = {"Credit Card"}

EMPLOYERS = [
    "TCS",
    "Infosys",
    "Reliance Industries",
    "Government of India",
    "Self Employed",
    "Adani Group",
    "Wipro",
]

PAYMENT_STATUS_CODES = ("STD", "000", "XXX", "SMA", "SUB", "DBT", "LSS")

HISTORY_MONTHS = 24

OFFICE_ADDRESS = "123, Corporate Park, Financial District, Mumbai - 400001"

# ── Risk-tier tuning ──────────────────────────────────

LOAN_COUNT_RANGE: Dict[RiskTier, Tuple[int, int]] = {
    RiskTier.LOW: (2, 4),
    RiskTier.MEDIUM: (2, 6),
    RiskTier.HIGH: (2, 8),
}

OVERDUE_PROBABILITY: Dict[RiskTier, float] = {
    RiskTier.LOW: 0.10,
    RiskTier.MEDIUM: 0.20,
    RiskTier.HIGH: 0.35,
}

WRITTEN_OFF_PROBABILITY: Dict[RiskTier, float] = {
    RiskTier.LOW: 0.01,
    RiskTier.MEDIUM: 0.03,
    RiskTier.HIGH: 0.08,
}

SETTLED_PROBABILITY: Dict[RiskTier, float] = {
    RiskTier.LOW: 0.02,
    RiskTier.MEDIUM: 0.04,
    RiskTier.HIGH: 0.08,
}

# Weights aligned with PAYMENT_STATUS_CODES
PAYMENT_STATUS_WEIGHTS: Dict[RiskTier, Tuple[int, ...]] = {
    RiskTier.LOW: (80, 12, 6, 2, 0, 0, 0),
    RiskTier.MEDIUM: (65, 10, 8, 9, 5, 3, 0),
    RiskTier.HIGH: (45, 8, 8, 14, 12, 9, 4),
}

DAYS_PAST_DUE_RANGE: Dict[str, Tuple[int, int]] = {
    "SMA": (1, 89),
    "SUB": (90, 179),
    "DBT": (180, 359),
    "LSS": (360, 720),
}

OPEN_PROBABILITY = 0.7


def generate_payment_history(
    rng: random.Random, tier: RiskTier, anchor: date, months: int = HISTORY_MONTHS
) -> List[PaymentHistoryMonth]:
    """Month-by-month status grid, most recent month first"""
    history = []
    weights = PAYMENT_STATUS_WEIGHTS[tier]
    for month, year in months_back(anchor, months):
        status = rng.choices(PAYMENT_STATUS_CODES, weights=weights)[0]
        if status in ("STD", "000"):
            days_past_due = "000"
        elif status == "XXX":
            days_past_due = "XXX"
        else:
            low, high = DAYS_PAST_DUE_RANGE[status]
            days_past_due = f"{rng.randint(low, high):03d}"

        history.append(
            PaymentHistoryMonth(
                month=month,
                year=year,
                status=status,
                days_past_due=days_past_due,
                asset_classification="STD" if status in ("000", "XXX") else status,
            )
        )
    return history


def generate_loan(rng: random.Random, tier: RiskTier, anchor: date) -> Loan:
    """Single synthetic credit account"""
    is_open = rng.random() < OPEN_PROBABILITY
    account_type = rng.choice(ACCOUNT_TYPES)
    is_credit_card = account_type in CREDIT_CARD_TYPES
    amount = 10_000 + rng.randrange(500_000)

    # Overdue only accrues on open accounts
    overdue = rng.randint(1, 4_999) if is_open and rng.random() < OVERDUE_PROBABILITY[tier] else 0

    opened_days_ago = rng.randint(180, 3_650)
    date_closed = days_before(anchor, rng.randint(1, opened_days_ago - 30)) if not is_open else None

    is_written_off = rng.random() < WRITTEN_OFF_PROBABILITY[tier]
    is_settled = not is_written_off and rng.random() < SETTLED_PROBABILITY[tier]
    if is_written_off:
        status = "Written Off"
    elif is_settled:
        status = "Settled"
    else:
        status = "Active" if is_open else "Closed"

    if account_type in ("Housing Loan", "Auto Loan"):
        collateral_type = "Property/Vehicle"
    else:
        collateral_type = "None"

    return Loan(
        member_name=rng.choice(LENDERS),
        account_type=account_type,
        account_number=f"XXXX{rng.randint(100_000, 999_999)}",
        ownership="Individual",
        date_opened=days_before(anchor, opened_days_ago),
        date_last_payment=anchor.isoformat(),
        date_reported=anchor.isoformat(),
        date_closed=date_closed,
        sanctioned_amount=0 if is_credit_card else amount,
        credit_limit=amount if is_credit_card else None,
        cash_limit=int(amount * 0.2) if is_credit_card else None,
        current_balance=int(amount * 0.6) if is_open else 0,
        amount_overdue=overdue,
        rate_of_interest=f"{8 + rng.random() * 10:.1f}%",
        repayment_tenure=None if is_credit_card else 12 + rng.randrange(48),
        emi_amount=0 if is_credit_card else amount // 24,
        payment_frequency="Monthly",
        collateral_type=collateral_type,
        collateral_value=int(amount * 1.2) if account_type == "Housing Loan" else 0,
        suit_filed_status="Suit Filed" if rng.random() > 0.98 else "No Suit Filed",
        wilful_default_status="Yes" if rng.random() > 0.99 else "No",
        written_off_status=status if status in ("Written Off", "Settled") else "",
        written_off_amount_total=int(amount * 0.4) if is_written_off else 0,
        settlement_amount=int(amount * 0.5) if is_settled else 0,
        settlement_date=anchor.isoformat() if is_settled else None,
        is_open=is_open,
        status=status,
        payment_history=tuple(generate_payment_history(rng, tier, anchor)),
    )


def generate_loans(rng: random.Random, tier: RiskTier, anchor: date) -> List[Loan]:
    low, high = LOAN_COUNT_RANGE[tier]
    return [generate_loan(rng, tier, anchor) for _ in range(rng.randint(low, high))]


def generate_enquiries(rng: random.Random, anchor: date) -> List[Enquiry]:
    """0-3 enquiries from the last ~115 days, newest first"""
    enquiries = [
        Enquiry(
            member_name=rng.choice(LENDERS),
            date=days_before(anchor, rng.randint(1, 115)),
            purpose=rng.choice(ACCOUNT_TYPES),
            amount=50_000 + rng.randrange(100_000),
        )
        for _ in range(rng.randint(0, 3))
    ]
    enquiries.sort(key=lambda e: e.date, reverse=True)
    return enquiries


def summarize(loans: List[Loan]) -> AccountsSummary:
    """Accounts summary counted from the loan list"""
    active = sum(1 for loan in loans if loan.is_open)
    return AccountsSummary(
        total_loans=len(loans),
        active_loans=active,
        closed_loans=len(loans) - active,
        overdue_accounts=sum(1 for loan in loans if loan.amount_overdue > 0),
    )


def build_consumer_section(rng: random.Random, profile: ConsumerProfile, anchor: date) -> ConsumerSection:
    """Identity block: addresses, identifications, contacts and employment"""
    addresses = [
        BureauAddress(
            address=address,
            category="Permanent" if idx == 0 else "Residence",
            residence_code="01" if idx == 0 else "02",
            date_reported=anchor.isoformat(),
        )
        for idx, address in enumerate(profile.addresses)
    ]
    if len(addresses) < 2:
        addresses.append(
            BureauAddress(
                address=OFFICE_ADDRESS,
                category="Office",
                residence_code="03",
                date_reported=(anchor - timedelta(days=rng.randint(365, 1_460))).isoformat(),
            )
        )

    identifications = [BureauIdentification(type="PAN", number=profile.pan, issue_date="2015-06-01")]
    if profile.id_type and profile.id_type != "PAN":
        identifications.append(BureauIdentification(type=profile.id_type, number=profile.id_number or "N/A"))
    if rng.random() > 0.5:
        identifications.append(
            BureauIdentification(
                type="Voter ID",
                number=f"{''.join(rng.choices('ABCDEFGHIJKLMNOPQRSTUVWXYZ', k=3))}{rng.randint(1_000_000, 9_999_999)}",
                issue_date="2018-01-01",
            )
        )

    return ConsumerSection(
        name=profile.full_name,
        dob=profile.dob,
        gender=profile.gender,
        pan=profile.pan,
        mobile=profile.mobile,
        addresses=tuple(addresses),
        identifications=tuple(identifications),
        contacts=(
            BureauContact(type="Mobile", value=profile.mobile),
            BureauContact(type="Email", value=profile.email),
        ),
        employments=(
            BureauEmployment(
                occupation=profile.occupation,
                employer_name=rng.choice(EMPLOYERS),
                income=profile.income,
                net_gross_indicator="Gross",
                frequency="Annual",
                date_reported=anchor.isoformat(),
            ),
        ),
    )


def generate_content(
    rng: random.Random, profile: ConsumerProfile, tier: RiskTier, anchor: date | None = None
) -> GeneratedContent:
    """Main entry point: all randomized report sections for one bureau pull"""
    if anchor is None:
        anchor = date.today()

    loans = generate_loans(rng, tier, anchor)
    enquiries = generate_enquiries(rng, anchor)

    return GeneratedContent(
        loans=tuple(loans),
        enquiries=tuple(enquiries),
        summary=summarize(loans),
        consumer=build_consumer_section(rng, profile, anchor),
        reference_id=f"REF-{rng.randrange(1_000_000):06d}",
        control_number=str(rng.randint(100_000_000, 999_999_999)),
    )
