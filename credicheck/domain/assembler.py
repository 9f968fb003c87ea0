"""Report assembler - combines identity, score and generated content into one record"""

import random
import uuid
from datetime import datetime, timezone

from credicheck.domain.generator import generate_content
from credicheck.domain.models import Bureau, ConsumerProfile, CreditReportRecord, ReportStatus
from credicheck.domain.scoring import assess, derive_seed


def new_report_id(bureau: Bureau) -> str:
    return f"RPT-{bureau.value}-{uuid.uuid4().hex[:12].upper()}"


def build_report(
    profile: ConsumerProfile,
    consumer_id: str,
    generating_actor_id: str,
    bureau: Bureau,
    funding_transaction_id: str,
    revision: int,
    *,
    jitter_points: int = 0,
    now: datetime | None = None,
) -> CreditReportRecord:
    """
    Assemble one immutable credit report.

    Flow:
    1. Derive seed from PAN + bureau + revision
    2. Score, band and risk tier from the seed
    3. Loans, enquiries and consumer sections from a content stream on the same seed
    4. Stamp identity, lineage and a fresh report id
    """
    if now is None:
        now = datetime.now(timezone.utc)

    seed = derive_seed(profile.pan, bureau, revision)
    assessment = assess(seed, jitter_points)
    content = generate_content(random.Random(f"{seed}:content"), profile, assessment.tier, now.date())

    return CreditReportRecord(
        id=new_report_id(bureau),
        bureau=bureau,
        status=ReportStatus.SUCCESS,
        reference_id=content.reference_id,
        control_number=content.control_number,
        score=assessment.score,
        score_band=assessment.band,
        risk_tier=assessment.tier,
        score_description=f"The score is calculated based on credit history found in the {bureau.value} database.",
        report_date=now,
        consumer=content.consumer,
        accounts_summary=content.summary,
        loans=content.loans,
        enquiries=content.enquiries,
        consumer_id=consumer_id,
        generated_by=generating_actor_id,
        transaction_id=funding_transaction_id,
        revision=revision,
    )
