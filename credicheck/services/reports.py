"""Report generation - revisioning, assembly and per-bureau batch isolation"""

import logging
from typing import Iterable, List

from credicheck.config import settings
from credicheck.domain.assembler import build_report
from credicheck.domain.exceptions import (
    ConsumerNotFoundError,
    DomainException,
    ReportNotFoundError,
    RevisionConflictError,
)
from credicheck.domain.models import Bureau, BureauOutcome, CreditReportRecord
from credicheck.domain.pricing import normalize_bureaus
from credicheck.domain.stores import AccountStore, ReportStore, UnitOfWork
from credicheck.infrastructure.observability.metrics import record_report, record_report_failure
from credicheck.utils.locks import KeyedLocks

logger = logging.getLogger(__name__)

# Process-wide, keyed by consumer and bureau
lineage_locks = KeyedLocks()

MAX_REVISION_ATTEMPTS = 3


class ReportService:
    """Builds, stores and reads back credit reports"""

    def __init__(
        self,
        accounts: AccountStore,
        reports: ReportStore,
        uow: UnitOfWork,
        jitter_points: int | None = None,
        locks: KeyedLocks = lineage_locks,
    ):
        self.accounts = accounts
        self.reports = reports
        self.uow = uow
        self.locks = locks
        self.jitter_points = settings.score_jitter_points if jitter_points is None else jitter_points

    def assemble(
        self,
        consumer_id: str,
        generating_actor_id: str,
        bureau: Bureau,
        funding_transaction_id: str,
        revision: int,
    ) -> CreditReportRecord:
        """
        Build one report for a stored consumer. Nothing is persisted.

        Raises:
            ConsumerNotFoundError: No account with consumer_id
        """
        consumer = self.accounts.get(consumer_id)
        if consumer is None:
            raise ConsumerNotFoundError(f"Consumer {consumer_id} not found")

        return build_report(
            consumer.profile,
            consumer_id,
            generating_actor_id,
            bureau,
            funding_transaction_id,
            revision,
            jitter_points=self.jitter_points,
        )

    def next_revision(self, consumer_id: str, bureau: Bureau) -> int:
        return self.reports.latest_revision(consumer_id, bureau) + 1

    def has_reports(self, consumer_id: str, bureaus: Iterable[Bureau]) -> bool:
        return any(self.reports.latest_revision(consumer_id, bureau) > 0 for bureau in bureaus)

    def generate(
        self, consumer_id: str, generator_id: str, bureau: Bureau, transaction_id: str
    ) -> CreditReportRecord:
        """
        Assemble the next revision for (consumer, bureau) and append it.

        Generation for one lineage is serialized in-process; a writer in
        another process can still take the revision first, in which case the
        store rejects the insert and the revision is re-read.

        Raises:
            ConsumerNotFoundError: No account with consumer_id
            RevisionConflictError: Revision still taken after MAX_REVISION_ATTEMPTS
        """
        with self.locks.for_key(f"{consumer_id}:{bureau.value}"):
            for attempt in range(1, MAX_REVISION_ATTEMPTS + 1):
                try:
                    with self.uow.transaction():
                        revision = self.next_revision(consumer_id, bureau)
                        record = self.assemble(consumer_id, generator_id, bureau, transaction_id, revision)
                        self.reports.put(record)
                    break
                except RevisionConflictError:
                    if attempt == MAX_REVISION_ATTEMPTS:
                        raise
                    logger.warning(
                        "Revision taken concurrently, retrying",
                        extra={"consumer_id": consumer_id, "bureau": bureau.value, "attempt": attempt},
                    )

        record_report(bureau.value, record.risk_tier.value)
        logger.info(
            "Report generated",
            extra={
                "report_id": record.id,
                "consumer_id": consumer_id,
                "bureau": bureau.value,
                "revision": revision,
                "transaction_id": transaction_id,
            },
        )
        return record

    def generate_batch(
        self, consumer_id: str, generator_id: str, bureaus: Iterable[Bureau], transaction_id: str
    ) -> List[BureauOutcome]:
        """
        One generation per bureau. A failing bureau is reported in its outcome
        and the remaining bureaus are still attempted.
        """
        outcomes = []
        for bureau in normalize_bureaus(bureaus):
            try:
                record = self.generate(consumer_id, generator_id, bureau, transaction_id)
                outcomes.append(BureauOutcome(bureau=bureau, record=record))
            except DomainException as e:
                record_report_failure(bureau.value)
                logger.warning(
                    f"Report generation failed: {e}",
                    extra={"consumer_id": consumer_id, "bureau": bureau.value, "transaction_id": transaction_id},
                )
                outcomes.append(BureauOutcome(bureau=bureau, error=str(e)))
            except Exception as e:
                record_report_failure(bureau.value)
                logger.error(
                    f"Unexpected error generating report: {e}",
                    extra={"consumer_id": consumer_id, "bureau": bureau.value, "transaction_id": transaction_id},
                )
                outcomes.append(BureauOutcome(bureau=bureau, error="Report generation failed"))
        return outcomes

    def get(self, report_id: str) -> CreditReportRecord:
        record = self.reports.get(report_id)
        if record is None:
            raise ReportNotFoundError(f"Report {report_id} not found")
        return record

    def list_by_consumer(self, consumer_id: str) -> List[CreditReportRecord]:
        return self.reports.list_by_consumer(consumer_id)

    def list_by_generator(self, actor_id: str) -> List[CreditReportRecord]:
        return self.reports.list_by_generator(actor_id)

    def list_all(self) -> List[CreditReportRecord]:
        return self.reports.list_all()
