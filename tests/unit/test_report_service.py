"""Unit tests for report generation, revisioning and batch isolation"""

import pytest
from credicheck.domain.exceptions import ConsumerNotFoundError, EmptyBureauSelectionError, ReportNotFoundError
from credicheck.domain.models import Bureau


def test_first_generation_is_revision_one(services):
    services.add_consumer()

    record = services.report_service.generate("consumer-1", "consumer-1", Bureau.CIBIL, "TXN-1")

    assert record.revision == 1
    assert services.report_service.get(record.id) == record


def test_refresh_appends_next_revision(services):
    """Refresh creates revision 2; revision 1 is unchanged when re-read"""
    services.add_consumer()
    first = services.report_service.generate("consumer-1", "consumer-1", Bureau.CIBIL, "TXN-1")

    second = services.report_service.generate("consumer-1", "consumer-1", Bureau.CIBIL, "TXN-2")

    assert second.revision == 2
    assert second.id != first.id
    assert services.report_service.get(first.id) == first
    assert [r.revision for r in services.report_service.list_by_consumer("consumer-1")] == [2, 1]


def test_revisions_are_per_bureau(services):
    services.add_consumer()
    services.report_service.generate("consumer-1", "consumer-1", Bureau.CIBIL, "TXN-1")

    assert services.report_service.next_revision("consumer-1", Bureau.CIBIL) == 2
    assert services.report_service.next_revision("consumer-1", Bureau.EXPERIAN) == 1
    assert services.report_service.has_reports("consumer-1", [Bureau.EXPERIAN, Bureau.CIBIL])
    assert not services.report_service.has_reports("consumer-1", [Bureau.CRIF])


def test_assemble_missing_consumer(services):
    with pytest.raises(ConsumerNotFoundError):
        services.report_service.assemble("ghost", "ghost", Bureau.CIBIL, "TXN-1", 1)


def test_assemble_does_not_persist(services):
    services.add_consumer()
    services.report_service.assemble("consumer-1", "consumer-1", Bureau.CIBIL, "TXN-1", 1)
    assert services.report_service.list_all() == []


def test_batch_generates_one_report_per_bureau(services):
    services.add_consumer()

    outcomes = services.report_service.generate_batch(
        "consumer-1", "partner-1", [Bureau.CIBIL, Bureau.EXPERIAN, Bureau.CIBIL], "TXN-1"
    )

    assert [o.bureau for o in outcomes] == [Bureau.CIBIL, Bureau.EXPERIAN]
    assert all(o.succeeded for o in outcomes)
    assert all(o.record.transaction_id == "TXN-1" for o in outcomes)
    assert all(o.record.generated_by == "partner-1" for o in outcomes)


def test_batch_isolates_failing_bureau(services, monkeypatch):
    """A failing bureau is reported and the remaining bureaus still generate"""
    services.add_consumer()
    original = services.report_service.assemble

    def flaky_assemble(consumer_id, generator_id, bureau, transaction_id, revision):
        if bureau == Bureau.EXPERIAN:
            raise ConsumerNotFoundError(f"Consumer {consumer_id} not found")
        return original(consumer_id, generator_id, bureau, transaction_id, revision)

    monkeypatch.setattr(services.report_service, "assemble", flaky_assemble)

    outcomes = services.report_service.generate_batch(
        "consumer-1", "consumer-1", [Bureau.CIBIL, Bureau.EXPERIAN, Bureau.EQUIFAX], "TXN-1"
    )

    assert [o.succeeded for o in outcomes] == [True, False, True]
    assert "not found" in outcomes[1].error
    assert len(services.report_service.list_all()) == 2


def test_batch_for_missing_consumer_reports_every_bureau(services):
    outcomes = services.report_service.generate_batch("ghost", "ghost", [Bureau.CIBIL, Bureau.CRIF], "TXN-1")
    assert [o.succeeded for o in outcomes] == [False, False]


def test_batch_rejects_empty_selection(services):
    with pytest.raises(EmptyBureauSelectionError):
        services.report_service.generate_batch("consumer-1", "consumer-1", [], "TXN-1")


def test_get_unknown_report(services):
    with pytest.raises(ReportNotFoundError):
        services.report_service.get("RPT-NOPE")


def test_list_by_generator(services):
    services.add_consumer()
    services.report_service.generate("consumer-1", "partner-1", Bureau.CIBIL, "TXN-1")
    services.report_service.generate("consumer-1", "consumer-1", Bureau.CRIF, "TXN-2")

    assert len(services.report_service.list_by_generator("partner-1")) == 1
    assert len(services.report_service.list_by_generator("consumer-1")) == 1


def test_stale_revision_read_is_retried(services, monkeypatch):
    """A revision taken between read and insert is re-read, not duplicated"""
    services.add_consumer()
    services.report_service.generate("consumer-1", "consumer-1", Bureau.CIBIL, "TXN-1")
    reports = services.report_service.reports
    original = reports.latest_revision
    stale_reads = [0]

    def latest_revision(consumer_id, bureau):
        if stale_reads:
            return stale_reads.pop()
        return original(consumer_id, bureau)

    monkeypatch.setattr(reports, "latest_revision", latest_revision)

    record = services.report_service.generate("consumer-1", "consumer-1", Bureau.CIBIL, "TXN-2")

    assert record.revision == 2
    assert sorted(r.revision for r in services.report_service.list_by_consumer("consumer-1")) == [1, 2]


def test_batch_reports_revision_conflict_as_failed_outcome(services, monkeypatch):
    """A lineage that keeps clashing fails alone; the other bureau still generates"""
    services.add_consumer()
    services.report_service.generate("consumer-1", "consumer-1", Bureau.CIBIL, "TXN-1")
    monkeypatch.setattr(services.report_service.reports, "latest_revision", lambda consumer_id, bureau: 0)

    outcomes = services.report_service.generate_batch("consumer-1", "consumer-1", [Bureau.CIBIL, Bureau.EXPERIAN], "TXN-2")

    assert [o.bureau for o in outcomes] == [Bureau.CIBIL, Bureau.EXPERIAN]
    assert [o.succeeded for o in outcomes] == [False, True]
    assert "already exists" in outcomes[0].error
    assert outcomes[1].record.revision == 1
    assert len(services.report_service.list_all()) == 2


def test_batch_contains_unexpected_errors(services, monkeypatch):
    services.add_consumer()
    original = services.report_service.assemble

    def broken_assemble(consumer_id, generator_id, bureau, transaction_id, revision):
        if bureau == Bureau.CIBIL:
            raise RuntimeError("template missing")
        return original(consumer_id, generator_id, bureau, transaction_id, revision)

    monkeypatch.setattr(services.report_service, "assemble", broken_assemble)

    outcomes = services.report_service.generate_batch("consumer-1", "consumer-1", [Bureau.CIBIL, Bureau.CRIF], "TXN-1")

    assert [o.succeeded for o in outcomes] == [False, True]
    assert outcomes[0].error == "Report generation failed"
    assert "template missing" not in outcomes[0].error
