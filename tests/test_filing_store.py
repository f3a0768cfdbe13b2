import threading

import pytest

from gst_compliance.compliance_agent import TaxComplianceAgent
from gst_compliance.filing_store import AssistantExchange, Filing, FilingNotFoundError, FilingStore


@pytest.fixture
def processed(sample_rows, retriever, template_generator):
    return TaxComplianceAgent(retriever, template_generator).process_business_data(sample_rows)


def _filing(filing_id, processed, name="sales.csv"):
    return Filing(
        id=filing_id,
        file_name=name,
        sales_data=processed.records,
        tax_calculation=processed.tax_calculation,
        business_analysis=processed.business_analysis,
        compliance_plan=processed.compliance_plan,
        documents=processed.documents,
    )


def test_ids_strictly_increase():
    store = FilingStore()
    ids = [store.next_id() for _ in range(1000)]
    assert ids == sorted(ids)
    assert len(set(ids)) == len(ids)


def test_concurrent_appends_keep_every_filing(processed):
    store = FilingStore()

    def worker():
        for _ in range(50):
            store.add(_filing(store.next_id(), processed))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    filings = store.list_filings()
    assert len(filings) == 400
    assert len({f.id for f in filings}) == 400


def test_get_and_list(processed):
    store = FilingStore()
    first = store.add(_filing(store.next_id(), processed, "jan.csv"))
    second = store.add(_filing(store.next_id(), processed, "feb.csv"))

    assert store.get(first.id) is first
    assert [f.file_name for f in store.list_filings()] == ["jan.csv", "feb.csv"]
    assert store.latest() is second
    assert len(store) == 2


def test_missing_filing_raises():
    store = FilingStore()
    with pytest.raises(FilingNotFoundError) as exc:
        store.get(42)
    assert exc.value.filing_id == 42
    assert store.latest() is None


def test_duplicate_id_rejected(processed):
    store = FilingStore()
    store.add(_filing(7, processed))
    with pytest.raises(ValueError):
        store.add(_filing(7, processed))


def test_questions_and_clear(processed):
    store = FilingStore()
    store.add(_filing(store.next_id(), processed))
    store.add_question(AssistantExchange(question="q", answer="a", sources=[]))

    assert [q.question for q in store.list_questions()] == ["q"]

    store.clear()
    assert store.list_filings() == []
    assert store.list_questions() == []


def test_filing_serialization(processed):
    filing = _filing(5, processed)
    data = filing.to_dict()
    assert data["id"] == 5
    assert data["tax_calculation"]["total_tax"] == 540
    assert data["sales_data"][0] == {"amount": 1000.0, "tax_rate": 18.0, "state": "Home State", "product": "Widget"}
    assert [d["type"] for d in data["documents"]] == ["Tax Summary", "Compliance Checklist", "Payment Instructions"]
    assert filing.summary()["summary"]["total_sales"] == 3000
