from datetime import date, datetime

from conftest import fake_openai_client
from gst_compliance.business_analyzer import BusinessAnalysis
from gst_compliance.compliance_planner import (
    calculate_deadlines,
    check_compliance,
    compose_plan,
    prepare_documents,
    upcoming_deadlines,
)
from gst_compliance.records import normalize_records
from gst_compliance.tax_calculator import calculate_taxes
from gst_compliance.text_generator import OpenAITextGenerator, TextGenerator, GenerationResult


TODAY = date(2026, 10, 19)


def _analysis(size="Micro", risk="Medium", state="Home State"):
    return BusinessAnalysis(
        primary_tax_slab=18.0,
        primary_state=state,
        average_transaction=1500.0,
        business_size=size,
        compliance_risk=risk,
        risk_score={"Low": 0, "Medium": 2, "High": 3}[risk],
    )


class EchoGenerator(TextGenerator):
    name = "echo"

    def __init__(self):
        self.prompts = []

    def generate(self, prompt, fallback):
        self.prompts.append(prompt)
        return GenerationResult(text="LLM: " + prompt[:20], generated=True)


def test_deadlines_next_month():
    deadlines = calculate_deadlines(TODAY)
    assert deadlines.gstr1 == date(2026, 11, 10)
    assert deadlines.gstr3b == date(2026, 11, 20)
    assert deadlines.payment == date(2026, 11, 20)


def test_deadlines_roll_over_december():
    deadlines = calculate_deadlines(datetime(2026, 12, 31, 23, 0))
    assert deadlines.gstr1 == date(2027, 1, 10)
    assert deadlines.gstr3b == date(2027, 1, 20)


def test_check_compliance_micro_medium_risk(retriever):
    check = check_compliance(_analysis(), retriever, now=TODAY)
    assert check.applicable_returns == ["GSTR-1", "GSTR-3B"]
    assert check.special_schemes == ["Composition Scheme"]
    assert check.risk_areas == ["Interstate Sales", "Multiple Tax Rates"]
    assert check.itc_eligibility is False
    assert check.relevant_knowledge
    assert len(check.relevant_knowledge) <= 3


def test_check_compliance_low_risk_large():
    check = check_compliance(_analysis(size="Large", risk="Low"), None, now=TODAY)
    assert check.special_schemes == []
    assert check.risk_areas == []
    assert check.itc_eligibility is True
    assert check.relevant_knowledge == []


def test_plan_fallback_when_generator_fails(retriever):
    def create(**kwargs):
        raise ConnectionError("down")

    failing = OpenAITextGenerator(fake_openai_client(create))
    analysis = _analysis()
    check = check_compliance(analysis, retriever, now=TODAY)

    plan = compose_plan(analysis, check, failing)

    assert plan.generated is False
    assert "COMPLIANCE PLAN FOR MICRO BUSINESS" in plan.narrative
    assert "File GSTR-1 by Tue Nov 10 2026" in plan.narrative
    assert "File GSTR-3B by Fri Nov 20 2026" in plan.narrative
    assert "Interstate Sales, Multiple Tax Rates" in plan.narrative
    assert "Composition Scheme" in plan.narrative

    data = plan.to_dict()
    assert data["deadlines"] == {"gstr1": "2026-11-10", "gstr3b": "2026-11-20", "payment": "2026-11-20"}
    assert data["risk_areas"] == ["Interstate Sales", "Multiple Tax Rates"]


def test_plan_fallback_is_deterministic(template_generator):
    analysis = _analysis(size="Small", risk="Low")
    check = check_compliance(analysis, None, now=TODAY)
    first = compose_plan(analysis, check, template_generator)
    second = compose_plan(analysis, check, template_generator)
    assert first.narrative == second.narrative
    assert "no special schemes" in first.narrative


def test_plan_uses_generated_text():
    generator = EchoGenerator()
    analysis = _analysis()
    plan = compose_plan(analysis, check_compliance(analysis, None, now=TODAY), generator)
    assert plan.generated is True
    assert plan.narrative.startswith("LLM: ")
    assert "Micro business" in generator.prompts[0]


def test_prepare_documents(sample_rows, template_generator):
    calc = calculate_taxes(normalize_records(sample_rows))
    check = check_compliance(_analysis(), None, now=TODAY)

    docs = prepare_documents(calc, check, template_generator)

    assert [d.type for d in docs] == ["Tax Summary", "Compliance Checklist", "Payment Instructions"]
    assert "Total Tax Payable: ₹540.00" in docs[0].content
    assert "[ ] File GSTR-1 by Tue Nov 10 2026" in docs[1].content
    assert "Enter tax amount: ₹540.00" in docs[2].content


def test_upcoming_deadlines():
    deadlines = upcoming_deadlines(TODAY)
    by_form = {d["form"]: d for d in deadlines}
    assert by_form["GSTR-1"]["due_date"] == "2026-11-10"
    assert by_form["GSTR-1"]["days_remaining"] == 22
    assert by_form["GSTR-3B"]["due_date"] == "2026-11-20"
    assert by_form["GSTR-9"]["due_date"] == "2026-12-31"
    assert by_form["GSTR-9"]["days_remaining"] == 73
