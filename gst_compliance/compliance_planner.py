from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List
from loguru import logger


APPLICABLE_RETURNS = ("GSTR-1", "GSTR-3B")
GSTR1_DUE_DAY = 10
GSTR3B_DUE_DAY = 20

STATUTORY_DEADLINES = [
    {"id": 1, "form": "GSTR-1", "rule": "10th of every month", "description": "Details of outward supplies"},
    {"id": 2, "form": "GSTR-3B", "rule": "20th of every month", "description": "Monthly summary return"},
    {"id": 3, "form": "GSTR-9", "rule": "31st December", "description": "Annual return"},
]


@dataclass(frozen=True)
class FilingDeadlines:
    gstr1: date
    gstr3b: date
    payment: date

    def to_dict(self):
        return {
            "gstr1": self.gstr1.isoformat(),
            "gstr3b": self.gstr3b.isoformat(),
            "payment": self.payment.isoformat(),
        }


@dataclass(frozen=True)
class ComplianceCheck:
    """which returns, deadlines, schemes and risk flags apply to a business"""
    applicable_returns: List[str]
    deadlines: FilingDeadlines
    itc_eligibility: bool
    special_schemes: List[str]
    risk_areas: List[str]
    relevant_knowledge: List[Dict] = field(default_factory=list)

    def to_dict(self):
        return {
            "applicable_returns": list(self.applicable_returns),
            "deadlines": self.deadlines.to_dict(),
            "itc_eligibility": self.itc_eligibility,
            "special_schemes": list(self.special_schemes),
            "risk_areas": list(self.risk_areas),
            "relevant_knowledge": list(self.relevant_knowledge),
        }


@dataclass(frozen=True)
class CompliancePlan:
    """structured plan plus its free-text elaboration"""
    business_size: str
    compliance_risk: str
    check: ComplianceCheck
    narrative: str
    generated: bool

    def to_dict(self):
        data = self.check.to_dict()
        data.update({
            "business_size": self.business_size,
            "compliance_risk": self.compliance_risk,
            "narrative": self.narrative,
            "generated": self.generated,
        })
        return data


@dataclass(frozen=True)
class ComplianceDocument:
    type: str
    content: str
    generated: bool = False

    def to_dict(self):
        return {"type": self.type, "content": self.content, "generated": self.generated}


def _today(now):
    if now is None:
        return date.today()
    if isinstance(now, datetime):
        return now.date()
    return now


def _next_month(day):
    if day.month == 12:
        return day.year + 1, 1
    return day.year, day.month + 1


def _format_date(day):
    return day.strftime("%a %b %d %Y")


def calculate_deadlines(now=None):
    """GSTR-1 on the 10th and GSTR-3B/payment on the 20th of next month"""
    year, month = _next_month(_today(now))
    return FilingDeadlines(
        gstr1=date(year, month, GSTR1_DUE_DAY),
        gstr3b=date(year, month, GSTR3B_DUE_DAY),
        payment=date(year, month, GSTR3B_DUE_DAY),
    )


def upcoming_deadlines(now=None):
    """statutory deadlines with their next due date and days remaining"""
    today = _today(now)
    next_dates = calculate_deadlines(today)

    annual = date(today.year, 12, 31)

    due_dates = {
        "GSTR-1": next_dates.gstr1,
        "GSTR-3B": next_dates.gstr3b,
        "GSTR-9": annual,
    }

    deadlines = []
    for deadline in STATUTORY_DEADLINES:
        due = due_dates[deadline["form"]]
        entry = dict(deadline)
        entry["due_date"] = due.isoformat()
        entry["days_remaining"] = (due - today).days
        deadlines.append(entry)

    return deadlines


def build_compliance_query(analysis):
    return f"GST compliance requirements for {analysis.business_size} business in {analysis.primary_state}"


def check_compliance(analysis, retriever=None, now=None, max_results=3):
    """applicable returns, deadlines, schemes and risk areas for the business"""
    relevant = []
    if retriever is not None:
        for result in retriever.retrieve(build_compliance_query(analysis), max_results=max_results):
            relevant.append(result.to_dict())

    is_low_risk = analysis.compliance_risk == "Low"

    check = ComplianceCheck(
        applicable_returns=list(APPLICABLE_RETURNS),
        deadlines=calculate_deadlines(now),
        itc_eligibility=is_low_risk,
        special_schemes=["Composition Scheme"] if analysis.business_size == "Micro" else [],
        risk_areas=[] if is_low_risk else ["Interstate Sales", "Multiple Tax Rates"],
        relevant_knowledge=relevant,
    )

    logger.info(f"Compliance check: risk areas={check.risk_areas or 'none'}, schemes={check.special_schemes or 'none'}")
    return check


def fallback_plan_text(analysis, check):
    """deterministic 3-month plan built only from computed fields"""
    deadlines = check.deadlines
    schemes = ", ".join(check.special_schemes) if check.special_schemes else "no special schemes"
    risk_focus = ", ".join(check.risk_areas) if check.risk_areas else "routine compliance"

    lines = [
        f"COMPLIANCE PLAN FOR {analysis.business_size.upper()} BUSINESS",
        f"Compliance risk: {analysis.compliance_risk} (focus: {risk_focus})",
        "",
        "Month 1:",
        f"- File GSTR-1 by {_format_date(deadlines.gstr1)}",
        f"- File GSTR-3B by {_format_date(deadlines.gstr3b)}",
        f"- Pay taxes by {_format_date(deadlines.payment)}",
        "- Reconcile input tax credit claims",
        "",
        "Month 2:",
        "- Review compliance with new 2024 regulations",
        "- Optimize tax strategy based on sales patterns",
        "- Prepare for upcoming deadlines",
        "",
        "Month 3:",
        "- Conduct compliance health check",
        "- Plan for next quarter based on business trends",
        f"- Consider {schemes} if applicable",
    ]
    return "\n".join(lines)


def compose_plan(analysis, check, text_generator):
    """CompliancePlan with LLM narrative, or the template when generation fails"""
    focus = ", ".join(check.risk_areas) if check.risk_areas else "routine compliance"
    prompt = (
        f"Create a comprehensive 3-month GST compliance plan for a {analysis.business_size} business "
        f"with {analysis.compliance_risk} compliance risk. Focus on: {focus}. "
        f"GSTR-1 is due on {check.deadlines.gstr1.isoformat()}, GSTR-3B and payment on {check.deadlines.gstr3b.isoformat()}. "
        "Include monthly actions, deadlines, and risk mitigation strategies."
    )

    result = text_generator.generate(prompt, fallback=fallback_plan_text(analysis, check))

    return CompliancePlan(
        business_size=analysis.business_size,
        compliance_risk=analysis.compliance_risk,
        check=check,
        narrative=result.text,
        generated=result.generated,
    )


def generate_tax_summary(calculation):
    content = "\n".join([
        "TAX CALCULATION SUMMARY:",
        f"Total Sales: ₹{calculation.total_sales:,.2f}",
        f"CGST Liability: ₹{calculation.cgst:.2f}",
        f"SGST Liability: ₹{calculation.sgst:.2f}",
        f"IGST Liability: ₹{calculation.igst:.2f}",
        f"Total Tax Payable: ₹{calculation.total_tax:.2f}",
        "",
        "RECOMMENDATIONS:",
        "- File returns before deadlines to avoid penalties",
        "- Claim eligible input tax credit",
        "- Maintain proper documentation",
    ])
    return ComplianceDocument(type="Tax Summary", content=content)


def generate_compliance_checklist(check):
    deadlines = check.deadlines
    content = "\n".join([
        "COMPLIANCE CHECKLIST:",
        f"[ ] File GSTR-1 by {_format_date(deadlines.gstr1)}",
        f"[ ] File GSTR-3B by {_format_date(deadlines.gstr3b)}",
        f"[ ] Pay taxes by {_format_date(deadlines.payment)}",
        "[ ] Reconcile input tax credit",
        "[ ] Maintain invoice records",
        "[ ] Review compliance with new 2024 rules",
    ])
    return ComplianceDocument(type="Compliance Checklist", content=content)


def fallback_payment_text(tax_amount):
    return "\n".join([
        f"HOW TO PAY GST OF ₹{tax_amount:.2f}:",
        "",
        "1. Login to GST portal (gst.gov.in)",
        "2. Go to Services > Payments > Create Challan",
        f"3. Enter tax amount: ₹{tax_amount:.2f}",
        "4. Select payment method: Net Banking/Credit Card/UPI",
        "5. Complete payment process",
        "6. Save payment receipt (Challan)",
        "7. Use Challan number when filing returns",
    ])


def generate_payment_instructions(tax_amount, text_generator):
    prompt = (
        f"Generate step-by-step payment instructions for paying GST of ₹{tax_amount:.2f} "
        "including online payment methods, bank options, and documentation required."
    )
    result = text_generator.generate(prompt, fallback=fallback_payment_text(tax_amount))
    return ComplianceDocument(type="Payment Instructions", content=result.text, generated=result.generated)


def prepare_documents(calculation, check, text_generator):
    """tax summary, checklist and payment instructions for one filing"""
    docs = [
        generate_tax_summary(calculation),
        generate_compliance_checklist(check),
        generate_payment_instructions(calculation.total_tax, text_generator),
    ]
    logger.info(f"Prepared {len(docs)} compliance documents")
    return docs
