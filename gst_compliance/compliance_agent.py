from dataclasses import dataclass
from typing import List
from loguru import logger

from .records import SaleRecord, normalize_records
from .tax_calculator import TaxCalculation, calculate_taxes
from .business_analyzer import BusinessAnalysis, analyze_business_patterns
from .compliance_planner import (
    ComplianceCheck,
    CompliancePlan,
    ComplianceDocument,
    check_compliance,
    compose_plan,
    prepare_documents,
)


@dataclass(frozen=True)
class ProcessingResult:
    """everything computed for one upload"""
    records: List[SaleRecord]
    tax_calculation: TaxCalculation
    business_analysis: BusinessAnalysis
    compliance_check: ComplianceCheck
    compliance_plan: CompliancePlan
    documents: List[ComplianceDocument]


class TaxComplianceAgent:
    """
    runs the upload pipeline
    normalize -> calculate -> analyze -> check -> plan -> documents
    """

    def __init__(self, retriever, text_generator, max_results=3):
        self.retriever = retriever
        self.text_generator = text_generator
        self.max_results = max_results

    def process_business_data(self, rows, now=None):
        """
        process raw CSV rows
        raises EmptyDatasetError when there are no rows
        """
        logger.info("Agent: processing business data...")

        records = normalize_records(rows)
        calculation = calculate_taxes(records)
        analysis = analyze_business_patterns(records, calculation)
        check = check_compliance(analysis, self.retriever, now=now, max_results=self.max_results)
        plan = compose_plan(analysis, check, self.text_generator)
        documents = prepare_documents(calculation, check, self.text_generator)

        logger.success(f"Agent: processed {len(records)} records, plan generated={plan.generated}")

        return ProcessingResult(
            records=records,
            tax_calculation=calculation,
            business_analysis=analysis,
            compliance_check=check,
            compliance_plan=plan,
            documents=documents,
        )
