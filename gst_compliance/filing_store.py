import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List
from loguru import logger

from .records import SaleRecord
from .tax_calculator import TaxCalculation
from .business_analyzer import BusinessAnalysis
from .compliance_planner import CompliancePlan, ComplianceDocument


class FilingNotFoundError(KeyError):
    """no filing with the requested id"""

    def __init__(self, filing_id):
        super().__init__(filing_id)
        self.filing_id = filing_id

    def __str__(self):
        return f"Filing not found: {self.filing_id}"


@dataclass(frozen=True)
class Filing:
    """one processed upload"""
    id: int
    file_name: str
    sales_data: List[SaleRecord]
    tax_calculation: TaxCalculation
    business_analysis: BusinessAnalysis
    compliance_plan: CompliancePlan
    documents: List[ComplianceDocument]
    created_at: datetime = field(default_factory=datetime.now)

    def summary(self):
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "file_name": self.file_name,
            "summary": self.tax_calculation.to_dict(),
        }

    def to_dict(self):
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "file_name": self.file_name,
            "sales_data": [r.to_dict() for r in self.sales_data],
            "tax_calculation": self.tax_calculation.to_dict(),
            "business_analysis": self.business_analysis.to_dict(),
            "compliance_plan": self.compliance_plan.to_dict(),
            "documents": [d.to_dict() for d in self.documents],
        }


@dataclass(frozen=True)
class AssistantExchange:
    question: str
    answer: str
    sources: List[str]
    generated: bool = False
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self):
        return {
            "question": self.question,
            "answer": self.answer,
            "sources": list(self.sources),
            "generated": self.generated,
            "created_at": self.created_at.isoformat(),
        }


class FilingStore:
    """
    in-memory, append-only store of filings and assistant questions
    created at start-up and cleared at shutdown, nothing is persisted
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._filings: Dict[int, Filing] = {}
        self._questions: List[AssistantExchange] = []
        self._last_id = 0

    def next_id(self):
        """strictly increasing id based on the microsecond clock"""
        with self._lock:
            # microseconds keep ids inside the JSON-safe integer range
            candidate = time.time_ns() // 1000
            if candidate <= self._last_id:
                candidate = self._last_id + 1
            self._last_id = candidate
            return candidate

    def add(self, filing):
        with self._lock:
            if filing.id in self._filings:
                raise ValueError(f"Duplicate filing id: {filing.id}")
            self._filings[filing.id] = filing
            count = len(self._filings)
        logger.info(f"Stored filing {filing.id} ({filing.file_name}), {count} total")
        return filing

    def get(self, filing_id):
        with self._lock:
            filing = self._filings.get(filing_id)
        if filing is None:
            raise FilingNotFoundError(filing_id)
        return filing

    def list_filings(self):
        """filings in the order they were added"""
        with self._lock:
            return list(self._filings.values())

    def latest(self):
        with self._lock:
            if not self._filings:
                return None
            return next(reversed(self._filings.values()))

    def add_question(self, exchange):
        with self._lock:
            self._questions.append(exchange)

    def list_questions(self):
        with self._lock:
            return list(self._questions)

    def clear(self):
        with self._lock:
            filings = len(self._filings)
            self._filings.clear()
            self._questions.clear()
        logger.info(f"Filing store cleared ({filings} filings discarded)")

    def __len__(self):
        with self._lock:
            return len(self._filings)
