from dataclasses import dataclass, asdict
from loguru import logger

from .tax_calculator import format_rate


MICRO_LIMIT = 100_000
SMALL_LIMIT = 1_000_000
MEDIUM_LIMIT = 5_000_000

HIGH_TAX_BURDEN = 0.15
MAX_SLABS_BEFORE_RISK = 3


class EmptyDatasetError(ValueError):
    """no sale records to analyze"""


@dataclass(frozen=True)
class BusinessAnalysis:
    """secondary metrics derived from a TaxCalculation"""
    primary_tax_slab: float
    primary_state: str
    average_transaction: float
    business_size: str
    compliance_risk: str
    risk_score: int

    def to_dict(self):
        data = asdict(self)
        data["primary_tax_slab"] = format_rate(self.primary_tax_slab)
        return data


def _dominant_key(totals):
    """key with the largest total, first key wins ties"""
    best_key = None
    best_value = None
    for key, value in totals.items():
        if best_value is None or value > best_value:
            best_key = key
            best_value = value
    return best_key


def classify_business_size(total_sales):
    # upload is assumed to cover one month of sales
    if total_sales < MICRO_LIMIT:
        return "Micro"
    if total_sales < SMALL_LIMIT:
        return "Small"
    if total_sales < MEDIUM_LIMIT:
        return "Medium"
    return "Large"


def assess_compliance_risk(calculation):
    """
    score 0-3 from three checks
    returns (score, label)
    """
    score = 0
    if calculation.igst > 0:
        score += 1  # interstate sales
    if len(calculation.sales_by_tax_slab) > MAX_SLABS_BEFORE_RISK:
        score += 1  # multiple tax rates
    if calculation.total_sales > 0 and calculation.total_tax / calculation.total_sales > HIGH_TAX_BURDEN:
        score += 1  # high tax burden

    if score < 2:
        label = "Low"
    elif score < 3:
        label = "Medium"
    else:
        label = "High"

    return score, label


def analyze_business_patterns(records, calculation):
    """derive BusinessAnalysis from the records and their TaxCalculation"""
    if not records:
        raise EmptyDatasetError("Cannot analyze an empty dataset: no sale records")

    risk_score, risk_label = assess_compliance_risk(calculation)

    analysis = BusinessAnalysis(
        primary_tax_slab=_dominant_key(calculation.sales_by_tax_slab),
        primary_state=_dominant_key(calculation.sales_by_state),
        average_transaction=calculation.total_sales / len(records),
        business_size=classify_business_size(calculation.total_sales),
        compliance_risk=risk_label,
        risk_score=risk_score,
    )

    logger.info(f"Business analysis: size={analysis.business_size}, risk={risk_label} ({risk_score}), "
                f"primary state={analysis.primary_state}, primary slab={format_rate(analysis.primary_tax_slab)}%")

    return analysis
