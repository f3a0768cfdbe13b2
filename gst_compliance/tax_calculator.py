from dataclasses import dataclass, field
from typing import Dict
from loguru import logger


@dataclass(frozen=True)
class TaxCalculation:
    """aggregate GST liability for one upload"""
    total_sales: float = 0.0
    cgst: float = 0.0
    sgst: float = 0.0
    igst: float = 0.0
    total_tax: float = 0.0
    sales_by_state: Dict[str, float] = field(default_factory=dict)
    sales_by_tax_slab: Dict[float, float] = field(default_factory=dict)

    def to_dict(self):
        return {
            "total_sales": self.total_sales,
            "cgst": self.cgst,
            "sgst": self.sgst,
            "igst": self.igst,
            "total_tax": self.total_tax,
            "sales_by_state": dict(self.sales_by_state),
            "sales_by_tax_slab": {format_rate(rate): amount for rate, amount in self.sales_by_tax_slab.items()},
        }


def format_rate(rate):
    """18.0 -> '18', 12.5 -> '12.5'"""
    return f"{rate:g}"


def calculate_taxes(records):
    """
    fold sale records into a TaxCalculation
    intra-state sales split evenly into CGST/SGST, everything else is IGST
    """
    total_sales = 0.0
    cgst = 0.0
    sgst = 0.0
    igst = 0.0
    sales_by_state = {}
    sales_by_tax_slab = {}

    for record in records:
        amount = record.amount
        total_sales += amount

        sales_by_state[record.state] = sales_by_state.get(record.state, 0.0) + amount
        sales_by_tax_slab[record.tax_rate] = sales_by_tax_slab.get(record.tax_rate, 0.0) + amount

        tax_amount = amount * record.tax_rate / 100
        if record.is_intra_state:
            cgst += tax_amount / 2
            sgst += tax_amount / 2
        else:
            igst += tax_amount

    calculation = TaxCalculation(
        total_sales=total_sales,
        cgst=cgst,
        sgst=sgst,
        igst=igst,
        total_tax=cgst + sgst + igst,
        sales_by_state=sales_by_state,
        sales_by_tax_slab=sales_by_tax_slab,
    )

    logger.info(f"Calculated GST: sales={total_sales:.2f}, tax={calculation.total_tax:.2f} "
                f"(CGST {cgst:.2f}, SGST {sgst:.2f}, IGST {igst:.2f})")

    return calculation
