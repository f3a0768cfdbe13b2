import math
import re
from dataclasses import dataclass, asdict
from loguru import logger


HOME_STATE = "Home State"
UNKNOWN_STATE = "Unknown"
DEFAULT_TAX_RATE = 18.0

# checked in this order, first match wins
TAX_RATE_RULES = [
    (("essential", "food"), 0.0),
    (("common", "basic"), 5.0),
    (("standard", "processed"), 12.0),
    (("luxury", "premium"), 28.0),
]

# normalized header -> record field
HEADER_ALIASES = {
    "amount": "amount",
    "saleamount": "amount",
    "taxrate": "taxRate",
    "rate": "taxRate",
    "gstrate": "taxRate",
    "state": "state",
    "placeofsupply": "state",
    "product": "product",
    "productname": "product",
    "item": "product",
}


@dataclass(frozen=True)
class SaleRecord:
    """one normalized row of uploaded sales data"""
    amount: float
    tax_rate: float
    state: str
    product: str

    @property
    def is_intra_state(self):
        return self.state == HOME_STATE

    def to_dict(self):
        return asdict(self)


def _normalize_header(h):
    h = str(h).lower().strip()
    return re.sub(r"[ ._/-]+", "", h)


def _canonical_row(row):
    """map raw CSV headers onto the field names we look for"""
    canonical = {}
    for key, value in row.items():
        field = HEADER_ALIASES.get(_normalize_header(key))
        if field and field not in canonical:
            canonical[field] = value
    return canonical


def parse_decimal(value):
    """
    parse a currency/percentage cell
    returns None if the cell is empty or not a finite non-negative number
    """
    if value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        cleaned = str(value).replace("₹", "").replace(",", "").replace("%", "").strip()
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None

    if math.isnan(number) or math.isinf(number) or number < 0:
        return None
    return number


def infer_tax_rate(product):
    """guess the GST slab from the product label"""
    label = (product or "").lower()
    for keywords, rate in TAX_RATE_RULES:
        if any(kw in label for kw in keywords):
            return rate
    return DEFAULT_TAX_RATE


def normalize_record(row):
    """convert one raw row (strings) into a SaleRecord, never raises"""
    fields = _canonical_row(row)

    product = str(fields.get("product") or "").strip()
    state = str(fields.get("state") or "").strip() or UNKNOWN_STATE

    amount = parse_decimal(fields.get("amount"))
    if amount is None:
        logger.debug(f"Malformed amount {fields.get('amount')!r}, using 0")
        amount = 0.0

    tax_rate = parse_decimal(fields.get("taxRate"))
    if tax_rate is None:
        tax_rate = infer_tax_rate(product)

    return SaleRecord(amount=amount, tax_rate=tax_rate, state=state, product=product)


def normalize_records(rows):
    """normalize a sequence of raw rows"""
    records = [normalize_record(row) for row in rows]
    logger.info(f"Normalized {len(records)} sale records")
    return records
