from gst_compliance.records import SaleRecord, normalize_records
from gst_compliance.tax_calculator import TaxCalculation, calculate_taxes, format_rate


def _record(amount, rate, state, product=""):
    return SaleRecord(amount=amount, tax_rate=rate, state=state, product=product)


def test_example_home_and_other_state(sample_rows):
    calc = calculate_taxes(normalize_records(sample_rows))
    assert calc.total_sales == 3000
    assert calc.cgst == 90
    assert calc.sgst == 90
    assert calc.igst == 360
    assert calc.total_tax == 540
    assert calc.sales_by_state == {"Home State": 1000, "Other": 2000}
    assert calc.sales_by_tax_slab == {18.0: 3000}


def test_empty_input_is_all_zero():
    calc = calculate_taxes([])
    assert calc == TaxCalculation()
    assert calc.sales_by_state == {}
    assert calc.sales_by_tax_slab == {}


def test_total_tax_is_sum_of_parts():
    records = [
        _record(123.45, 5, "Home State"),
        _record(999.99, 12, "Karnataka"),
        _record(10.01, 28, "Home State"),
        _record(77.7, 18, "Unknown"),
    ]
    calc = calculate_taxes(records)
    assert calc.total_tax == calc.cgst + calc.sgst + calc.igst


def test_home_state_never_contributes_igst():
    calc = calculate_taxes([_record(500, 12, "Home State"), _record(300, 28, "Home State")])
    assert calc.igst == 0
    assert calc.cgst == calc.sgst == (60 + 84) / 2


def test_other_states_never_contribute_cgst_sgst():
    calc = calculate_taxes([_record(500, 12, "Gujarat"), _record(300, 28, "Unknown")])
    assert calc.cgst == 0
    assert calc.sgst == 0
    assert calc.igst == 60 + 84


def test_aggregate_is_idempotent():
    records = [_record(100, 5, "Home State"), _record(250, 18, "Delhi")]
    first = calculate_taxes(records)
    second = calculate_taxes(records)
    assert first == second
    assert records == [_record(100, 5, "Home State"), _record(250, 18, "Delhi")]


def test_to_dict_formats_slab_keys():
    calc = calculate_taxes([_record(100, 18, "X"), _record(50, 12.5, "X")])
    data = calc.to_dict()
    assert data["sales_by_tax_slab"] == {"18": 100, "12.5": 50}
    assert format_rate(0.0) == "0"
