import pytest

from moveware.options import (
    LEGACY_SHAPE,
    QUOTATION_SHAPE,
    adapt_costings,
    adapt_mw_options,
    adapt_mw_quotation_options,
    detect_options_shape,
)


def quotation_payload(**option):
    base = {
        "id": 7,
        "description": "internal",
        "optionDescription": "Premium Move",
        "valueInclusive": 0,
        "charges": [],
    }
    base.update(option)
    return {"id": 900, "options": [base]}


def test_base_charge_price_falls_back_to_inclusive_rate():
    raw = quotation_payload(
        charges=[
            {"id": 1, "description": "Move total", "rateExclusive": 0, "rateInclusive": 1050,
             "included": True, "oneTotal": "Y", "sort": "1"},
        ]
    )
    charge = adapt_mw_quotation_options(raw)[0].charges[0]
    assert charge.price == 1050
    assert charge.is_base_charge is True
    assert charge.included is True


def test_total_sums_only_strictly_included_charges():
    raw = quotation_payload(
        charges=[
            {"id": 1, "description": "Removal", "rateInclusive": 500, "included": True, "sort": "1"},
            {"id": 2, "description": "Storage", "rateInclusive": 200, "included": False, "sort": "2"},
            {"id": 3, "description": "Packing", "rateInclusive": 75, "included": "Y", "sort": "3"},
        ]
    )
    costing = adapt_mw_quotation_options(raw)[0]
    assert costing.total_price == 500
    assert costing.net_total == "454.55"
    # "Y" still counts as included on the mapped charge
    assert [c.included for c in costing.charges] == [True, False, True]


def test_quotation_options_parse_bullets_and_sort_charges():
    raw = quotation_payload(
        valueInclusive=1200,
        inclusions="• Packing\n- Loading\n",
        exclusions="* Piano",
        costCenter="Domestic",
        details="Full service",
        charges=[
            {"id": 2, "description": "Second", "rateInclusive": 10, "sort": "2", "currency": "NZD",
             "currencySymbol": "NZ$"},
            {"id": 1, "description": "First", "rateInclusive": 20, "sort": "1", "currency": "USD",
             "currencySymbol": "US$"},
        ],
    )
    costing = adapt_mw_quotation_options(raw)[0]
    assert costing.name == "Premium Move"
    assert costing.category == "Domestic"
    assert costing.description == "Full service"
    assert costing.inclusions == ["Packing", "Loading"]
    assert costing.exclusions == ["Piano"]
    assert [c.heading for c in costing.charges] == ["First", "Second"]
    assert costing.currency == "USD"
    assert costing.currency_symbol == "US$"
    assert costing.total_price == 1200
    assert costing.net_total == "1090.91"


def test_quotation_options_tolerate_missing_charges():
    costing = adapt_mw_quotation_options({"options": [{"id": 1}, "junk"]})
    assert len(costing) == 2
    assert costing[0].charges == []
    assert costing[0].total_price == 0
    assert costing[0].net_total == "0.00"
    assert costing[1].name == "Option 2"
    assert adapt_mw_quotation_options(None) == []


def test_legacy_options_flatten_keyed_charges():
    raw = {
        "options": [
            {
                "id": "OPT1",
                "description": "Standard",
                "valueInclusive": 2675,
                "valueExclusive": 2431.82,
                "exclusions": ["Storage fees"],
                "charges": {
                    "I": {"id": 11, "description": "Loading", "type": "I", "rateInclusive": 900,
                          "included": "Y"},
                    "I2": {"id": 12, "description": "Transport", "type": "I", "rateExclusive": 1500,
                           "included": "true"},
                    "X": {"id": 13, "description": "", "type": "I", "rateInclusive": 5},
                },
            }
        ]
    }
    costing = adapt_mw_options(raw)[0]
    assert costing.id == "OPT1"
    assert costing.name == "Standard"
    assert costing.total_price == 2675
    assert costing.net_total == "2431.82"
    assert costing.tax_included is True
    assert [c.id for c in costing.charges] == [11, 12, 13]
    assert costing.charges[1].price == 1500
    assert costing.inclusions == ["Loading", "Transport"]
    assert costing.exclusions == ["Storage fees"]


def test_legacy_options_total_falls_back_to_included_charges():
    raw = {
        "costings": [
            {
                "name": "Budget",
                "gstIncluded": False,
                "lineItems": [
                    {"description": "A", "rateInclusive": 300, "included": 1},
                    {"description": "B", "rateInclusive": 100, "included": 0},
                ],
            }
        ]
    }
    costing = adapt_mw_options(raw, tax_divisor=1.15)[0]
    assert costing.id == "opt-0"
    assert costing.total_price == 300
    assert costing.net_total == "260.87"
    assert costing.tax_included is False


def test_detect_shape_and_dispatch():
    legacy = {"options": [{"charges": {"I": {"rateInclusive": 1}}}]}
    consolidated = quotation_payload(charges=[{"rateInclusive": 1, "included": True}])
    bullets_only = {"options": [{"inclusions": "• Packing"}]}

    assert detect_options_shape(legacy) == LEGACY_SHAPE
    assert detect_options_shape(consolidated) == QUOTATION_SHAPE
    assert detect_options_shape(bullets_only) == QUOTATION_SHAPE
    assert detect_options_shape([]) == LEGACY_SHAPE

    assert adapt_costings(bullets_only)[0].inclusions == ["Packing"]
    assert adapt_costings(legacy)[0].total_price == 0


def test_costing_to_dict_nests_inclusions():
    data = adapt_costings(quotation_payload(inclusions="• Packing"))[0].to_dict()
    assert data["rawData"] == {"inclusions": ["Packing"], "exclusions": []}
    assert data["netTotal"] == "0.00"
    assert data["currency"] == "AUD"
    assert data["currencySymbol"] == "$"


def test_legacy_fallback_total_matches_quotation_shape():
    charge = {"id": 1, "description": "Removal", "rateExclusive": 1000, "rateInclusive": 1100,
              "included": True, "sort": "1"}
    legacy = adapt_mw_options({"options": [{"id": 1, "valueInclusive": 0, "charges": {"I": dict(charge)}}]})[0]
    consolidated = adapt_mw_quotation_options(quotation_payload(charges=[dict(charge)]))[0]

    assert legacy.total_price == 1100
    assert legacy.net_total == "1000.00"
    assert legacy.total_price == consolidated.total_price
    assert legacy.net_total == consolidated.net_total
    # the charge line itself still shows the ex-tax rate
    assert legacy.charges[0].price == 1000
