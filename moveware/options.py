# File: options.py
"""Pricing options from the two Moveware endpoints that expose them.

Legacy ``GET /jobs/{id}/options?include=charges``::

    {options: [{id, description, optionDescription, valueInclusive,
                valueExclusive, charges: {I: {...}, I2: {...}}}]}

Consolidated ``GET /jobs/{id}/quotations/{quoteId}?include=options``::

    {id, quotationDate, options: [{id, description, optionDescription,
     details, inclusions, exclusions, costCenter,
     charges: [{id, description, included, rateInclusive, rateExclusive,
                sort, oneTotal, ...}]}]}

Differences that matter: the legacy ``charges`` is a keyed object, the
consolidated one an array; consolidated inclusions/exclusions are bullet
strings, and its option-level ``valueInclusive`` is often 0 so the total has
to be summed from included charges.
"""
from __future__ import annotations

from typing import Any, List

from .fields import is_flag_set, pick, split_bullets, to_array, to_num, to_str
from .models import InternalCosting, InternalCostingCharge

# Upstream omits the net figure on some options; gross / 1.1 assumes 10% GST.
DEFAULT_TAX_DIVISOR = 1.1

LEGACY_SHAPE = "options"
QUOTATION_SHAPE = "quotation"


def _net_total(net: float, total: float, tax_divisor: float) -> str:
    if net > 0:
        return f"{net:.2f}"
    if total > 0 and tax_divisor:
        return f"{total / tax_divisor:.2f}"
    return "0.00"


def _display_name(option: dict, idx: int) -> tuple:
    # optionDescription is what the customer should see; description is internal
    description = to_str(pick(option, "description", "name", "title", "label"))
    display = to_str(pick(option, "optionDescription")) or description
    return display or f"Option {idx + 1}", description


def _option_id(option: dict, idx: int) -> str:
    return to_str(pick(option, "id", "optionId", "costingId") or f"opt-{idx}")


def _charge_values(raw: Any) -> List[dict]:
    if isinstance(raw, list):
        return [c for c in raw if isinstance(c, dict)]
    if isinstance(raw, dict):
        return [c for c in raw.values() if isinstance(c, dict)]
    return []


def adapt_charge(charge: dict) -> InternalCostingCharge:
    # The aggregate oneTotal charge often reports rateExclusive=0 with the
    # real figure in rateInclusive.
    rate_ex = to_num(pick(charge, "rateExclusive", "rateEx"))
    rate_in = to_num(pick(charge, "rateInclusive", "rate", "price"))
    one_total = charge.get("oneTotal")
    return InternalCostingCharge(
        id=int(to_num(pick(charge, "id"))),
        heading=to_str(pick(charge, "description")),
        notes=to_str(pick(charge, "notes")),
        quantity=to_num(pick(charge, "quantity", "qty")) or 1,
        price=rate_ex if rate_ex > 0 else rate_in,
        currency=to_str(pick(charge, "currency")) or "AUD",
        currency_symbol=to_str(pick(charge, "currencySymbol")) or "$",
        tax_code=to_str(pick(charge, "taxCode")),
        sort=to_str(pick(charge, "sort")),
        included=is_flag_set(charge.get("included")),
        is_base_charge=one_total == "Y" or one_total is True,
    )


def adapt_mw_options(raw: Any, tax_divisor: float = DEFAULT_TAX_DIVISOR) -> List[InternalCosting]:
    """Legacy options endpoint → costings."""
    costings = []
    for idx, option in enumerate(to_array(raw, "options", "costings")):
        if not isinstance(option, dict):
            option = {}
        raw_charges = _charge_values(pick(option, "charges", "lineItems", "items"))
        charges = [adapt_charge(c) for c in raw_charges]
        name, description = _display_name(option, idx)

        # Income charges (type "I") with a description are the inclusions
        inclusions = [
            to_str(c.get("description"))
            for c in raw_charges
            if to_str(c.get("type")) == "I" and to_str(c.get("description"))
        ]
        exclusions = option.get("exclusions")
        exclusions = [to_str(e) for e in exclusions] if isinstance(exclusions, list) else []

        total = to_num(
            pick(option, "valueInclusive", "totalAmount", "totalPrice", "amount", "total", "grossTotal")
        )
        if total <= 0:
            # Gross figures only; c.price prefers the ex-tax rate
            total = sum(
                to_num(pick(c, "rateInclusive", "valueInclusive"))
                for c in raw_charges
                if is_flag_set(c.get("included"))
            )
        net = to_num(pick(option, "valueExclusive", "netAmount", "netTotal", "netPrice", "subTotal"))

        costings.append(
            InternalCosting(
                id=_option_id(option, idx),
                name=name,
                category=to_str(pick(option, "category", "serviceType")),
                description=description,
                quantity=to_num(pick(option, "quantity", "qty")) or 1,
                rate=total,
                net_total=_net_total(net, total, tax_divisor),
                total_price=total,
                tax_included=pick(option, "taxIncluded", "gstIncluded", "includesTax") is not False,
                currency="AUD",
                currency_symbol="$",
                charges=charges,
                inclusions=inclusions,
                exclusions=exclusions,
            )
        )
    return costings


def adapt_mw_quotation_options(raw: Any, tax_divisor: float = DEFAULT_TAX_DIVISOR) -> List[InternalCosting]:
    """Consolidated quotation endpoint → costings."""
    options = raw.get("options") if isinstance(raw, dict) else None
    if not isinstance(options, list):
        return []

    costings = []
    for idx, option in enumerate(options):
        if not isinstance(option, dict):
            option = {}
        listed = option.get("charges")
        raw_charges = _charge_values(listed) if isinstance(listed, list) else []
        ordered = sorted(raw_charges, key=lambda c: to_str(pick(c, "sort")))
        charges = [adapt_charge(c) for c in ordered]

        total = to_num(pick(option, "valueInclusive", "totalAmount"))
        if total <= 0:
            # Strict boolean here: this endpoint sends real booleans
            total = sum(
                to_num(pick(c, "rateInclusive", "valueInclusive"))
                for c in raw_charges
                if c.get("included") is True
            )

        name, description = _display_name(option, idx)
        inclusions = to_str(pick(option, "inclusions"))
        exclusions = to_str(pick(option, "exclusions"))
        first = charges[0] if charges else None

        costings.append(
            InternalCosting(
                id=_option_id(option, idx),
                name=name,
                category=to_str(pick(option, "costCenter", "service", "jobType")),
                description=to_str(pick(option, "details")) or description,
                quantity=1,
                rate=total,
                net_total=_net_total(0, total, tax_divisor),
                total_price=total,
                tax_included=True,
                currency=(first.currency if first else "") or "AUD",
                currency_symbol=(first.currency_symbol if first else "") or "$",
                charges=charges,
                inclusions=split_bullets(inclusions) if inclusions else [],
                exclusions=split_bullets(exclusions) if exclusions else [],
            )
        )
    return costings


def detect_options_shape(raw: Any) -> str:
    """Tell the two option payloads apart.

    Array charges or bullet-string inclusions only occur in the consolidated
    quotation payload; everything else is treated as the legacy shape.
    """
    options = raw.get("options") if isinstance(raw, dict) else None
    if isinstance(options, list):
        for option in options:
            if not isinstance(option, dict):
                continue
            if isinstance(option.get("charges"), list) or isinstance(option.get("inclusions"), str):
                return QUOTATION_SHAPE
    return LEGACY_SHAPE


def adapt_costings(raw: Any, tax_divisor: float = DEFAULT_TAX_DIVISOR) -> List[InternalCosting]:
    if detect_options_shape(raw) == QUOTATION_SHAPE:
        return adapt_mw_quotation_options(raw, tax_divisor)
    return adapt_mw_options(raw, tax_divisor)
