# File: inventory.py
from __future__ import annotations

from typing import Any, List, Optional, Tuple

from .fields import pick, pick_dict, to_array, to_num, to_str
from .models import InternalInventoryItem, InternalMeasurements


def adapt_mw_inventory(raw: Any) -> List[InternalInventoryItem]:
    """Map ``{inventoryUsage: [...]}`` to inventory items.

    Moveware REST returns ``volume: {meter, feet, other}`` and
    ``weight: {kg, lb, totalkg, totallb}``; older API versions use flat
    ``cube`` / ``cubetot`` fields instead.
    """
    items = []
    for idx, item in enumerate(to_array(raw, "inventoryUsage", "inventory", "inventoryItems")):
        if not isinstance(item, dict):
            item = {}
        quantity = to_num(pick(item, "quantity", "qty", "count")) or 1

        volume = pick_dict(item, "volume")
        unit_cube = to_num(pick(volume, "meter", "other")) or to_num(
            pick(item, "cube", "cubicMetres", "m3")
        )
        cube_total = to_num(pick(item, "cubetot", "totalCube", "totalM3"))
        line_cube = cube_total if cube_total > 0 else unit_cube * quantity

        weight = pick_dict(item, "weight")
        weight_kg = (
            to_num(weight.get("totalkg"))
            or to_num(weight.get("kg"))
            or to_num(pick(item, "weightKg", "grossWeight", "wtGross", "weightGross", "unitWeight"))
        )

        items.append(
            InternalInventoryItem(
                id=int(to_num(pick(item, "id", "inventoryId", "itemId"))) or idx + 1,
                description=to_str(pick(item, "description", "itemDescription", "name", "number")),
                room=to_str(pick(item, "room", "roomName", "location", "area")),
                quantity=quantity,
                cube=line_cube,
                type_code=to_str(pick(item, "typeCode", "type", "packType", "category", "code")),
                weight_kg=weight_kg,
            )
        )
    return items


def adapt_mw_quotation_measurements(raw: Any) -> InternalMeasurements:
    """Read the quotation-level ``measurements`` block::

        {measurements: {volume: {gross: {meters, feet}},
                        weight: {gross: {kilograms, pounds}}}}
    """
    measurements = pick_dict(raw, "measurements")
    volume = pick_dict(pick(measurements, "volume"), "gross")
    weight = pick_dict(pick(measurements, "weight"), "gross")
    return InternalMeasurements(
        volume_gross_m3=to_num(pick(volume, "meters", "meter")),
        weight_gross_kg=to_num(pick(weight, "kilograms", "kg")),
        weight_gross_pounds=to_num(pick(weight, "pounds", "lbs")),
    )


def inventory_truncation(raw: Any) -> Optional[Tuple[int, int]]:
    """Return ``(reported, returned)`` when the API holds back inventory rows.

    The endpoint pages its results and only the first page is fetched.
    """
    if not isinstance(raw, dict):
        return None
    meta = pick_dict(raw, "meta")
    reported = pick(meta, "totalItems", "total", "count")
    usage = raw.get("inventoryUsage")
    if reported is None or not isinstance(usage, list):
        return None
    if to_num(reported) > len(usage):
        return int(to_num(reported)), len(usage)
    return None
