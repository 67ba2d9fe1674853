# File: quotation.py
"""Map a raw Moveware ``GET /jobs/{id}`` payload to :class:`InternalJob`.

Confirmed against the v1 response shape:
  - titleName / firstName / lastName sit at the root
  - addresses is an object keyed "Uplift", "Delivery", "origin", "destination"
  - measures is an array; volume/weight live under measures[0].*.gross
  - the move manager is roles.salesRepresentative.entity
"""
from __future__ import annotations

import logging
from typing import Any

from .fields import pick, pick_dict, to_num, to_str
from .models import InternalAddress, InternalBranding, InternalJob

logger = logging.getLogger(__name__)


def _address(raw: dict) -> InternalAddress:
    return InternalAddress(
        line1=to_str(pick(raw, "line1", "address1", "street")),
        line2=to_str(pick(raw, "line2", "address2")),
        city=to_str(pick(raw, "city", "suburb", "town")),
        state=to_str(pick(raw, "state", "stateCode")),
        postcode=to_str(pick(raw, "postcode", "postalCode", "zip")),
        country=to_str(pick(raw, "country", "countryName", "countryCode")),
    )


def _measures(job: dict) -> tuple:
    measures = job.get("measures")
    if not isinstance(measures, list) or not measures:
        # Jobs that have not been surveyed yet carry no measures
        return 0, 0
    first = measures[0]
    volume = pick_dict(pick(first, "volume"), "gross")
    weight = pick_dict(pick(first, "weight"), "gross")
    return to_num(pick(volume, "m3", "meter")), to_num(pick(weight, "kg"))


def _move_manager(job: dict) -> str:
    roles = pick_dict(job, "roles")
    rep = pick_dict(roles, "salesRepresentative", "consultant", "moveManager")
    entity = pick_dict(rep, "entity")
    if entity.get("firstName") or entity.get("lastName"):
        return f"{to_str(entity.get('firstName'))} {to_str(entity.get('lastName'))}".strip()
    fallback = pick(job, "moveManager", "consultant", "assignedTo")
    return fallback if isinstance(fallback, str) else ""


def adapt_mw_quotation(raw: Any, branding: InternalBranding) -> InternalJob:
    """Build an :class:`InternalJob`. Pure: identical input gives identical output."""
    job = raw if isinstance(raw, dict) else {}
    if isinstance(job.get("data"), dict):
        job = job["data"]

    addresses = pick_dict(job, "addresses")
    # Uplift/Delivery carry contact details, so they win over origin/destination
    origin = pick_dict(addresses, "Uplift", "uplift", "origin") or pick_dict(
        job, "uplift", "origin", "fromAddress", "pickupAddress"
    )
    dest = pick_dict(addresses, "Delivery", "delivery", "destination") or pick_dict(
        job, "delivery", "destination", "toAddress", "deliveryAddress"
    )
    volume_m3, weight_kg = _measures(job)

    adapted = InternalJob(
        id=int(to_num(pick(job, "id", "jobId", "jobNumber"))),
        title_name=to_str(pick(job, "titleName", "title")),
        first_name=to_str(pick(job, "firstName", "givenName")),
        last_name=to_str(pick(job, "lastName", "surname", "familyName")),
        move_manager=_move_manager(job),
        move_type=to_str(pick(job, "type", "moveType", "moveCategory")),
        estimated_delivery_details=to_str(
            pick(job, "estimatedDeliveryDetails", "estimatedDeliveryDate", "deliveryDate")
        ),
        job_value=to_num(pick(job, "jobValue", "totalValue", "value", "total")),
        brand_code=to_str(pick(job, "brandCode", "brand")),
        branch_code=to_str(pick(job, "branchCode", "branch")),
        uplift=_address(origin),
        delivery=_address(dest),
        measures_volume_gross_m3=volume_m3,
        measures_weight_gross_kg=weight_kg,
        branding=branding,
    )
    logger.debug("Adapted Moveware job %s (%s)", adapted.id, adapted.customer_name)
    return adapted
