# File: mock_data.py
"""Static records served when a tenant has no live Moveware integration.

Only the sample job 111505 is available. Values are stored in the same
shape the adapters produce so callers can treat both sources alike.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Optional

from .models import (
    InternalAddress,
    InternalBranding,
    InternalCosting,
    InternalInventoryItem,
    InternalJob,
    InternalMeasurements,
)

SAMPLE_JOB_ID = "111505"

MOCK_JOBS: Dict[str, InternalJob] = {
    SAMPLE_JOB_ID: InternalJob(
        id=111505,
        title_name="Mr",
        first_name="Leigh",
        last_name="Morrow",
        move_manager="Sarah Johnson",
        move_type="LR",
        estimated_delivery_details="27/02/2026",
        job_value=2675.0,
        brand_code="MWB",
        branch_code="MEL",
        uplift=InternalAddress(
            line1="3 Spring Water Crescent",
            city="Cranbourne",
            state="VIC",
            postcode="3977",
            country="Australia",
        ),
        delivery=InternalAddress(
            line1="12 Cato Street",
            city="Hawthorn East",
            state="VIC",
            postcode="3123",
            country="Australia",
        ),
        measures_volume_gross_m3=0.622965,
        measures_weight_gross_kg=70,
    ),
}

_INVENTORY_ROWS = [
    (22301, "Bed, King", "Master Bedroom", 1, 2.14, "FUR"),
    (22302, "Bed, Single", "Bedroom 2", 1, 0.71, "FUR"),
    (22303, "Bedside Table", "Master Bedroom", 2, 0.14, "FUR"),
    (22304, "Bench", "Outdoor", 1, 0.85, "FUR"),
    (22305, "Bookcase, Large", "Study", 1, 1.14, "FUR"),
    (22306, "Cabinet", "Living Room", 1, 1.0, "FUR"),
    (22307, "Carton Bike", "Garage", 1, 0.3, "CTN"),
    (22308, "Chair, Dining", "Dining Room", 4, 0.14, "FUR"),
    (22309, "Chair, Kitchen", "Kitchen", 2, 0.14, "FUR"),
    (22310, "Chest of Drawers", "Master Bedroom", 1, 0.71, "FUR"),
    (22311, "Childs Bike", "Garage", 1, 0.2, "MISC"),
    (22312, "Childs Furniture", "Bedroom 2", 1, 0.15, "FUR"),
    (22313, "Clothes Horse", "Laundry", 1, 0.12, "MISC"),
    (22314, "Cubby House Kids", "Outdoor", 1, 1.0, "MISC"),
    (22315, "Desk Large", "Study", 1, 1.0, "FUR"),
    (22316, "Dryer", "Laundry", 1, 0.26, "APPL"),
    (22317, "Dresser", "Master Bedroom", 1, 0.85, "FUR"),
    (22318, "Dressing Table", "Master Bedroom", 1, 0.7, "FUR"),
    (22319, "Fishing Rods", "Garage", 3, 0.02, "MISC"),
    (22320, "Filing Cabinet 2", "Study", 1, 0.28, "FUR"),
]

MOCK_INVENTORY: Dict[str, List[InternalInventoryItem]] = {
    SAMPLE_JOB_ID: [
        InternalInventoryItem(
            id=row_id, description=desc, room=room, quantity=qty, cube=cube, type_code=code
        )
        for row_id, desc, room, qty, cube, code in _INVENTORY_ROWS
    ],
}

MOCK_COSTINGS: Dict[str, List[InternalCosting]] = {
    SAMPLE_JOB_ID: [
        InternalCosting(
            id="MOVE001",
            name="Standard Domestic Move",
            description=(
                "Full-service domestic move from Cranbourne to Hawthorn East. Includes "
                "professional packing, loading, transport, unloading, and placement at "
                "your new home."
            ),
            quantity=1,
            rate=2675.0,
            net_total="2431.82",
            total_price=2675.0,
            tax_included=True,
            inclusions=[
                "Professional packing materials",
                "Furniture disassembly and reassembly",
                "Loading and unloading",
                "Transport via modern removal truck",
                "Basic transit insurance",
            ],
            exclusions=[
                "Packing of personal items (clothing, books, etc.)",
                "Piano moving (separate quote required)",
                "Storage fees",
                "Additional insurance beyond basic coverage",
            ],
        ),
    ],
}

MOCK_MEASUREMENTS: Dict[str, InternalMeasurements] = {
    SAMPLE_JOB_ID: InternalMeasurements(
        volume_gross_m3=0.622965, weight_gross_kg=70, weight_gross_pounds=154
    ),
}

MOCK_QUESTIONS: Dict[str, list] = {
    SAMPLE_JOB_ID: [
        {
            "id": 1,
            "question": "How would you rate your overall experience?",
            "controlType": "rating",
            "required": True,
        },
        {
            "id": 2,
            "question": "Would you recommend us to a friend?",
            "controlType": "yesno",
            "required": False,
        },
        {
            "id": 3,
            "question": "Any other comments?",
            "controlType": "textarea",
            "required": False,
        },
    ],
}

MOCK_REVIEWS: Dict[str, list] = {
    SAMPLE_JOB_ID: [],
}


def get_mock_job(job_id: str, branding: Optional[InternalBranding] = None) -> Optional[InternalJob]:
    job = MOCK_JOBS.get(str(job_id))
    if job is None:
        return None
    if branding is None:
        return job
    return replace(job, branding=branding)
