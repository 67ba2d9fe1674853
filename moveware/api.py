"""Moveware REST endpoints used by the quote application.

Each helper takes an explicit :class:`MovewareClient`, so the caller decides
which tenant's credentials are in play. Paths are relative to
``{base}/{coId}/api/``.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from .client import MovewareClient
from .inventory import inventory_truncation

logger = logging.getLogger(__name__)

ACTIVITY_LABEL = "Online Customer Quote Accepted"
JOB_STATUS_WON = "W"


# ---- Reads ------------------------------------------------------------------

def fetch_mw_quotation(client: MovewareClient, job_id: str) -> Any:
    return client.get(f"jobs/{job_id}")


def fetch_mw_options(client: MovewareClient, job_id: str) -> Any:
    return client.get(f"jobs/{job_id}/options?include=charges")


def fetch_mw_quotation_options(client: MovewareClient, job_id: str, quote_id: str) -> Any:
    return client.get(f"jobs/{job_id}/quotations/{quote_id}?include=options")


def fetch_mw_reviews(client: MovewareClient, job_id: str) -> Any:
    return client.get(f"jobs/{job_id}/reviews")


def fetch_mw_questions(client: MovewareClient, job_id: str) -> Any:
    """Survey questions with control types, conditional logic and responses."""
    return client.get(f"jobs/{job_id}/questions")


def fetch_mw_inventory(client: MovewareClient, job_id: str) -> Any:
    """Fetch the first page of a job's inventory.

    No page size is requested, so the server default applies. A warning is
    logged when the response metadata reports more rows than were returned.
    """
    raw = client.get(f"jobs/{job_id}/inventory")
    truncated = inventory_truncation(raw)
    if truncated:
        reported, returned = truncated
        logger.warning(
            "Inventory for job %s truncated: API reports %s items but returned %s. "
            "Only the first page is fetched.",
            job_id,
            reported,
            returned,
        )
    return raw


# ---- Writes -----------------------------------------------------------------

def post_mw_review(client: MovewareClient, job_id: str, body: Any) -> Any:
    return client.post(f"jobs/{job_id}/reviews", body)


def patch_mw_quote_acceptance(
    client: MovewareClient, job_id: str, quote_id: str, quotation_date: str
) -> Any:
    """Mark the quotation Accepted.

    Selected options/charges are not sent; the endpoint does not accept them.
    """
    body = {"quotationDate": quotation_date, "status": "Accepted"}
    return client.patch(f"jobs/{job_id}/quotations/{quote_id}", body)


def patch_mw_job_status(
    client: MovewareClient,
    job_id: str,
    status: str = JOB_STATUS_WON,
    estimated_move_date: Optional[str] = None,
) -> Any:
    body: dict = {"status": status}
    if estimated_move_date:
        body["estimatedMove"] = {"date": estimated_move_date}
    return client.patch(f"jobs/{job_id}", body)


def build_activity_payload(
    job_id: str, branch_code: str, accepted_at: datetime, summary: str
) -> dict:
    date_str = accepted_at.strftime("%Y-%m-%d")
    start_str = accepted_at.strftime("%H:%M")
    # Diary notes only render correctly with LF line endings
    notes = (summary or "").replace("\r\n", "\n").replace("\r", "\n")
    try:
        parent_id = int(job_id)
    except (TypeError, ValueError):
        parent_id = 0
    return {
        "activityDate": date_str,
        "activityHours": start_str,
        "activityTime": str(accepted_at.hour),
        "appointment": False,
        "branch": branch_code or "",
        "comment": ACTIVITY_LABEL,
        # Ignored by the API at creation; see complete_mw_job_activity
        "completed": "Y",
        "date": date_str,
        "dateModified": date_str,
        "dateTime": f"{date_str}T{start_str}:00.000",
        "description": ACTIVITY_LABEL,
        "diaries": "",
        "keyaction": ACTIVITY_LABEL,
        "notes": notes,
        "parentId": parent_id,
        "parentNumber": str(job_id),
        "parentType": "Job",
        "type": ACTIVITY_LABEL,
    }


def create_mw_job_activity(client: MovewareClient, job_id: str, payload: dict) -> Any:
    return client.post(f"jobs/{job_id}/activities", payload)


def complete_mw_job_activity(client: MovewareClient, job_id: str, activity_id: str) -> Any:
    return client.patch(f"jobs/{job_id}/activities/{activity_id}", {"completed": "Y"})


def post_mw_job_activity(
    client: MovewareClient,
    job_id: str,
    branch_code: str,
    accepted_at: datetime,
    summary: str,
) -> Any:
    """Create the acceptance diary entry and tick it completed.

    Standalone helper for callers that post a diary entry outside a quote
    acceptance. The completion PATCH is always best-effort; its failure is
    only logged. :func:`moveware.acceptance.accept_quotation` issues the two
    calls itself so its :class:`AcceptancePolicy` can decide per step.
    """
    payload = build_activity_payload(job_id, branch_code, accepted_at, summary)
    created, _ = client.post_then_patch(f"jobs/{job_id}/activities", payload, {"completed": "Y"})
    return created
