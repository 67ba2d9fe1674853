"""Write a customer's quote acceptance back to Moveware.

Acceptance is four upstream calls with no transaction around them:

    1. mark_quotation_accepted  PATCH jobs/{job}/quotations/{quote}
    2. update_job_status        PATCH jobs/{job}                 status "W"
    3. post_activity            POST  jobs/{job}/activities      diary entry
    4. complete_activity        PATCH jobs/{job}/activities/{id} completed "Y"

Nothing is rolled back. What happens when a step fails is decided by an
:class:`AcceptancePolicy`: a ``fatal`` step raises :class:`AcceptanceError`
and stops the sequence, a ``best_effort`` step logs a warning and carries
on, a ``skip`` step is not sent at all.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from .api import (
    JOB_STATUS_WON,
    build_activity_payload,
    complete_mw_job_activity,
    create_mw_job_activity,
    patch_mw_job_status,
    patch_mw_quote_acceptance,
)
from .client import MovewareAPIError, MovewareClient, resolve_created_id
from .fields import pick, to_num, to_str

logger = logging.getLogger(__name__)

FATAL = "fatal"
BEST_EFFORT = "best_effort"
SKIP = "skip"
FAILURE_MODES = (FATAL, BEST_EFFORT, SKIP)

OK = "ok"
FAILED = "failed"
SKIPPED = "skipped"

_DMY = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")


@dataclass(frozen=True)
class AcceptancePolicy:
    """Failure handling per acceptance step."""

    mark_quotation_accepted: str = FATAL
    update_job_status: str = FATAL
    post_activity: str = FATAL
    complete_activity: str = BEST_EFFORT

    def __post_init__(self):
        for f in fields(self):
            mode = getattr(self, f.name)
            if mode not in FAILURE_MODES:
                raise ValueError(f"Unknown failure mode {mode!r} for step {f.name}")

    @property
    def steps(self) -> List[str]:
        return [f.name for f in fields(self)]

    def mode(self, step: str) -> str:
        return getattr(self, step)

    def with_mode(self, step: str, mode: str) -> "AcceptancePolicy":
        if step not in self.steps:
            raise ValueError(f"Unknown acceptance step {step!r}")
        return replace(self, **{step: mode})


DEFAULT_POLICY = AcceptancePolicy()


class AcceptanceError(RuntimeError):
    def __init__(self, step: str, cause: Exception):
        self.step = step
        self.cause = cause
        super().__init__(f"Acceptance step '{step}' failed: {cause}")


@dataclass
class QuoteAcceptance:
    """What the customer submitted when accepting."""

    job_id: str
    quote_id: str = ""
    branch_code: str = ""
    accepted_at: datetime = field(default_factory=datetime.now)
    signature_name: str = ""
    agreed_to_terms: bool = False
    load_date: str = ""
    insured_value: str = ""
    purchase_order_number: str = ""
    special_requirements: str = ""
    selected_costing: Optional[Dict[str, Any]] = None
    all_costings: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def quotation_date(self) -> str:
        return self.accepted_at.strftime("%Y-%m-%d")

    @property
    def estimated_move_date(self) -> Optional[str]:
        if not self.load_date:
            return None
        return to_iso_date(self.load_date, self.accepted_at)


@dataclass
class AcceptanceResult:
    job_id: str
    quote_id: str = ""
    activity_id: str = ""
    steps: Dict[str, str] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "jobId": self.job_id,
            "quoteId": self.quote_id,
            "activityId": self.activity_id,
            "steps": dict(self.steps),
            "warnings": list(self.warnings),
        }


def _iso(dt: datetime) -> str:
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def to_iso_date(value: str, now: Optional[datetime] = None) -> str:
    """Parse ``DD/MM/YYYY`` or an ISO string; unparseable input gives ``now``."""
    now = now or datetime.now()
    value = (value or "").strip()
    match = _DMY.match(value)
    try:
        if match:
            day, month, year = (int(g) for g in match.groups())
            return _iso(datetime(year, month, day))
        if value:
            return _iso(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        pass
    return _iso(now)


def format_price(price: float) -> str:
    """1050 -> "1050", 1050.5 -> "1050.50"."""
    return str(int(round(price))) if float(price).is_integer() else f"{price:.2f}"


def _option_lines(costing: Dict[str, Any], position: int) -> List[str]:
    name = to_str(pick(costing, "name")) or "Unknown option"
    lines = [f"Option {position + 1:02d} - {name}"]
    charges = costing.get("charges") if isinstance(costing, dict) else None
    for charge in charges if isinstance(charges, list) else []:
        lines.append(
            f"• {to_str(pick(charge, 'heading'))}: "
            f"{format_price(to_num(pick(charge, 'price')))} {to_str(pick(charge, 'currency'))}"
        )
    return lines


def build_acceptance_notes(acceptance: QuoteAcceptance) -> str:
    """Diary notes summarising the acceptance and the options on offer."""
    lines = [
        f"Accepted Terms and Conditions: {'yes' if acceptance.agreed_to_terms else 'no'}",
        "Signed Online: Yes",
    ]
    if acceptance.purchase_order_number:
        lines.append(f"Order Number: {acceptance.purchase_order_number}")
    if acceptance.load_date:
        lines.append(f"Load Date: {acceptance.load_date}")
    if acceptance.insured_value:
        lines.append(f"Insurance Value: {acceptance.insured_value}")
    if acceptance.special_requirements:
        lines.append(f"Special Requirements: {acceptance.special_requirements}")

    ids = [to_str(pick(c, "id")) for c in acceptance.all_costings]
    selected = acceptance.selected_costing
    selected_id = to_str(pick(selected, "id")) if selected else None

    if selected:
        position = ids.index(selected_id) if selected_id in ids else 0
        lines += ["", "Accepted Option(s):"]
        lines += _option_lines(selected, position)

    declined = [
        (i, c) for i, c in enumerate(acceptance.all_costings) if to_str(pick(c, "id")) != selected_id
    ]
    if declined:
        lines += ["", "Declined Option(s):"]
        for position, costing in declined:
            lines += _option_lines(costing, position)

    return "\n".join(lines)


def _run_step(
    result: AcceptanceResult,
    policy: AcceptancePolicy,
    step: str,
    call: Callable[[], Any],
) -> Any:
    mode = policy.mode(step)
    if mode == SKIP:
        logger.info("Acceptance step %s disabled for job %s", step, result.job_id)
        result.steps[step] = SKIPPED
        return None
    try:
        outcome = call()
    except MovewareAPIError as exc:
        result.steps[step] = FAILED
        if mode == FATAL:
            logger.error("Acceptance step %s failed for job %s: %s", step, result.job_id, exc)
            raise AcceptanceError(step, exc) from exc
        logger.warning("Acceptance step %s failed for job %s (ignored): %s", step, result.job_id, exc)
        result.warnings.append(f"{step}: {exc}")
        return None
    result.steps[step] = OK
    return outcome


def _skip(result: AcceptanceResult, step: str, reason: str) -> None:
    logger.warning("Skipping acceptance step %s for job %s: %s", step, result.job_id, reason)
    result.steps[step] = SKIPPED
    result.warnings.append(f"{step}: {reason}")


def accept_quotation(
    client: MovewareClient,
    acceptance: QuoteAcceptance,
    policy: AcceptancePolicy = DEFAULT_POLICY,
) -> AcceptanceResult:
    job_id = acceptance.job_id
    result = AcceptanceResult(job_id=job_id, quote_id=acceptance.quote_id)

    if acceptance.quote_id:
        _run_step(
            result,
            policy,
            "mark_quotation_accepted",
            lambda: patch_mw_quote_acceptance(
                client, job_id, acceptance.quote_id, acceptance.quotation_date
            ),
        )
    else:
        _skip(result, "mark_quotation_accepted", "no quote id supplied")

    _run_step(
        result,
        policy,
        "update_job_status",
        lambda: patch_mw_job_status(client, job_id, JOB_STATUS_WON, acceptance.estimated_move_date),
    )

    payload = build_activity_payload(
        job_id,
        acceptance.branch_code,
        acceptance.accepted_at,
        build_acceptance_notes(acceptance),
    )
    created = _run_step(
        result, policy, "post_activity", lambda: create_mw_job_activity(client, job_id, payload)
    )

    # Moveware ignores completed on POST, so the diary entry is ticked afterwards.
    # Not post_mw_job_activity: that helper fixes completion to best-effort.
    activity_id = resolve_created_id(created) if created is not None else ""
    result.activity_id = activity_id
    if result.steps.get("post_activity") != OK:
        _skip(result, "complete_activity", "activity was not created")
    elif not activity_id:
        _skip(result, "complete_activity", "could not determine activity id from POST response")
    else:
        _run_step(
            result,
            policy,
            "complete_activity",
            lambda: complete_mw_job_activity(client, job_id, activity_id),
        )

    logger.info("Quote acceptance for job %s written back: %s", job_id, result.steps)
    return result
