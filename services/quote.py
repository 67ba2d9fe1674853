import json
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from app.models import Company, QuoteAcceptanceRecord, ReviewSubmission, db
from moveware.acceptance import AcceptanceResult, QuoteAcceptance
from moveware.fields import pick, to_num

logger = logging.getLogger(__name__)


def _quote_number(acceptance: QuoteAcceptance) -> str:
    if acceptance.quote_id:
        return f"{acceptance.job_id}-{acceptance.quote_id}"
    return str(acceptance.job_id)


def record_acceptance(
    co_id: str,
    acceptance: QuoteAcceptance,
    result: Optional[AcceptanceResult] = None,
    customer_name: str = "",
    signature_data: str = "",
    quote_number: str = "",
):
    """Keep a local copy of an accepted quote.

    Best-effort: database errors are logged and ``None`` is returned so the
    customer still gets their confirmation.
    """
    selected = acceptance.selected_costing or {}
    try:
        company = Company.query.filter_by(tenant_id=co_id).first() if co_id else None
        quote_number = quote_number or _quote_number(acceptance)
        record = QuoteAcceptanceRecord.query.filter_by(quote_number=quote_number).first()
        if record is None:
            record = QuoteAcceptanceRecord(quote_number=quote_number)
            db.session.add(record)
        record.company_id = company.id if company else None
        record.job_id = str(acceptance.job_id)
        record.quote_id = acceptance.quote_id or None
        record.customer_name = customer_name or None
        record.status = "accepted"
        record.total_amount = to_num(pick(selected, "totalPrice", "rate"))
        record.terms_accepted = bool(acceptance.agreed_to_terms)
        record.accepted_by = acceptance.signature_name
        record.signature_data = signature_data or None
        record.writeback_steps = json.dumps(result.steps) if result else None
        record.accepted_at = acceptance.accepted_at
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Could not store acceptance for job %s", acceptance.job_id)
        return None
    return record


def record_review_submission(job_id: str, token: str, co_id: str, answers) -> ReviewSubmission:
    submission = ReviewSubmission(
        job_id=str(job_id) if job_id else None,
        token=token,
        company_id=co_id or None,
        answers=json.dumps(answers),
    )
    db.session.add(submission)
    db.session.commit()
    return submission
