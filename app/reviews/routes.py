# app/reviews/routes.py
import logging

from flask import jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from . import reviews_bp
from ..models import db
from moveware.api import post_mw_review
from moveware.client import MovewareAPIError
from services.moveware import build_mw_client, get_mw_credentials
from services.quote import record_review_submission

logger = logging.getLogger(__name__)


@reviews_bp.route("/submit", methods=["POST"])
def submit_review():
    data = request.get_json(silent=True) or {}
    job_id = data.get("jobId")
    token = data.get("token")
    co_id = data.get("companyId")
    answers = data.get("answers")

    if not token or not answers:
        return jsonify({"success": False, "error": "Missing required fields: token and answers"}), 400

    try:
        submission = record_review_submission(job_id, token, str(co_id) if co_id else "", answers)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Could not store review for job %s", job_id)
        return jsonify({"success": False, "error": "Failed to submit review"}), 500
    logger.info("Review %s stored for job %s", submission.id, job_id)

    body = {
        "success": True,
        "submissionId": submission.id,
        "message": "Review submitted successfully",
    }

    credentials = get_mw_credentials(str(co_id)) if job_id and co_id else None
    if credentials is not None:
        payload = {
            "reviewTypes": data.get("reviewTypes"),
            "answers": answers,
            "token": token,
            "submittedAt": submission.submitted_at.isoformat(),
        }
        try:
            post_mw_review(build_mw_client(credentials), str(job_id), payload)
        except MovewareAPIError as exc:
            # Local copy is already saved
            logger.warning("Review write-back failed for job %s: %s", job_id, exc)
            body["mwError"] = str(exc)
    return jsonify(body)
