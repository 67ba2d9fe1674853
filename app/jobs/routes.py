# app/jobs/routes.py
import logging

from flask import jsonify, request

from . import jobs_bp
from moveware.api import (
    fetch_mw_inventory,
    fetch_mw_options,
    fetch_mw_questions,
    fetch_mw_quotation,
    fetch_mw_quotation_options,
    fetch_mw_reviews,
)
from moveware.client import MovewareAPIError
from moveware.inventory import (
    adapt_mw_inventory,
    adapt_mw_quotation_measurements,
    inventory_truncation,
)
from moveware.mock_data import (
    MOCK_COSTINGS,
    MOCK_INVENTORY,
    MOCK_MEASUREMENTS,
    MOCK_QUESTIONS,
    MOCK_REVIEWS,
    get_mock_job,
)
from moveware.options import adapt_costings, adapt_mw_quotation_options
from moveware.quotation import adapt_mw_quotation
from services.moveware import (
    build_mw_client,
    get_mw_credentials,
    resolve_branding,
    tax_divisor_from_config,
)

logger = logging.getLogger(__name__)


def _serve(job_id, what, live, mock):
    """Answer from Moveware when the tenant is configured, else from mock data.

    ``live`` takes a client and returns the JSON payload; ``mock`` takes no
    arguments and returns the payload or ``None`` when no mock exists.
    """
    co_id = request.args.get("coId", "")
    credentials = get_mw_credentials(co_id)
    if credentials is None:
        logger.info("No Moveware credentials for coId %r, serving mock %s", co_id, what)
    else:
        try:
            data = live(build_mw_client(credentials))
            return jsonify({"success": True, "data": data, "source": "moveware"})
        except MovewareAPIError as exc:
            logger.error("Moveware %s fetch failed for job %s, using mock: %s", what, job_id, exc)

    data = mock()
    if data is None:
        return jsonify({"success": False, "error": f"Job {job_id} not found"}), 404
    return jsonify({"success": True, "data": data, "source": "mock"})


def _mock_list(table, job_id):
    rows = table.get(str(job_id))
    if rows is None:
        return None
    return [row.to_dict() if hasattr(row, "to_dict") else row for row in rows]


@jobs_bp.route("/<job_id>", methods=["GET"])
def get_job(job_id):
    branding = resolve_branding(request.args.get("coId", ""))

    def live(client):
        return adapt_mw_quotation(fetch_mw_quotation(client, job_id), branding).to_dict()

    def mock():
        job = get_mock_job(job_id, branding)
        return job.to_dict() if job else None

    return _serve(job_id, "job", live, mock)


@jobs_bp.route("/<job_id>/options", methods=["GET"])
def get_options(job_id):
    divisor = tax_divisor_from_config()

    def live(client):
        raw = fetch_mw_options(client, job_id)
        return [c.to_dict() for c in adapt_costings(raw, divisor)]

    return _serve(job_id, "options", live, lambda: _mock_list(MOCK_COSTINGS, job_id))


@jobs_bp.route("/<job_id>/quotations/<quote_id>", methods=["GET"])
def get_quotation_options(job_id, quote_id):
    divisor = tax_divisor_from_config()

    def live(client):
        raw = fetch_mw_quotation_options(client, job_id, quote_id)
        return {
            "costings": [c.to_dict() for c in adapt_mw_quotation_options(raw, divisor)],
            "measurements": adapt_mw_quotation_measurements(raw).to_dict(),
        }

    def mock():
        costings = _mock_list(MOCK_COSTINGS, job_id)
        if costings is None:
            return None
        measurements = MOCK_MEASUREMENTS.get(str(job_id))
        return {
            "costings": costings,
            "measurements": measurements.to_dict() if measurements else None,
        }

    return _serve(job_id, "quotation options", live, mock)


@jobs_bp.route("/<job_id>/inventory", methods=["GET"])
def get_inventory(job_id):
    def live(client):
        raw = fetch_mw_inventory(client, job_id)
        truncated = inventory_truncation(raw)
        return {
            "items": [item.to_dict() for item in adapt_mw_inventory(raw)],
            "truncated": truncated is not None,
            "totalItems": truncated[0] if truncated else None,
        }

    def mock():
        items = _mock_list(MOCK_INVENTORY, job_id)
        if items is None:
            return None
        return {"items": items, "truncated": False, "totalItems": None}

    return _serve(job_id, "inventory", live, mock)


@jobs_bp.route("/<job_id>/reviews", methods=["GET"])
def get_reviews(job_id):
    return _serve(
        job_id,
        "reviews",
        lambda client: fetch_mw_reviews(client, job_id),
        lambda: _mock_list(MOCK_REVIEWS, job_id),
    )


@jobs_bp.route("/<job_id>/questions", methods=["GET"])
def get_questions(job_id):
    return _serve(
        job_id,
        "questions",
        lambda client: fetch_mw_questions(client, job_id),
        lambda: _mock_list(MOCK_QUESTIONS, job_id),
    )
