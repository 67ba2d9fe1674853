# app/quotes/routes.py
import logging
from datetime import datetime

from flask import jsonify, request

from . import quotes_bp
from moveware.acceptance import AcceptanceError, QuoteAcceptance, accept_quotation
from services.moveware import acceptance_policy_from_config, build_mw_client, get_mw_credentials
from services.quote import record_acceptance

logger = logging.getLogger(__name__)


def _text(data, *keys):
    for key in keys:
        value = data.get(key)
        if value:
            return str(value).strip()
    return ""


@quotes_bp.route("/accept", methods=["POST"])
def accept_quote():
    data = request.get_json(silent=True) or {}

    job_id = _text(data, "jobId")
    quote_number = _text(data, "quoteNumber", "jobId")
    co_id = _text(data, "coId")
    signature_data = _text(data, "signatureData")
    signature_name = _text(data, "signatureName", "customerName") or "Accepted"

    missing = []
    if not quote_number:
        missing.append("quoteNumber / jobId")
    if not signature_data:
        missing.append("signatureData")
    if missing:
        logger.warning("Quote acceptance rejected, missing %s", ", ".join(missing))
        return jsonify({"success": False, "error": f"Missing required fields: {', '.join(missing)}"}), 400
    if not data.get("agreedToTerms"):
        return jsonify({"success": False, "error": "You must agree to the terms and conditions"}), 400

    selected = data.get("selectedCosting")
    all_costings = data.get("allCostings")
    acceptance = QuoteAcceptance(
        job_id=job_id or quote_number,
        quote_id=_text(data, "quoteId"),
        branch_code=_text(data, "branchCode"),
        accepted_at=datetime.now(),
        signature_name=signature_name,
        agreed_to_terms=True,
        load_date=_text(data, "reloFromDate", "loadDate"),
        insured_value=_text(data, "insuredValue"),
        purchase_order_number=_text(data, "purchaseOrderNumber"),
        special_requirements=_text(data, "specialRequirements"),
        selected_costing=selected if isinstance(selected, dict) else None,
        all_costings=[c for c in all_costings if isinstance(c, dict)]
        if isinstance(all_costings, list)
        else [],
    )

    result = None
    credentials = get_mw_credentials(co_id) if job_id else None
    if credentials is None:
        logger.warning(
            "No Moveware write-back for job %s (coId %r): tenant not configured", job_id, co_id
        )
    else:
        try:
            result = accept_quotation(
                build_mw_client(credentials), acceptance, acceptance_policy_from_config()
            )
        except AcceptanceError as exc:
            logger.error("Quote acceptance for job %s failed at %s: %s", job_id, exc.step, exc.cause)
            return (
                jsonify(
                    {
                        "success": False,
                        "error": "Failed to accept quote",
                        "details": str(exc),
                        "step": exc.step,
                    }
                ),
                502,
            )

    record = record_acceptance(
        co_id,
        acceptance,
        result,
        customer_name=signature_name,
        signature_data=signature_data,
        quote_number=quote_number,
    )
    if record is not None:
        local_id = record.id
    else:
        local_id = f"mw-{acceptance.job_id}-{int(acceptance.accepted_at.timestamp())}"

    body = {
        "success": True,
        "data": {"id": local_id},
        "message": "Quote accepted successfully",
        "source": "moveware" if result is not None else "mock",
    }
    if result is not None:
        body["writeback"] = result.to_dict()
    return jsonify(body)
