"""Moveware REST integration: transport, payload adapters and quote acceptance."""
from .acceptance import (
    AcceptanceError,
    AcceptancePolicy,
    AcceptanceResult,
    QuoteAcceptance,
    accept_quotation,
)
from .api import (
    complete_mw_job_activity,
    create_mw_job_activity,
    fetch_mw_inventory,
    fetch_mw_options,
    fetch_mw_questions,
    fetch_mw_quotation,
    fetch_mw_quotation_options,
    fetch_mw_reviews,
    patch_mw_job_status,
    patch_mw_quote_acceptance,
    post_mw_job_activity,
    post_mw_review,
)
from .client import MovewareAPIError, MovewareClient
from .inventory import adapt_mw_inventory, adapt_mw_quotation_measurements
from .models import MwCredentials
from .options import adapt_costings, adapt_mw_options, adapt_mw_quotation_options
from .quotation import adapt_mw_quotation

__all__ = [
    "AcceptanceError",
    "AcceptancePolicy",
    "AcceptanceResult",
    "MovewareAPIError",
    "MovewareClient",
    "MwCredentials",
    "QuoteAcceptance",
    "accept_quotation",
    "adapt_costings",
    "adapt_mw_inventory",
    "adapt_mw_options",
    "adapt_mw_quotation",
    "adapt_mw_quotation_measurements",
    "adapt_mw_quotation_options",
    "complete_mw_job_activity",
    "create_mw_job_activity",
    "fetch_mw_inventory",
    "fetch_mw_options",
    "fetch_mw_questions",
    "fetch_mw_quotation",
    "fetch_mw_quotation_options",
    "fetch_mw_reviews",
    "patch_mw_job_status",
    "patch_mw_quote_acceptance",
    "post_mw_job_activity",
    "post_mw_review",
]
