"""Tenant lookups that sit between the Flask routes and the Moveware client."""
import logging
from typing import Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from app.models import Company
from moveware.acceptance import DEFAULT_POLICY, AcceptancePolicy
from moveware.client import MovewareClient
from moveware.models import InternalBranding, MwCredentials

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://rest.moveware-test.app"


def get_mw_credentials(co_id: str) -> Optional[MwCredentials]:
    """Return the stored Moveware login for ``co_id``.

    ``None`` means the tenant has no live integration and callers should use
    mock data instead.
    """
    co_id = (co_id or "").strip()
    if not co_id:
        return None
    try:
        company = Company.query.filter_by(tenant_id=co_id).first()
        settings = company.branding_settings if company else None
    except SQLAlchemyError:
        logger.exception("Credential lookup failed for coId %s", co_id)
        return None
    if settings is None:
        return None
    username = (settings.mw_username or "").strip()
    password = settings.mw_password or ""
    if not username or not password:
        return None
    base_url = current_app.config.get("MOVEWARE_API_BASE_URL") or DEFAULT_BASE_URL
    return MwCredentials(
        co_id=co_id,
        username=username,
        password=password,
        base_url=base_url.rstrip("/"),
    )


def _company_for(co_id: str, brand_code: str) -> Optional[Company]:
    if co_id:
        company = Company.query.filter_by(tenant_id=co_id).first()
        if company:
            return company
    if brand_code:
        company = Company.query.filter_by(brand_code=brand_code, is_active=True).first()
        if company:
            return company
    return Company.query.filter_by(is_active=True).order_by(Company.id).first()


def resolve_branding(co_id: str = "", brand_code: str = "") -> InternalBranding:
    """Branding snapshot for a job page; falls back to the Moveware defaults."""
    defaults = InternalBranding()
    try:
        company = _company_for((co_id or "").strip(), (brand_code or "").strip())
        settings = company.branding_settings if company else None
    except SQLAlchemyError:
        logger.exception("Branding lookup failed for coId %s", co_id)
        return defaults
    if company is None:
        return defaults

    def setting(name, fallback):
        value = getattr(settings, name, None) if settings else None
        return value or fallback

    return InternalBranding(
        company_name=company.name or defaults.company_name,
        logo_url=setting("logo_url", company.logo_url or ""),
        hero_banner_url=setting("hero_banner_url", ""),
        footer_image_url=setting("footer_image_url", ""),
        primary_color=setting("primary_color", company.primary_color or defaults.primary_color),
        secondary_color=setting(
            "secondary_color", company.secondary_color or defaults.secondary_color
        ),
        font_family=setting("font_family", defaults.font_family),
        inventory_weight_unit=setting("inventory_weight_unit", defaults.inventory_weight_unit),
        footer_bg_color=setting("footer_bg_color", defaults.footer_bg_color),
        footer_text_color=setting("footer_text_color", defaults.footer_text_color),
        footer_address_line1=setting("footer_address_line1", ""),
        footer_address_line2=setting("footer_address_line2", ""),
        footer_phone=setting("footer_phone", ""),
        footer_email=setting("footer_email", ""),
        footer_abn=setting("footer_abn", ""),
    )


def build_mw_client(credentials: MwCredentials) -> MovewareClient:
    return MovewareClient.from_config(credentials, current_app.config)


def acceptance_policy_from_config() -> AcceptancePolicy:
    mode = current_app.config.get("MOVEWARE_JOB_STATUS_STEP") or DEFAULT_POLICY.update_job_status
    return DEFAULT_POLICY.with_mode("update_job_status", mode)


def tax_divisor_from_config() -> float:
    return float(current_app.config.get("MOVEWARE_NET_TAX_DIVISOR", 1.1))
