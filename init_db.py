#init_db.py
"""Create the tenant tables and optionally seed one Moveware tenant.

Seeding reads MW_CO_ID, MW_COMPANY_NAME, MW_BRAND_CODE, MW_USERNAME and
MW_PASSWORD from the environment.
"""
import os

from sqlalchemy import inspect

from app import create_app
from app.models import BrandingSettings, Company, db


def init_db(app):
    with app.app_context():
        tables = inspect(db.engine).get_table_names()
        if "companies" not in tables or "branding_settings" not in tables:
            db.create_all()
            print("✅ Database schema initialized.")
        else:
            print("ℹ️ Tables already exist. Skipping creation.")


def seed_tenant(app, co_id, name, username, password, brand_code=""):
    with app.app_context():
        company = Company.query.filter_by(tenant_id=co_id).first()
        if company is None:
            company = Company(name=name, tenant_id=co_id, brand_code=brand_code or None)
            db.session.add(company)
            db.session.flush()
        settings = company.branding_settings or BrandingSettings(company_id=company.id)
        settings.mw_username = username
        settings.mw_password = password
        db.session.add(settings)
        db.session.commit()
        return company.id


if __name__ == "__main__":
    app = create_app()
    init_db(app)

    co_id = os.getenv("MW_CO_ID")
    username = os.getenv("MW_USERNAME")
    password = os.getenv("MW_PASSWORD")
    if co_id and username and password:
        seed_tenant(
            app,
            co_id,
            os.getenv("MW_COMPANY_NAME", f"Tenant {co_id}"),
            username,
            password,
            os.getenv("MW_BRAND_CODE", ""),
        )
        print(f"✅ Moveware credentials stored for coId {co_id}.")
    else:
        print("ℹ️ MW_CO_ID, MW_USERNAME or MW_PASSWORD not set. Skipping tenant seed.")
