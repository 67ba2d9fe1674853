# app/models.py
from datetime import datetime
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


class Company(db.Model):
    __tablename__ = "companies"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    # Moveware company id (coId); scopes every upstream call
    tenant_id = db.Column(db.String(64), unique=True, index=True, nullable=False)
    brand_code = db.Column(db.String(32))
    logo_url = db.Column(db.String(500))
    primary_color = db.Column(db.String(7), default="#2563eb")
    secondary_color = db.Column(db.String(7), default="#1e40af")
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    branding_settings = db.relationship(
        "BrandingSettings", back_populates="company", uselist=False
    )


class BrandingSettings(db.Model):
    __tablename__ = "branding_settings"
    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(db.Integer, db.ForeignKey("companies.id"), unique=True, nullable=False)
    logo_url = db.Column(db.String(500))
    hero_banner_url = db.Column(db.String(500))
    footer_image_url = db.Column(db.String(500))
    primary_color = db.Column(db.String(7))
    secondary_color = db.Column(db.String(7))
    font_family = db.Column(db.String(100))
    inventory_weight_unit = db.Column(db.String(8), default="kg")
    footer_bg_color = db.Column(db.String(7))
    footer_text_color = db.Column(db.String(7))
    footer_address_line1 = db.Column(db.String(255))
    footer_address_line2 = db.Column(db.String(255))
    footer_phone = db.Column(db.String(50))
    footer_email = db.Column(db.String(255))
    footer_abn = db.Column(db.String(50))
    # Moveware REST credentials; server side only
    mw_username = db.Column(db.String(255))
    mw_password = db.Column(db.String(500))
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    company = db.relationship("Company", back_populates="branding_settings")


class QuoteAcceptanceRecord(db.Model):
    __tablename__ = "quote_acceptances"
    id = db.Column(db.Integer, primary_key=True)
    quote_number = db.Column(db.String(64), unique=True, index=True, nullable=False)
    company_id = db.Column(db.Integer, db.ForeignKey("companies.id"))
    job_id = db.Column(db.String(64))
    quote_id = db.Column(db.String(64))
    customer_name = db.Column(db.String(255))
    status = db.Column(db.String(20), default="accepted")
    total_amount = db.Column(db.Float, default=0.0)
    terms_accepted = db.Column(db.Boolean, default=False)
    accepted_by = db.Column(db.String(255))
    signature_data = db.Column(db.Text)
    writeback_steps = db.Column(db.Text)  # JSON-serialized step outcomes
    accepted_at = db.Column(db.DateTime, default=datetime.utcnow)
    company = db.relationship("Company", backref="quote_acceptances")


class ReviewSubmission(db.Model):
    __tablename__ = "review_submissions"
    id = db.Column(db.Integer, primary_key=True)
    job_id = db.Column(db.String(64))
    token = db.Column(db.String(255), nullable=False)
    company_id = db.Column(db.String(64))
    answers = db.Column(db.Text)  # JSON-serialized string
    submitted_at = db.Column(db.DateTime, default=datetime.utcnow)
