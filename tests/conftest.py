import json
import os
import sys

import pytest

# Ensure project root is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# Use an in-memory SQLite database for tests
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from config import Config  # noqa: E402
from moveware.client import MovewareClient  # noqa: E402
from moveware.models import MwCredentials  # noqa: E402


class AppTestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    MOVEWARE_API_BASE_URL = "https://rest.example.test"


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """Stands in for ``requests.Session``; replays queued responses in order.

    A queued exception is raised instead of returned.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, headers=None, json=None, timeout=None):
        self.calls.append(
            {"method": method, "url": url, "headers": headers, "json": json, "timeout": timeout}
        )
        if not self.responses:
            raise AssertionError(f"Unexpected {method} {url}")
        outcome = self.responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def credentials():
    return MwCredentials(
        co_id="12345",
        username="api-user",
        password="s3cret",
        base_url="https://rest.example.test",
    )


@pytest.fixture
def make_client(credentials):
    def _make(*responses):
        session = FakeSession(*responses)
        return MovewareClient(credentials, session=session), session

    return _make


@pytest.fixture
def app():
    from app import create_app
    from app.models import db

    app = create_app(AppTestingConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def seed_company(app):
    from app.models import BrandingSettings, Company, db

    def _seed(tenant_id="12345", name="Acme Removals", username="api-user", password="s3cret", **branding):
        with app.app_context():
            company = Company(name=name, tenant_id=tenant_id, brand_code=branding.pop("brand_code", None))
            db.session.add(company)
            db.session.flush()
            db.session.add(
                BrandingSettings(
                    company_id=company.id,
                    mw_username=username,
                    mw_password=password,
                    **branding,
                )
            )
            db.session.commit()
            return company.id

    return _seed
