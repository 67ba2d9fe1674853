import json
import logging

import pytest

from app.models import QuoteAcceptanceRecord, ReviewSubmission
from moveware.client import MovewareClient
from conftest import FakeResponse, FakeSession

JOB = {
    "id": 111505,
    "firstName": "Live",
    "lastName": "Customer",
    "addresses": {"Uplift": {"city": "Carlton"}},
}


@pytest.fixture
def fake_upstream(monkeypatch):
    """Route every Moveware client built by the app through one FakeSession."""
    session = FakeSession()

    def build(credentials):
        return MovewareClient(credentials, session=session)

    monkeypatch.setattr("app.jobs.routes.build_mw_client", build)
    monkeypatch.setattr("app.quotes.routes.build_mw_client", build)
    monkeypatch.setattr("app.reviews.routes.build_mw_client", build)
    return session


def accept_body(**overrides):
    body = {
        "jobId": "111505",
        "quoteId": "900",
        "coId": "12345",
        "signatureData": "data:image/png;base64,AAAA",
        "signatureName": "Leigh Morrow",
        "agreedToTerms": True,
        "branchCode": "MEL",
        "selectedCosting": {"id": "MOVE001", "name": "Standard Domestic Move", "totalPrice": 2675,
                            "charges": [{"heading": "Removal", "price": 2675, "currency": "AUD"}]},
        "allCostings": [{"id": "MOVE001", "name": "Standard Domestic Move"}],
    }
    body.update(overrides)
    return body


def test_job_without_credentials_serves_mock(client):
    resp = client.get("/api/jobs/111505")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["success"] is True
    assert data["source"] == "mock"
    assert data["data"]["firstName"] == "Leigh"
    assert data["data"]["upliftCity"] == "Cranbourne"
    assert data["data"]["branding"]["companyName"] == "Moveware"


def test_unknown_job_without_live_data_is_404(client):
    resp = client.get("/api/jobs/424242?coId=12345")
    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_job_from_moveware(client, seed_company, fake_upstream):
    seed_company(name="Acme Removals")
    fake_upstream.responses.append(FakeResponse(200, JOB))

    resp = client.get("/api/jobs/111505?coId=12345")
    data = resp.get_json()
    assert data["source"] == "moveware"
    assert data["data"]["firstName"] == "Live"
    assert data["data"]["upliftCity"] == "Carlton"
    assert data["data"]["branding"]["companyName"] == "Acme Removals"
    assert fake_upstream.calls[0]["url"] == "https://rest.example.test/12345/api/jobs/111505"


def test_upstream_failure_falls_back_to_mock(client, seed_company, fake_upstream, caplog):
    seed_company()
    fake_upstream.responses.append(FakeResponse(502, text="bad gateway"))
    with caplog.at_level(logging.ERROR):
        resp = client.get("/api/jobs/111505?coId=12345")
    data = resp.get_json()
    assert resp.status_code == 200
    assert data["source"] == "mock"
    assert data["data"]["firstName"] == "Leigh"
    assert "using mock" in caplog.text


def test_options_route_adapts_either_shape(client, seed_company, fake_upstream):
    seed_company()
    fake_upstream.responses.append(
        FakeResponse(200, {"options": [{"id": 1, "description": "Std", "valueInclusive": 110,
                                        "charges": {"I": {"description": "Move", "type": "I"}}}]})
    )
    data = client.get("/api/jobs/111505/options?coId=12345").get_json()
    assert data["source"] == "moveware"
    assert data["data"][0]["totalPrice"] == 110
    assert data["data"][0]["netTotal"] == "100.00"
    assert data["data"][0]["rawData"]["inclusions"] == ["Move"]
    assert fake_upstream.calls[0]["url"].endswith("/jobs/111505/options?include=charges")


def test_mock_options(client):
    data = client.get("/api/jobs/111505/options").get_json()
    assert data["source"] == "mock"
    assert data["data"][0]["id"] == "MOVE001"
    assert data["data"][0]["netTotal"] == "2431.82"


def test_quotation_route_returns_costings_and_measurements(client, seed_company, fake_upstream):
    seed_company()
    fake_upstream.responses.append(
        FakeResponse(
            200,
            {
                "id": 900,
                "options": [{"id": 7, "description": "Premium", "valueInclusive": 0,
                             "charges": [{"rateInclusive": 500, "included": True}]}],
                "measurements": {"volume": {"gross": {"meters": 12.5}},
                                 "weight": {"gross": {"kilograms": 900, "pounds": 1984}}},
            },
        )
    )
    data = client.get("/api/jobs/111505/quotations/900?coId=12345").get_json()
    assert data["source"] == "moveware"
    assert data["data"]["costings"][0]["totalPrice"] == 500
    assert data["data"]["measurements"]["volumeGrossM3"] == 12.5
    assert fake_upstream.calls[0]["url"].endswith("/jobs/111505/quotations/900?include=options")


def test_mock_quotation(client):
    data = client.get("/api/jobs/111505/quotations/1").get_json()
    assert data["source"] == "mock"
    assert data["data"]["measurements"]["weightGrossPounds"] == 154


def test_inventory_route_flags_truncation(client, seed_company, fake_upstream):
    seed_company()
    fake_upstream.responses.append(
        FakeResponse(200, {"inventoryUsage": [{"id": 1, "description": "Bed", "quantity": 2,
                                               "volume": {"meter": 1.0}}],
                           "meta": {"totalItems": 30}})
    )
    data = client.get("/api/jobs/111505/inventory?coId=12345").get_json()
    assert data["data"]["truncated"] is True
    assert data["data"]["totalItems"] == 30
    assert data["data"]["items"][0]["cube"] == 2.0


def test_mock_inventory_questions_and_reviews(client):
    inventory = client.get("/api/jobs/111505/inventory").get_json()
    assert len(inventory["data"]["items"]) == 20
    assert inventory["data"]["truncated"] is False

    questions = client.get("/api/jobs/111505/questions").get_json()
    assert questions["source"] == "mock"
    assert len(questions["data"]) == 3

    reviews = client.get("/api/jobs/111505/reviews").get_json()
    assert reviews["data"] == []
    assert client.get("/api/jobs/1/reviews").status_code == 404


def test_live_reviews_are_passed_through(client, seed_company, fake_upstream):
    seed_company()
    fake_upstream.responses.append(FakeResponse(200, {"data": [{"id": 1, "rating": 5}]}))
    data = client.get("/api/jobs/111505/reviews?coId=12345").get_json()
    assert data["data"] == {"data": [{"id": 1, "rating": 5}]}


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"signatureData": ""}, "signatureData"),
        ({"jobId": "", "quoteNumber": ""}, "quoteNumber / jobId"),
        ({"agreedToTerms": False}, "terms and conditions"),
    ],
)
def test_accept_validation(client, overrides, message):
    resp = client.post("/api/quotes/accept", json=accept_body(**overrides))
    assert resp.status_code == 400
    assert message in resp.get_json()["error"]


def test_accept_without_credentials_records_locally(app, client):
    resp = client.post("/api/quotes/accept", json=accept_body(coId=""))
    data = resp.get_json()
    assert resp.status_code == 200
    assert data["success"] is True
    assert data["source"] == "mock"
    with app.app_context():
        record = QuoteAcceptanceRecord.query.one()
        assert record.quote_number == "111505"
        assert record.company_id is None
        assert record.total_amount == 2675
        assert record.accepted_by == "Leigh Morrow"
        assert data["data"]["id"] == record.id


def test_accept_writes_back_to_moveware(app, client, seed_company, fake_upstream):
    company_id = seed_company()
    fake_upstream.responses.extend(
        [FakeResponse(200, {}), FakeResponse(200, {}), FakeResponse(201, {"id": 77}), FakeResponse(200, {})]
    )
    resp = client.post("/api/quotes/accept", json=accept_body(reloFromDate="27/02/2026"))
    data = resp.get_json()
    assert resp.status_code == 200
    assert data["source"] == "moveware"
    assert data["writeback"]["activityId"] == "77"
    assert data["writeback"]["steps"]["complete_activity"] == "ok"
    assert fake_upstream.calls[1]["json"]["estimatedMove"] == {"date": "2026-02-27T00:00:00.000Z"}
    with app.app_context():
        record = QuoteAcceptanceRecord.query.one()
        assert record.company_id == company_id
        assert json.loads(record.writeback_steps)["post_activity"] == "ok"


def test_accept_upstream_failure_is_502(app, client, seed_company, fake_upstream):
    seed_company()
    fake_upstream.responses.append(FakeResponse(500, text="nope"))
    resp = client.post("/api/quotes/accept", json=accept_body())
    data = resp.get_json()
    assert resp.status_code == 502
    assert data["error"] == "Failed to accept quote"
    assert data["step"] == "mark_quotation_accepted"
    assert "500" in data["details"]
    with app.app_context():
        assert QuoteAcceptanceRecord.query.count() == 0


def test_accept_respects_job_status_step_config(app, client, seed_company, fake_upstream):
    seed_company()
    app.config["MOVEWARE_JOB_STATUS_STEP"] = "skip"
    fake_upstream.responses.extend(
        [FakeResponse(200, {}), FakeResponse(201, {"id": 77}), FakeResponse(200, {})]
    )
    data = client.post("/api/quotes/accept", json=accept_body()).get_json()
    assert data["writeback"]["steps"]["update_job_status"] == "skipped"
    assert [c["method"] for c in fake_upstream.calls] == ["PATCH", "POST", "PATCH"]


def test_accepting_twice_updates_the_same_record(app, client):
    client.post("/api/quotes/accept", json=accept_body(coId=""))
    client.post("/api/quotes/accept", json=accept_body(coId="", signatureName="Someone Else"))
    with app.app_context():
        assert QuoteAcceptanceRecord.query.count() == 1
        assert QuoteAcceptanceRecord.query.one().accepted_by == "Someone Else"


def test_review_requires_token_and_answers(client):
    resp = client.post("/api/review/submit", json={"jobId": "111505", "answers": {"1": 5}})
    assert resp.status_code == 400
    resp = client.post("/api/review/submit", json={"jobId": "111505", "token": "t"})
    assert resp.status_code == 400


def test_review_saved_locally_without_credentials(app, client):
    resp = client.post(
        "/api/review/submit",
        json={"jobId": 111505, "token": "tok", "companyId": "12345", "answers": [{"id": 1, "value": 5}]},
    )
    data = resp.get_json()
    assert resp.status_code == 200
    assert "mwError" not in data
    with app.app_context():
        submission = ReviewSubmission.query.one()
        assert submission.id == data["submissionId"]
        assert submission.job_id == "111505"
        assert json.loads(submission.answers) == [{"id": 1, "value": 5}]


def test_review_writeback_failure_is_reported_not_fatal(app, client, seed_company, fake_upstream):
    seed_company()
    fake_upstream.responses.append(FakeResponse(500, text="review store down"))
    resp = client.post(
        "/api/review/submit",
        json={"jobId": "111505", "token": "tok", "companyId": "12345", "answers": {"1": 5},
              "reviewTypes": ["service"]},
    )
    data = resp.get_json()
    assert resp.status_code == 200
    assert data["success"] is True
    assert "review store down" in data["mwError"]
    assert fake_upstream.calls[0]["json"]["reviewTypes"] == ["service"]
    with app.app_context():
        assert ReviewSubmission.query.count() == 1
