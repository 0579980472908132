from datetime import date

from fastapi.testclient import TestClient

from faculty_eval.main import app
from faculty_eval.models.evaluation_form import EvaluationForm
from tests.helpers import auth_headers, create_admin, create_form, create_user


def test_create_form(db_session):
    admin = create_admin(db_session)
    client = TestClient(app)
    r = client.post(
        "/api/v1/forms",
        json={
            "title": "Midterm Evaluation",
            "school_year": "2025-2026",
            "semester": "First Semester",
            "start_date": "2025-09-01",
            "end_date": "2025-10-15",
        },
        headers=auth_headers(admin),
    )
    assert r.status_code == 201
    data = r.json()["data"]
    assert data["created_by"] == admin.id
    assert data["is_active"] is True
    assert data["start_date"] == "2025-09-01"


def test_create_form_validation(db_session):
    """school_year must be YYYY-YYYY and the window must not be inverted"""
    admin = create_admin(db_session)
    client = TestClient(app)

    r = client.post("/api/v1/forms", json={"title": "Bad", "school_year": "2025"}, headers=auth_headers(admin))
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "school_year"

    r = client.post(
        "/api/v1/forms",
        json={"title": "Bad", "school_year": "2025-2026", "start_date": "2025-10-01", "end_date": "2025-09-01"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 400


def test_create_form_requires_admin(db_session):
    prof = create_user(db_session, "f@test.com")
    client = TestClient(app)
    r = client.post("/api/v1/forms", json={"title": "X", "school_year": "2025-2026"}, headers=auth_headers(prof))
    assert r.status_code == 403


def test_list_forms_active_filter(db_session):
    prof = create_user(db_session, "f@test.com")
    create_form(db_session, title="Open")
    create_form(db_session, title="Closed", is_active=False)

    client = TestClient(app)
    r = client.get("/api/v1/forms", headers=auth_headers(prof))
    assert {f["title"] for f in r.json()["data"]} == {"Open", "Closed"}

    r = client.get("/api/v1/forms?active=true", headers=auth_headers(prof))
    assert [f["title"] for f in r.json()["data"]] == ["Open"]


def test_update_form_checks_stored_window(db_session):
    """A partial update is checked against the dates already stored"""
    admin = create_admin(db_session)
    form = create_form(db_session, start_date=date(2025, 9, 1), end_date=date(2025, 12, 1))
    client = TestClient(app)

    r = client.patch(f"/api/v1/forms/{form.id}", json={"end_date": "2025-08-01"}, headers=auth_headers(admin))
    assert r.status_code == 400

    r = client.patch(
        f"/api/v1/forms/{form.id}",
        json={"end_date": "2025-12-15", "title": "Renamed"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["end_date"] == "2025-12-15"
    assert data["title"] == "Renamed"


def test_delete_form_is_soft(db_session):
    admin = create_admin(db_session)
    form = create_form(db_session)
    client = TestClient(app)

    r = client.delete(f"/api/v1/forms/{form.id}", headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json()["data"]["is_active"] is False
    assert db_session.get(EvaluationForm, form.id) is not None

    r = client.get(f"/api/v1/forms/{form.id}", headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json()["data"]["is_active"] is False


def test_get_form_not_found(db_session):
    admin = create_admin(db_session)
    client = TestClient(app)
    assert client.get("/api/v1/forms/123", headers=auth_headers(admin)).status_code == 404


def test_accepts_submissions_on_window():
    form = EvaluationForm(
        title="T", school_year="2025-2026", is_active=True, start_date=date(2025, 9, 1), end_date=date(2025, 9, 30)
    )
    assert form.accepts_submissions_on(date(2025, 9, 1))
    assert form.accepts_submissions_on(date(2025, 9, 30))
    assert not form.accepts_submissions_on(date(2025, 8, 31))
    assert not form.accepts_submissions_on(date(2025, 10, 1))

    form.end_date = None
    assert form.accepts_submissions_on(date(2030, 1, 1))

    form.is_active = False
    assert not form.accepts_submissions_on(date(2025, 9, 15))
