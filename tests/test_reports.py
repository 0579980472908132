from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from faculty_eval.core.scoring import ScoredRating, overall_score
from faculty_eval.main import app
from faculty_eval.models.evaluation import Evaluation
from faculty_eval.models.evaluation_response import EvaluationResponse
from faculty_eval.services.analytics_service import analyze_comment, performance_label, term_of
from tests.helpers import (
    auth_headers,
    create_admin,
    create_category,
    create_course,
    create_department,
    create_form,
    create_question,
    create_user,
)


def _evaluation(db, evaluator, evaluatee, form, ratings, submitted=None, comments=None, course=None) -> Evaluation:
    e = Evaluation(
        evaluator_id=evaluator.id,
        evaluatee_id=evaluatee.id,
        form_id=form.id,
        course_id=course.id if course else None,
        comments=comments,
        date_submitted=submitted or datetime(2025, 10, 1, 9, 0),
        overall_score=overall_score([ScoredRating(r, q.category_id, None, q.weight) for q, r in ratings]),
    )
    db.add(e)
    db.flush()
    db.add_all(EvaluationResponse(evaluation_id=e.id, question_id=q.id, rating=r) for q, r in ratings)
    db.commit()
    return e


@pytest.fixture()
def seeded(db_session):
    db = db_session
    dep = create_department(db)
    student = create_user(db, "student@test.com", role="Student")
    supervisor = create_user(db, "sup@test.com", role="Supervisor")
    ada = create_user(db, "ada@test.com", first_name="Ada", last_name="Reyes", department=dep)
    ben = create_user(db, "ben@test.com", first_name="Ben", last_name="Cruz")
    cara = create_user(db, "cara@test.com", first_name="Cara", last_name="Abad")
    retired = create_user(db, "old@test.com", first_name="Old", last_name="Timer", is_active=False)

    cat = create_category(db, "Teaching")
    q1 = create_question(db, cat, "Explains clearly")
    q2 = create_question(db, cat, "Uses examples")
    form = create_form(db)
    course = create_course(db, dep)

    _evaluation(db, student, ada, form, [(q1, 5), (q2, 5)], datetime(2025, 3, 10, 9, 0), "Great and very helpful", course)
    _evaluation(db, supervisor, ada, form, [(q1, 4), (q2, 4)], datetime(2025, 10, 5, 9, 0), "Could improve pacing")
    _evaluation(db, student, ben, form, [(q1, 3), (q2, 3)])
    _evaluation(db, student, cara, form, [(q1, 4), (q2, 5)])
    _evaluation(db, student, retired, form, [(q1, 5), (q2, 5)])

    return {"viewer": create_admin(db), "ada": ada, "ben": ben, "cara": cara, "retired": retired, "course": course}


def test_top_faculty_ordering_and_limit(seeded):
    """Descending average, ties broken by last name, inactive faculty left out"""
    client = TestClient(app)
    headers = auth_headers(seeded["viewer"])

    r = client.get("/api/v1/reports/top-faculty", headers=headers)
    assert r.status_code == 200
    rows = r.json()["data"]
    assert [row["last_name"] for row in rows] == ["Abad", "Reyes", "Cruz"]
    scores = [row["average_score"] for row in rows]
    assert scores == sorted(scores, reverse=True)
    assert rows[1]["evaluations_count"] == 2

    r = client.get("/api/v1/reports/top-faculty?limit=2", headers=headers)
    assert len(r.json()["data"]) == 2

    assert client.get("/api/v1/reports/top-faculty?limit=0", headers=headers).status_code == 400
    assert client.get("/api/v1/reports/top-faculty?limit=101", headers=headers).status_code == 400


def test_overall_averages(seeded):
    client = TestClient(app)
    r = client.get("/api/v1/reports/overall", headers=auth_headers(seeded["viewer"]))
    assert r.status_code == 200
    rows = r.json()["data"]
    assert [row["evaluatee_id"] for row in rows] == [
        seeded["retired"].id,
        seeded["ada"].id,
        seeded["cara"].id,
        seeded["ben"].id,
    ]
    ada = rows[1]
    assert ada["average_score"] == pytest.approx(4.5)
    assert ada["evaluations_count"] == 2


def test_category_averages(seeded):
    client = TestClient(app)
    r = client.get(f"/api/v1/reports/{seeded['ada'].id}/categories", headers=auth_headers(seeded["viewer"]))
    assert r.status_code == 200
    rows = r.json()["data"]
    assert len(rows) == 1
    assert rows[0]["name"] == "Teaching"
    assert rows[0]["average_rating"] == pytest.approx(4.5)
    assert rows[0]["responses_count"] == 4


def test_reports_require_login(seeded):
    client = TestClient(app)
    assert client.get("/api/v1/reports/overall").status_code == 401


def test_professor_analytics(seeded):
    client = TestClient(app)
    r = client.get(f"/api/v1/reports/professors/{seeded['ada'].id}/analytics", headers=auth_headers(seeded["viewer"]))
    assert r.status_code == 200
    data = r.json()["data"]
    out = data["json_output"]

    topline = out["topline"]
    assert topline["evaluations_count"] == 2
    assert topline["overall_average"] == pytest.approx(4.5)
    assert topline["median"] == pytest.approx(4.5)
    assert topline["min"] == pytest.approx(4.0)
    assert topline["max"] == pytest.approx(5.0)
    assert topline["stddev"] == pytest.approx(0.7071, abs=1e-4)
    assert topline["moe_95"] == pytest.approx(0.98, abs=1e-2)
    assert topline["performance_label"] == "Excellent"

    assert out["professor"]["department"] == "Computer Science"
    assert out["professor"]["course_ids"] == [seeded["course"].id]
    assert out["category_breakdown"][0]["low_sample"] is True
    assert [t["semester"] for t in out["trend"]] == ["Spring 2025", "Fall 2025"]
    assert {c["sentiment"] for c in out["comments"]} == {"positive", "constructive"}
    assert data["chart_datasets"]["category_bar"] == [{"label": "Teaching", "value": 4.5}]
    assert "Overall average is 4.50 across 2 evaluations" in data["human_summary"]


def test_margin_of_error_counts_only_scored_evaluations(seeded, db_session):
    """An evaluation without responses counts toward the total but not the margin"""
    form = create_form(db_session, title="Blank")
    _evaluation(db_session, seeded["viewer"], seeded["ada"], form, [])

    client = TestClient(app)
    r = client.get(f"/api/v1/reports/professors/{seeded['ada'].id}/analytics", headers=auth_headers(seeded["viewer"]))
    topline = r.json()["data"]["json_output"]["topline"]
    assert topline["evaluations_count"] == 3
    assert topline["overall_average"] == pytest.approx(4.5)
    assert topline["moe_95"] == pytest.approx(0.98, abs=1e-2)


def test_professor_analytics_filters(seeded):
    client = TestClient(app)
    url = f"/api/v1/reports/professors/{seeded['ada'].id}/analytics"
    headers = auth_headers(seeded["viewer"])

    r = client.get(f"{url}?start_date=2025-06-01", headers=headers)
    assert r.json()["data"]["json_output"]["topline"]["evaluations_count"] == 1

    r = client.get(f"{url}?end_date=2025-03-10", headers=headers)
    assert r.json()["data"]["json_output"]["topline"]["evaluations_count"] == 1

    r = client.get(f"{url}?evaluator_role=supervisor", headers=headers)
    assert r.json()["data"]["json_output"]["topline"]["overall_average"] == pytest.approx(4.0)

    r = client.get(f"{url}?course_ids={seeded['course'].id}", headers=headers)
    assert r.json()["data"]["json_output"]["topline"]["evaluations_count"] == 1

    assert client.get(f"{url}?course_ids=1,x", headers=headers).status_code == 400
    assert client.get(f"{url}?start_date=2025-06-01&end_date=2025-01-01", headers=headers).status_code == 400


def test_professor_analytics_unknown_professor(seeded):
    client = TestClient(app)
    r = client.get("/api/v1/reports/professors/9999/analytics", headers=auth_headers(seeded["viewer"]))
    assert r.status_code == 404


@pytest.mark.parametrize(
    "avg,label",
    [(4.5, "Excellent"), (4.49, "Good"), (4.0, "Good"), (3.5, "Satisfactory"), (3.49, "Needs Improvement"), (None, "N/A")],
)
def test_performance_label(avg, label):
    assert performance_label(avg) == label


def test_term_of():
    assert term_of(datetime(2025, 5, 31).date()) == ("Spring", 2025)
    assert term_of(datetime(2025, 6, 1).date()) == ("Summer", 2025)
    assert term_of(datetime(2025, 9, 1).date()) == ("Fall", 2025)


def test_analyze_comment():
    assert analyze_comment("Lectures were confusing and slow")[0] == "negative"
    assert analyze_comment("You should post slides earlier")[0] == "constructive"
    assert analyze_comment(None) == ("neutral", [])
    _, keywords = analyze_comment("clear clear examples examples examples notes")
    assert keywords == ["examples", "clear", "notes"]
