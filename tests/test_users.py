from fastapi.testclient import TestClient

from faculty_eval.main import app
from faculty_eval.models.role_details import FacultyDetail
from faculty_eval.models.user import User
from tests.helpers import auth_headers, create_admin, create_department, create_user


def test_list_users_by_role_returns_only_that_role(db_session):
    """Role filter is case-insensitive and exact"""
    admin = create_admin(db_session)
    create_user(db_session, "f1@test.com", role="Faculty")
    create_user(db_session, "f2@test.com", role="Faculty")
    create_user(db_session, "s1@test.com", role="Student")
    create_user(db_session, "v1@test.com", role="Supervisor")

    client = TestClient(app)
    r = client.get("/api/v1/users?role=faculty", headers=auth_headers(admin))
    assert r.status_code == 200
    page = r.json()["data"]
    assert page["pagination"]["total"] == 2
    assert {u["email"] for u in page["items"]} == {"f1@test.com", "f2@test.com"}
    assert all(u["role"] == "Faculty" for u in page["items"])


def test_list_users_pagination_meta(db_session):
    admin = create_admin(db_session)
    for i in range(3):
        create_user(db_session, f"s{i}@test.com", role="Student", last_name=f"L{i}")

    client = TestClient(app)
    r = client.get("/api/v1/users?role=Student&limit=2&offset=0", headers=auth_headers(admin))
    page = r.json()["data"]
    assert len(page["items"]) == 2
    assert page["pagination"] == {"total": 3, "limit": 2, "offset": 0, "has_more": True}


def test_role_listing_endpoints(db_session):
    dep = create_department(db_session)
    other = create_department(db_session, "Mathematics")
    user = create_user(db_session, "s@test.com", role="Student", department=dep)
    create_user(db_session, "f1@test.com", role="Faculty", department=dep)
    create_user(db_session, "f2@test.com", role="Faculty", department=other)
    create_user(db_session, "v@test.com", role="Supervisor", department=dep)

    client = TestClient(app)
    r = client.get(f"/api/v1/users/faculty?department_id={dep.id}", headers=auth_headers(user))
    assert r.status_code == 200
    assert [u["email"] for u in r.json()["data"]] == ["f1@test.com"]

    r = client.get("/api/v1/users/supervisors", headers=auth_headers(user))
    assert [u["email"] for u in r.json()["data"]] == ["v@test.com"]

    r = client.get("/api/v1/users/students", headers=auth_headers(user))
    assert [u["email"] for u in r.json()["data"]] == ["s@test.com"]


def test_role_joined_view_includes_detail_columns(db_session):
    """Users joined with the faculty detail table"""
    admin = create_admin(db_session)
    prof = create_user(db_session, "f1@test.com", role="Faculty")
    create_user(db_session, "f2@test.com", role="Faculty", last_name="Zed")
    db_session.add(FacultyDetail(user_id=prof.id, position="Professor"))
    db_session.commit()

    client = TestClient(app)
    r = client.get("/api/v1/users/roles/professor", headers=auth_headers(admin))
    assert r.status_code == 200
    rows = {row["email"]: row for row in r.json()["data"]}
    assert rows["f1@test.com"]["role_table"] == "faculty"
    assert rows["f1@test.com"]["role_details"] == {"id": 1, "position": "Professor"}
    assert rows["f2@test.com"]["role_details"] is None


def test_role_joined_view_unknown_role(db_session):
    admin = create_admin(db_session)
    client = TestClient(app)
    r = client.get("/api/v1/users/roles/janitor", headers=auth_headers(admin))
    assert r.status_code == 400


def test_get_user_not_found(db_session):
    admin = create_admin(db_session)
    client = TestClient(app)
    r = client.get("/api/v1/users/999", headers=auth_headers(admin))
    assert r.status_code == 404
    assert r.json() == {"status": "error", "message": "User not found"}


def test_get_user_bad_id_is_validation_error(db_session):
    admin = create_admin(db_session)
    client = TestClient(app)
    r = client.get("/api/v1/users/abc", headers=auth_headers(admin))
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "user_id"


def test_create_user_admin_only(db_session):
    """Only admins may create users; duplicates are 409"""
    admin = create_admin(db_session)
    prof = create_user(db_session, "f1@test.com")
    payload = {
        "first_name": "New",
        "last_name": "Student",
        "email": "new@test.com",
        "password": "password123",
        "role": "Student",
    }

    client = TestClient(app)
    r = client.post("/api/v1/users", json=payload, headers=auth_headers(prof))
    assert r.status_code == 403

    r = client.post("/api/v1/users", json=payload, headers=auth_headers(admin))
    assert r.status_code == 201
    assert r.json()["data"]["role"] == "Student"
    assert r.json()["message"] == "User created successfully"

    r = client.post("/api/v1/users", json=payload, headers=auth_headers(admin))
    assert r.status_code == 409


def test_create_admin_drops_role(db_session):
    admin = create_admin(db_session)
    client = TestClient(app)
    r = client.post(
        "/api/v1/users",
        json={
            "first_name": "Second",
            "last_name": "Admin",
            "email": "admin2@test.com",
            "password": "password123",
            "user_type": "admin",
            "role": "Faculty",
        },
        headers=auth_headers(admin),
    )
    assert r.status_code == 201
    data = r.json()["data"]
    assert data["user_type"] == "Admin"
    assert data["role"] is None


def test_update_user(db_session):
    admin = create_admin(db_session)
    prof = create_user(db_session, "f1@test.com")
    dep = create_department(db_session)

    client = TestClient(app)
    r = client.patch(
        f"/api/v1/users/{prof.id}",
        json={"last_name": "Updated", "role": "Supervisor", "department_id": dep.id},
        headers=auth_headers(admin),
    )
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["last_name"] == "Updated"
    assert data["role"] == "Supervisor"
    assert data["department_id"] == dep.id

    r = client.patch(f"/api/v1/users/{prof.id}", json={"department_id": 999}, headers=auth_headers(admin))
    assert r.status_code == 400


def test_delete_is_soft(db_session):
    """Deleted users stay in the table but drop out of default listings"""
    admin = create_admin(db_session)
    prof = create_user(db_session, "f1@test.com")

    client = TestClient(app)
    r = client.delete(f"/api/v1/users/{prof.id}", headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json()["data"]["is_active"] is False

    row = db_session.get(User, prof.id)
    assert row is not None
    assert row.is_active is False

    r = client.get("/api/v1/users", headers=auth_headers(admin))
    assert "f1@test.com" not in {u["email"] for u in r.json()["data"]["items"]}

    r = client.get("/api/v1/users?is_active=false", headers=auth_headers(admin))
    assert {u["email"] for u in r.json()["data"]["items"]} == {"f1@test.com"}

    r = client.get("/api/v1/users/faculty", headers=auth_headers(admin))
    assert r.json()["data"] == []


def test_deactivated_user_token_rejected(db_session):
    admin = create_admin(db_session)
    prof = create_user(db_session, "f1@test.com")
    headers = auth_headers(prof)

    client = TestClient(app)
    client.delete(f"/api/v1/users/{prof.id}", headers=auth_headers(admin))
    r = client.get("/api/v1/auth/me", headers=headers)
    assert r.status_code == 401


def test_admin_cannot_delete_self(db_session):
    admin = create_admin(db_session)
    client = TestClient(app)
    r = client.delete(f"/api/v1/users/{admin.id}", headers=auth_headers(admin))
    assert r.status_code == 400
