"""
Thin httpx wrapper around the REST API.

Every call attaches the bearer token (when one is set), unwraps the
``{"status", "message", "data"}`` envelope and raises ``ApiClientError`` for
error responses. Pass ``http=`` to reuse an existing ``httpx.Client``
(FastAPI's ``TestClient`` works too).
"""
from datetime import date
from typing import Any

import httpx

from faculty_eval.core.config import settings


class ApiClientError(Exception):
    def __init__(self, status_code: int, message: str, errors: list | None = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.errors = errors or []


def _clean(params: dict) -> dict:
    return {k: v for k, v in params.items() if v is not None}


class FacultyEvalClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        token: str | None = None,
        http: httpx.Client | None = None,
        api_prefix: str = settings.API_PREFIX,
        timeout: float = 10.0,
    ):
        self._http = http or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)
        self._owns_http = http is None
        self.api_prefix = api_prefix.rstrip("/")
        self.token = token

    def close(self):
        if self._owns_http:
            self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # ---------- transport ----------

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def request(self, method: str, path: str, *, params: dict | None = None, json: Any = None) -> Any:
        response = self._http.request(
            method,
            f"{self.api_prefix}{path}",
            params=_clean(params or {}),
            json=json,
            headers=self._headers(),
        )
        try:
            body = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            if response.is_error:
                raise ApiClientError(response.status_code, response.text or response.reason_phrase)
            return body

        if response.is_error or body.get("status") == "error":
            raise ApiClientError(
                response.status_code,
                body.get("message") or response.reason_phrase,
                body.get("errors"),
            )
        return body.get("data")

    # ---------- auth ----------

    def signup(self, **payload) -> dict:
        data = self.request("POST", "/auth/signup", json=payload)
        self.token = data["token"]
        return data["user"]

    def login(self, email: str, password: str) -> dict:
        data = self.request("POST", "/auth/login", json={"email": email, "password": password})
        self.token = data["token"]
        return data["user"]

    def logout(self):
        self.token = None

    def me(self) -> dict:
        return self.request("GET", "/auth/me")

    def update_profile(self, **fields) -> dict:
        return self.request("PATCH", "/auth/me", json=fields)

    def change_password(self, current_password: str, new_password: str):
        return self.request(
            "POST",
            "/auth/change-password",
            json={"current_password": current_password, "new_password": new_password},
        )

    # ---------- users ----------

    def list_users(
        self,
        *,
        user_type: str | None = None,
        role: str | None = None,
        department_id: int | None = None,
        is_active: bool | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict:
        return self.request(
            "GET",
            "/users",
            params={
                "user_type": user_type,
                "role": role,
                "department_id": department_id,
                "is_active": is_active,
                "limit": limit,
                "offset": offset,
            },
        )

    def list_faculty(self, department_id: int | None = None) -> list[dict]:
        return self.request("GET", "/users/faculty", params={"department_id": department_id})

    def list_students(self, department_id: int | None = None) -> list[dict]:
        return self.request("GET", "/users/students", params={"department_id": department_id})

    def list_supervisors(self, department_id: int | None = None) -> list[dict]:
        return self.request("GET", "/users/supervisors", params={"department_id": department_id})

    def list_users_by_role(self, role: str, department_id: int | None = None) -> list[dict]:
        return self.request("GET", f"/users/roles/{role}", params={"department_id": department_id})

    def get_user(self, user_id: int) -> dict:
        return self.request("GET", f"/users/{user_id}")

    def create_user(self, **payload) -> dict:
        return self.request("POST", "/users", json=payload)

    def update_user(self, user_id: int, **fields) -> dict:
        return self.request("PATCH", f"/users/{user_id}", json=fields)

    def delete_user(self, user_id: int) -> dict:
        return self.request("DELETE", f"/users/{user_id}")

    # ---------- reference data ----------

    def list_departments(self) -> list[dict]:
        return self.request("GET", "/departments")

    def find_department(self, name: str) -> dict:
        return self.request("GET", "/departments/search", params={"name": name})

    def list_courses(self, *, evaluatee_id: int | None = None, department_id: int | None = None) -> list[dict]:
        return self.request("GET", "/courses", params={"evaluatee_id": evaluatee_id, "department_id": department_id})

    def list_categories(self) -> list[dict]:
        return self.request("GET", "/categories")

    def create_category(self, name: str, weight: float | None = None) -> dict:
        return self.request("POST", "/categories", json={"name": name, "weight": weight})

    def list_questions(self, category_id: int | None = None) -> list[dict]:
        return self.request("GET", "/questions", params={"category_id": category_id})

    def questions_by_category(self) -> list[dict]:
        return self.request("GET", "/questions/by-category")

    def create_question(self, text: str, category_id: int, weight: float | None = None) -> dict:
        return self.request("POST", "/questions", json={"text": text, "category_id": category_id, "weight": weight})

    # ---------- forms ----------

    def list_forms(self, active: bool | None = None) -> list[dict]:
        return self.request("GET", "/forms", params={"active": active})

    def get_form(self, form_id: int) -> dict:
        return self.request("GET", f"/forms/{form_id}")

    def create_form(self, **payload) -> dict:
        return self.request("POST", "/forms", json=_jsonable(payload))

    def update_form(self, form_id: int, **fields) -> dict:
        return self.request("PATCH", f"/forms/{form_id}", json=_jsonable(fields))

    def delete_form(self, form_id: int) -> dict:
        return self.request("DELETE", f"/forms/{form_id}")

    # ---------- evaluations ----------

    def submit_evaluation(
        self,
        *,
        evaluatee_id: int,
        form_id: int,
        responses: list[dict],
        course_id: int | None = None,
        comments: str | None = None,
    ) -> dict:
        payload = _clean({
            "evaluatee_id": evaluatee_id,
            "form_id": form_id,
            "responses": responses,
            "course_id": course_id,
            "comments": comments,
        })
        return self.request("POST", "/evaluations", json=payload)

    def my_evaluations(self, limit: int | None = None, offset: int | None = None) -> list[dict]:
        return self.request("GET", "/evaluations/mine", params={"limit": limit, "offset": offset})

    def get_evaluation(self, evaluation_id: int) -> dict:
        return self.request("GET", f"/evaluations/{evaluation_id}")

    # ---------- reports ----------

    def overall_report(self) -> list[dict]:
        return self.request("GET", "/reports/overall")

    def category_report(self, evaluatee_id: int) -> list[dict]:
        return self.request("GET", f"/reports/{evaluatee_id}/categories")

    def top_faculty(self, limit: int | None = None) -> list[dict]:
        return self.request("GET", "/reports/top-faculty", params={"limit": limit})

    def professor_analytics(
        self,
        professor_id: int,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
        course_ids: list[int] | None = None,
        min_responses: int | None = None,
        evaluator_role: str | None = None,
    ) -> dict:
        params = {
            "start_date": start_date.isoformat() if start_date else None,
            "end_date": end_date.isoformat() if end_date else None,
            "course_ids": ",".join(str(c) for c in course_ids) if course_ids else None,
            "min_responses": min_responses,
            "evaluator_role": evaluator_role,
        }
        return self.request("GET", f"/reports/professors/{professor_id}/analytics", params=params)


def _jsonable(payload: dict) -> dict:
    return {k: v.isoformat() if isinstance(v, date) else v for k, v in payload.items()}
