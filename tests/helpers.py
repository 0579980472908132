from datetime import date, timedelta

from faculty_eval.core.security import create_access_token, hash_password
from faculty_eval.models.category import Category
from faculty_eval.models.course import Course
from faculty_eval.models.department import Department
from faculty_eval.models.evaluation_form import EvaluationForm
from faculty_eval.models.question import Question
from faculty_eval.models.user import User

PASSWORD = "password123"

# default form bounds: one day either side of today
OPEN = object()


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


def create_department(db, name="Computer Science") -> Department:
    d = Department(name=name)
    db.add(d)
    db.commit()
    db.refresh(d)
    return d


def create_user(
    db,
    email: str,
    role: str | None = "Faculty",
    first_name="Test",
    last_name="User",
    user_type="User",
    department: Department | None = None,
    is_active=True,
) -> User:
    u = User(
        email=email,
        first_name=first_name,
        last_name=last_name,
        password_hash=hash_password(PASSWORD),
        user_type=user_type,
        role=role,
        department_id=department.id if department else None,
        is_active=is_active,
    )
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def create_admin(db, email="admin@test.com") -> User:
    return create_user(db, email, role=None, user_type="Admin", first_name="Admin")


def create_course(db, department: Department, code="CS101", title="Introduction to Programming") -> Course:
    c = Course(department_id=department.id, course_code=code, course_title=title)
    db.add(c)
    db.commit()
    db.refresh(c)
    return c


def create_category(db, name="Teaching", weight: float | None = None) -> Category:
    c = Category(name=name, weight=weight)
    db.add(c)
    db.commit()
    db.refresh(c)
    return c


def create_question(db, category: Category, text="Explains clearly", weight: float | None = None) -> Question:
    q = Question(category_id=category.id, text=text, weight=weight)
    db.add(q)
    db.commit()
    db.refresh(q)
    # the shared test session caches category.questions; reload it
    db.refresh(category)
    return q


def create_form(
    db,
    title="Faculty Evaluation",
    school_year="2025-2026",
    is_active=True,
    start_date=OPEN,
    end_date=OPEN,
    created_by: User | None = None,
) -> EvaluationForm:
    """Form whose window contains today unless explicit dates are given."""
    today = date.today()
    form = EvaluationForm(
        title=title,
        school_year=school_year,
        semester="First Semester",
        start_date=today - timedelta(days=1) if start_date is OPEN else start_date,
        end_date=today + timedelta(days=1) if end_date is OPEN else end_date,
        is_active=is_active,
        created_by=created_by.id if created_by else None,
    )
    db.add(form)
    db.commit()
    db.refresh(form)
    return form


def evaluation_payload(evaluatee: User, form: EvaluationForm, ratings: list[tuple[Question, float]], **extra) -> dict:
    payload = {
        "evaluatee_id": evaluatee.id,
        "form_id": form.id,
        "responses": [{"question_id": q.id, "rating": r} for q, r in ratings],
    }
    payload.update(extra)
    return payload
