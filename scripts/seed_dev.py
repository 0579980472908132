# seed_dev.py
from datetime import date, timedelta

from sqlalchemy.orm import Session

from faculty_eval.core.security import hash_password
from faculty_eval.db.session import SessionLocal
from faculty_eval.models.category import Category
from faculty_eval.models.course import Course
from faculty_eval.models.department import Department
from faculty_eval.models.evaluation_form import EvaluationForm
from faculty_eval.models.question import Question
from faculty_eval.models.role_details import FacultyDetail, StudentDetail, SupervisorDetail
from faculty_eval.models.user import User

DEV_PASSWORD = "password123"

CATEGORIES = {
    "Teaching Effectiveness": (
        2.0,
        [
            "Explains concepts clearly",
            "Uses examples that aid understanding",
            "Encourages questions and participation",
        ],
    ),
    "Course Organization": (
        1.0,
        [
            "Follows the syllabus",
            "Starts and ends class on time",
        ],
    ),
    "Professionalism": (
        1.0,
        [
            "Treats students with respect",
            "Returns graded work promptly",
        ],
    ),
}


# ---------- helpers ----------

def get_or_create_department(db: Session, name: str) -> Department:
    d = db.query(Department).filter(Department.name == name).one_or_none()
    if d:
        return d
    d = Department(name=name)
    db.add(d)
    db.commit()
    db.refresh(d)
    return d


def get_or_create_course(db: Session, department: Department, code: str, title: str) -> Course:
    c = (
        db.query(Course)
        .filter(Course.department_id == department.id, Course.course_code == code)
        .one_or_none()
    )
    if c:
        if c.course_title != title:
            c.course_title = title
            db.commit()
            db.refresh(c)
        return c
    c = Course(department_id=department.id, course_code=code, course_title=title)
    db.add(c)
    db.commit()
    db.refresh(c)
    return c


def get_or_create_user(
    db: Session,
    email: str,
    first_name: str,
    last_name: str,
    *,
    user_type: str = "User",
    role: str | None = None,
    department: Department | None = None,
) -> User:
    u = db.query(User).filter(User.email == email).one_or_none()
    if u:
        # keep these up to date in dev
        changed = False
        if (u.user_type, u.role) != (user_type, role):
            u.user_type, u.role = user_type, role
            changed = True
        if not u.is_active:
            u.is_active = True
            changed = True
        if changed:
            db.commit()
            db.refresh(u)
        return u

    u = User(
        email=email,
        first_name=first_name,
        last_name=last_name,
        password_hash=hash_password(DEV_PASSWORD),
        user_type=user_type,
        role=role,
        department_id=department.id if department else None,
        is_active=True,
    )
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def ensure_role_detail(db: Session, model, user: User, **fields):
    row = db.query(model).filter(model.user_id == user.id).one_or_none()
    if row:
        return row
    row = model(user_id=user.id, **fields)
    db.add(row)
    db.commit()
    return row


def get_or_create_category(db: Session, name: str, weight: float | None) -> Category:
    c = db.query(Category).filter(Category.name == name).one_or_none()
    if c:
        if c.weight != weight:
            c.weight = weight
            db.commit()
            db.refresh(c)
        return c
    c = Category(name=name, weight=weight)
    db.add(c)
    db.commit()
    db.refresh(c)
    return c


def get_or_create_question(db: Session, category: Category, text: str) -> Question:
    q = (
        db.query(Question)
        .filter(Question.category_id == category.id, Question.text == text)
        .one_or_none()
    )
    if q:
        return q
    q = Question(category_id=category.id, text=text)
    db.add(q)
    db.commit()
    db.refresh(q)
    return q


def get_or_create_form(db: Session, *, title: str, school_year: str, semester: str, created_by: User) -> EvaluationForm:
    today = date.today()
    form = (
        db.query(EvaluationForm)
        .filter(EvaluationForm.title == title, EvaluationForm.school_year == school_year)
        .one_or_none()
    )
    if form:
        # reopen the window so the dev form always accepts submissions
        form.is_active = True
        form.start_date = today - timedelta(days=7)
        form.end_date = today + timedelta(days=60)
        db.commit()
        db.refresh(form)
        return form

    form = EvaluationForm(
        title=title,
        school_year=school_year,
        semester=semester,
        start_date=today - timedelta(days=7),
        end_date=today + timedelta(days=60),
        created_by=created_by.id,
        is_active=True,
    )
    db.add(form)
    db.commit()
    db.refresh(form)
    return form


# ---------- main ----------

def main():
    db = SessionLocal()
    try:
        # ---- Departments / courses ----
        cs = get_or_create_department(db, "Computer Science")
        math = get_or_create_department(db, "Mathematics")

        get_or_create_course(db, cs, "CS101", "Introduction to Programming")
        get_or_create_course(db, cs, "CS201", "Data Structures")
        get_or_create_course(db, math, "MATH101", "College Algebra")

        # ---- Users ----
        admin = get_or_create_user(db, "admin@local.test", "Admin", "Local", user_type="Admin")
        faculty = get_or_create_user(db, "faculty@local.test", "Ada", "Reyes", role="Faculty", department=cs)
        faculty2 = get_or_create_user(db, "faculty2@local.test", "Alan", "Cruz", role="Faculty", department=math)
        student = get_or_create_user(db, "student@local.test", "Sam", "Lopez", role="Student", department=cs)
        supervisor = get_or_create_user(db, "supervisor@local.test", "Grace", "Tan", role="Supervisor", department=cs)

        ensure_role_detail(db, FacultyDetail, faculty, position="Assistant Professor")
        ensure_role_detail(db, FacultyDetail, faculty2, position="Instructor")
        ensure_role_detail(db, StudentDetail, student, course_title="BS Computer Science", year_level=2)
        ensure_role_detail(db, SupervisorDetail, supervisor, title="Department Chair")

        # ---- Question bank ----
        for name, (weight, texts) in CATEGORIES.items():
            category = get_or_create_category(db, name, weight)
            for text in texts:
                get_or_create_question(db, category, text)

        # ---- Open form ----
        form = get_or_create_form(
            db,
            title="Faculty Evaluation",
            school_year=f"{date.today().year}-{date.today().year + 1}",
            semester="First Semester",
            created_by=admin,
        )

        print("\n=== DEV SEED COMPLETE ===")
        print(f"Password for every user: {DEV_PASSWORD}")
        print("Users:")
        for u in (admin, faculty, faculty2, student, supervisor):
            print(f"  {u.user_type:<5} {u.role or '-':<10} {u.email}")

        print("\nForm:")
        print(f"  form_id: {form.id} ({form.start_date} .. {form.end_date})")

        print("\nNext API steps:")
        print("  POST /api/v1/auth/login  (as student@local.test)")
        print(f"  POST /api/v1/evaluations  {{evaluatee_id: {faculty.id}, form_id: {form.id}, responses: [...]}}")

    finally:
        db.close()


if __name__ == "__main__":
    main()
