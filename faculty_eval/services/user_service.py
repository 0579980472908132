import logging

from fastapi import HTTPException, status
from sqlalchemy import func, inspect, select
from sqlalchemy.orm import Session

from faculty_eval.core.security import hash_password
from faculty_eval.models.department import Department
from faculty_eval.models.role_details import FacultyDetail, StudentDetail, SupervisorDetail
from faculty_eval.models.user import USER_ROLES, USER_TYPES, User

logger = logging.getLogger(__name__)

# role -> candidate detail tables, in preference order
ROLE_TABLE_CANDIDATES: dict[str, list[str]] = {
    "faculty": ["faculty"],
    "professor": ["faculty"],
    "student": ["students", "student"],
    "students": ["students"],
    "supervisor": ["supervisors", "supervisor"],
    "supervisors": ["supervisors"],
    "admin": [],
}

ROLE_DETAIL_MODELS = {
    "faculty": FacultyDetail,
    "students": StudentDetail,
    "supervisors": SupervisorDetail,
}

ROLE_ALIASES = {"professor": "Faculty", "students": "Student", "supervisors": "Supervisor"}


def normalize_user_type(value: str | None) -> str | None:
    if value is None:
        return None
    lc = value.strip().lower()
    for t in USER_TYPES:
        if t.lower() == lc:
            return t
    return None


def normalize_role(value: str | None) -> str | None:
    if value is None:
        return None
    lc = value.strip().lower()
    if lc in ROLE_ALIASES:
        return ROLE_ALIASES[lc]
    for r in USER_ROLES:
        if r.lower() == lc:
            return r
    return None


def clean_middle_initial(value: str | None) -> str | None:
    if not value:
        return None
    return value.strip()[:1] or None


def resolve_type_and_role(user_type: str | None, role: str | None) -> tuple[str, str | None]:
    """Validate user_type/role and return them in stored capitalization."""
    canonical_type = normalize_user_type(user_type or "User")
    if canonical_type is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Invalid user type", "valid_types": list(USER_TYPES)},
        )
    if canonical_type == "Admin":
        return canonical_type, None

    canonical_role = normalize_role(role)
    if canonical_role is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Invalid role for user type", "valid_roles": list(USER_ROLES)},
        )
    return canonical_type, canonical_role


def find_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).one_or_none()


def find_department_by_name(db: Session, name: str) -> Department | None:
    if not name or not name.strip():
        return None
    return (
        db.query(Department)
        .filter(func.lower(Department.name) == name.strip().lower())
        .first()
    )


def get_department_or_400(db: Session, department_id: int) -> Department:
    dep = db.get(Department, department_id)
    if not dep:
        raise HTTPException(status_code=400, detail="Invalid department reference")
    return dep


def create_user(
    db: Session,
    *,
    first_name: str,
    last_name: str,
    email: str,
    password: str,
    user_type: str | None = "User",
    role: str | None = None,
    middle_initial: str | None = None,
    department_id: int | None = None,
) -> User:
    canonical_type, canonical_role = resolve_type_and_role(user_type, role)

    if find_user_by_email(db, email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already in use")

    if department_id is not None:
        get_department_or_400(db, department_id)

    user = User(
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        middle_initial=clean_middle_initial(middle_initial),
        email=email.strip().lower(),
        password_hash=hash_password(password),
        user_type=canonical_type,
        role=canonical_role,
        department_id=department_id,
        is_active=True,
    )
    db.add(user)
    db.flush()
    logger.info("Created user id=%s type=%s role=%s", user.id, user.user_type, user.role)
    return user


UPDATABLE_FIELDS = ("first_name", "last_name", "middle_initial", "email", "user_type", "role", "department_id", "is_active")


def update_user(db: Session, user: User, updates: dict) -> User:
    updates = {k: v for k, v in updates.items() if k in UPDATABLE_FIELDS}

    if "user_type" in updates or "role" in updates:
        user_type, role = resolve_type_and_role(
            updates.get("user_type", user.user_type),
            updates.get("role", user.role),
        )
        updates["user_type"] = user_type
        updates["role"] = role

    if "email" in updates and updates["email"] is not None:
        email = updates["email"].strip().lower()
        other = find_user_by_email(db, email)
        if other and other.id != user.id:
            raise HTTPException(status_code=409, detail="Email already in use")
        updates["email"] = email

    if updates.get("department_id") is not None:
        get_department_or_400(db, updates["department_id"])

    if "middle_initial" in updates:
        updates["middle_initial"] = clean_middle_initial(updates["middle_initial"])

    for key, value in updates.items():
        if value is None and key not in ("middle_initial", "role", "department_id"):
            continue
        setattr(user, key, value)

    db.flush()
    return user


def soft_delete_user(db: Session, user: User) -> User:
    user.is_active = False
    db.flush()
    logger.info("Deactivated user id=%s", user.id)
    return user


def list_users(
    db: Session,
    *,
    user_type: str | None = None,
    role: str | None = None,
    department_id: int | None = None,
    is_active: bool = True,
    limit: int = 100,
    offset: int = 0,
) -> tuple[list[User], int]:
    query = db.query(User).filter(User.is_active == is_active)

    if user_type:
        query = query.filter(User.user_type == (normalize_user_type(user_type) or user_type))
    if role:
        query = query.filter(User.role == (normalize_role(role) or role))
    if department_id:
        query = query.filter(User.department_id == department_id)

    total = query.count()
    rows = (
        query.order_by(User.last_name.asc(), User.first_name.asc(), User.id.asc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return rows, total


# ---------- role detail tables ----------

def table_exists(db: Session, name: str) -> bool:
    return inspect(db.connection()).has_table(name)


def find_role_table(db: Session, role: str | None) -> str | None:
    """First candidate detail table for ``role`` that exists in the current schema."""
    for table in ROLE_TABLE_CANDIDATES.get((role or "").strip().lower(), []):
        if table in ROLE_DETAIL_MODELS and table_exists(db, table):
            return table
    return None


def _detail_columns(db: Session, table: str) -> list[str]:
    present = {c["name"] for c in inspect(db.connection()).get_columns(table)}
    model = ROLE_DETAIL_MODELS[table]
    return [c.name for c in model.__table__.columns if c.name in present and c.name != "user_id"]


def get_role_details(db: Session, user: User) -> tuple[str | None, dict | None]:
    table = find_role_table(db, user.role)
    if table is None:
        return None, None

    model = ROLE_DETAIL_MODELS[table]
    cols = _detail_columns(db, table)
    row = db.execute(
        select(*[model.__table__.c[c] for c in cols]).where(model.__table__.c.user_id == user.id)
    ).mappings().first()
    return table, (dict(row) if row else None)


def list_users_by_role_joined(db: Session, role: str, department_id: int | None = None) -> list[dict]:
    canonical = normalize_role(role)
    if canonical is None:
        raise HTTPException(status_code=400, detail=f"Unknown role: {role}")

    table = find_role_table(db, role)
    query = db.query(User).filter(User.role == canonical, User.is_active.is_(True))
    if department_id:
        query = query.filter(User.department_id == department_id)
    users = query.order_by(User.last_name.asc(), User.first_name.asc()).all()

    details: dict[int, dict] = {}
    if table is not None and users:
        model = ROLE_DETAIL_MODELS[table]
        cols = _detail_columns(db, table)
        stmt = select(
            model.__table__.c.user_id, *[model.__table__.c[c] for c in cols]
        ).where(model.__table__.c.user_id.in_([u.id for u in users]))
        for row in db.execute(stmt).mappings():
            d = dict(row)
            details[d.pop("user_id")] = d

    return [
        {
            "id": u.id,
            "first_name": u.first_name,
            "last_name": u.last_name,
            "email": u.email,
            "role": u.role,
            "department_id": u.department_id,
            "role_table": table,
            "role_details": details.get(u.id),
        }
        for u in users
    ]


def ensure_student_row(db: Session, user: User) -> None:
    """
    Backfill a minimal ``students`` row for a Student user.
    Skipped when the table is absent; insert failures propagate to the caller's transaction.
    """
    if user.role != "Student" or not table_exists(db, "students"):
        return
    exists = db.query(StudentDetail.id).filter(StudentDetail.user_id == user.id).one_or_none()
    if exists:
        return
    db.add(StudentDetail(user_id=user.id))
    db.flush()
    logger.info("Backfilled students row for user id=%s", user.id)
