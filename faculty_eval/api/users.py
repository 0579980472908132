from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from faculty_eval.core.rbac import require_admin
from faculty_eval.core.security import get_current_user
from faculty_eval.db.session import get_db
from faculty_eval.models.user import User
from faculty_eval.schemas.envelope import Envelope, ok
from faculty_eval.schemas.pagination import PaginatedResponse, PaginationMeta
from faculty_eval.schemas.user import RoleJoinedUserOut, UserCreate, UserDetailOut, UserOut, UserUpdate
from faculty_eval.services import user_service

router = APIRouter(prefix="/users", tags=["users"])


def user_to_out(u: User) -> UserOut:
    return UserOut(
        id=u.id,
        first_name=u.first_name,
        last_name=u.last_name,
        middle_initial=u.middle_initial,
        email=u.email,
        user_type=u.user_type,
        role=u.role,
        department_id=u.department_id,
        is_active=u.is_active,
    )


def user_to_detail(db: Session, u: User) -> UserDetailOut:
    _, details = user_service.get_role_details(db, u)
    return UserDetailOut(
        **user_to_out(u).model_dump(),
        department_name=u.department.name if u.department else None,
        created_at=u.created_at,
        updated_at=u.updated_at,
        role_details=details,
    )


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("", response_model=Envelope[PaginatedResponse[UserOut]])
def list_users(
    user_type: str | None = Query(default=None, description="Admin or User"),
    role: str | None = Query(default=None, description="Faculty, Student or Supervisor"),
    department_id: int | None = Query(default=None, gt=0),
    is_active: bool = Query(default=True),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    rows, total = user_service.list_users(
        db,
        user_type=user_type,
        role=role,
        department_id=department_id,
        is_active=is_active,
        limit=limit,
        offset=offset,
    )
    items = [user_to_out(u) for u in rows]
    return ok(PaginatedResponse(
        items=items,
        pagination=PaginationMeta(
            total=total,
            limit=limit,
            offset=offset,
            has_more=(offset + len(items) < total),
        ),
    ))


def _list_role(db: Session, role: str, department_id: int | None) -> list[UserOut]:
    rows, _ = user_service.list_users(db, user_type="User", role=role, department_id=department_id, limit=500)
    return [user_to_out(u) for u in rows]


@router.get("/faculty", response_model=Envelope[list[UserOut]])
def list_faculty(
    department_id: int | None = Query(default=None, gt=0),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return ok(_list_role(db, "Faculty", department_id))


@router.get("/students", response_model=Envelope[list[UserOut]])
def list_students(
    department_id: int | None = Query(default=None, gt=0),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return ok(_list_role(db, "Student", department_id))


@router.get("/supervisors", response_model=Envelope[list[UserOut]])
def list_supervisors(
    department_id: int | None = Query(default=None, gt=0),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return ok(_list_role(db, "Supervisor", department_id))


@router.get("/roles/{role}", response_model=Envelope[list[RoleJoinedUserOut]])
def list_users_by_role_joined(
    role: str,
    department_id: int | None = Query(default=None, gt=0),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    """
    Users of a role joined with that role's detail table when it exists
    in the current schema; plain users otherwise.
    """
    return ok(user_service.list_users_by_role_joined(db, role, department_id))


@router.get("/{user_id}", response_model=Envelope[UserDetailOut])
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return ok(user_to_detail(db, _get_user_or_404(db, user_id)))


@router.post("", response_model=Envelope[UserOut], status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    user = user_service.create_user(db, **payload.model_dump())
    db.commit()
    db.refresh(user)
    return ok(user_to_out(user), "User created successfully")


@router.patch("/{user_id}", response_model=Envelope[UserOut])
def update_user(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    user = _get_user_or_404(db, user_id)
    user_service.update_user(db, user, payload.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(user)
    return ok(user_to_out(user), "User updated successfully")


@router.delete("/{user_id}", response_model=Envelope[UserOut])
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    user = _get_user_or_404(db, user_id)
    if user.id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot deactivate your own account")
    user_service.soft_delete_user(db, user)
    db.commit()
    db.refresh(user)
    return ok(user_to_out(user), "User deactivated successfully")
