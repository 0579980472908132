import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from faculty_eval.api.users import user_to_detail, user_to_out
from faculty_eval.core.security import create_access_token, get_current_user, hash_password, verify_password
from faculty_eval.db.session import get_db
from faculty_eval.models.user import User
from faculty_eval.schemas.auth import AuthOut, LoginRequest, PasswordChange, ProfileUpdate, SignupRequest
from faculty_eval.schemas.envelope import Envelope, ok
from faculty_eval.schemas.user import UserDetailOut, UserOut
from faculty_eval.services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _resolve_department(db: Session, department_id: int | None, department_name: str | None) -> int | None:
    if department_id is not None:
        return user_service.get_department_or_400(db, department_id).id
    if department_name:
        dep = user_service.find_department_by_name(db, department_name)
        if not dep:
            raise HTTPException(status_code=400, detail="Invalid department name")
        return dep.id
    return None


@router.post("/signup", response_model=Envelope[AuthOut], status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    user_type, role = user_service.resolve_type_and_role(payload.user_type, payload.role)

    if user_type == "User" and payload.department_id is None and not payload.department_name:
        raise HTTPException(status_code=400, detail="Department is required for the selected role")

    department_id = _resolve_department(db, payload.department_id, payload.department_name)

    user = user_service.create_user(
        db,
        first_name=payload.first_name,
        last_name=payload.last_name,
        middle_initial=payload.middle_initial,
        email=payload.email,
        password=payload.password,
        user_type=user_type,
        role=role,
        department_id=department_id,
    )
    db.commit()
    db.refresh(user)

    return ok(
        AuthOut(token=create_access_token(user), user=user_to_out(user)),
        "User registered successfully",
    )


@router.post("/login", response_model=Envelope[AuthOut])
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = user_service.find_user_by_email(db, payload.email)
    if not user or not verify_password(user.password_hash, payload.password):
        logger.info("Failed login for %s", payload.email)
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if not user.is_active:
        raise HTTPException(
            status_code=403,
            detail="Account is deactivated. Please contact an administrator.",
        )
    return ok(AuthOut(token=create_access_token(user), user=user_to_out(user)), "Login successful")


@router.get("/me", response_model=Envelope[UserDetailOut])
def me(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok(user_to_detail(db, current_user))


@router.patch("/me", response_model=Envelope[UserOut])
def update_profile(
    payload: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    updates = payload.model_dump(exclude_unset=True, exclude={"department_id", "department_name"})
    if payload.department_id is not None or payload.department_name:
        updates["department_id"] = _resolve_department(db, payload.department_id, payload.department_name)

    if not updates:
        raise HTTPException(status_code=400, detail="No valid fields to update")

    user_service.update_user(db, current_user, updates)
    db.commit()
    db.refresh(current_user)
    return ok(user_to_out(current_user), "Profile updated successfully")


@router.post("/change-password", response_model=Envelope[None])
def change_password(
    payload: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not verify_password(current_user.password_hash, payload.current_password):
        raise HTTPException(status_code=401, detail="Current password is incorrect")

    current_user.password_hash = hash_password(payload.new_password)
    db.commit()
    return ok(message="Password updated successfully")
