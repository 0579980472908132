from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from faculty_eval.core.rbac import require_admin
from faculty_eval.core.security import get_current_user
from faculty_eval.db.session import get_db
from faculty_eval.models.category import Category
from faculty_eval.models.user import User
from faculty_eval.schemas.envelope import Envelope, ok
from faculty_eval.schemas.question import CategoryCreate, CategoryOut

router = APIRouter(prefix="/categories", tags=["categories"])


def category_out(c: Category) -> CategoryOut:
    return CategoryOut(id=c.id, name=c.name, weight=c.weight)


@router.get("", response_model=Envelope[list[CategoryOut]])
def list_categories(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    rows = db.query(Category).order_by(Category.id.asc()).all()
    return ok([category_out(c) for c in rows])


@router.post("", response_model=Envelope[CategoryOut], status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    c = Category(name=payload.name.strip(), weight=payload.weight)
    db.add(c)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Category already exists")

    db.commit()
    db.refresh(c)
    return ok(category_out(c), "Category created successfully")
