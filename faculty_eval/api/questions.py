from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from faculty_eval.api.categories import category_out
from faculty_eval.core.rbac import require_admin
from faculty_eval.core.security import get_current_user
from faculty_eval.db.session import get_db
from faculty_eval.models.category import Category
from faculty_eval.models.question import Question
from faculty_eval.models.user import User
from faculty_eval.schemas.envelope import Envelope, ok
from faculty_eval.schemas.question import CategoryWithQuestionsOut, QuestionCreate, QuestionOut

router = APIRouter(prefix="/questions", tags=["questions"])


def _question_out(q: Question) -> QuestionOut:
    return QuestionOut(id=q.id, text=q.text, category_id=q.category_id, weight=q.weight)


@router.get("", response_model=Envelope[list[QuestionOut]])
def list_questions(
    category_id: int | None = Query(default=None, gt=0),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    query = db.query(Question)
    if category_id is not None:
        query = query.filter(Question.category_id == category_id)
    rows = query.order_by(Question.category_id.asc(), Question.id.asc()).all()
    return ok([_question_out(q) for q in rows])


@router.get("/by-category", response_model=Envelope[list[CategoryWithQuestionsOut]])
def questions_by_category(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    categories = (
        db.query(Category)
        .options(selectinload(Category.questions))
        .order_by(Category.id.asc())
        .all()
    )
    out = [
        CategoryWithQuestionsOut(
            **category_out(c).model_dump(),
            questions=[_question_out(q) for q in sorted(c.questions, key=lambda q: q.id)],
        )
        for c in categories
    ]
    return ok(out)


@router.post("", response_model=Envelope[QuestionOut], status_code=status.HTTP_201_CREATED)
def create_question(
    payload: QuestionCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    if not db.get(Category, payload.category_id):
        raise HTTPException(status_code=400, detail="Category not found")

    q = Question(text=payload.text.strip(), category_id=payload.category_id, weight=payload.weight)
    db.add(q)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Duplicate question for this category")

    db.commit()
    db.refresh(q)
    return ok(_question_out(q), "Question created successfully")
