from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, selectinload

from faculty_eval.core.access import assert_can_view_evaluation
from faculty_eval.core.security import get_current_user
from faculty_eval.db.session import get_db
from faculty_eval.models.evaluation import Evaluation
from faculty_eval.models.user import User
from faculty_eval.schemas.envelope import Envelope, ok
from faculty_eval.schemas.evaluation import (
    EvaluationOut,
    EvaluationSubmit,
    EvaluationSubmitted,
    EvaluationWithResponsesOut,
    ResponseOut,
)
from faculty_eval.services.evaluation_service import list_submitted_by, submit_evaluation

router = APIRouter(prefix="/evaluations", tags=["evaluations"])


def _evaluation_out(e: Evaluation) -> EvaluationOut:
    return EvaluationOut(
        id=e.id,
        evaluator_id=e.evaluator_id,
        evaluatee_id=e.evaluatee_id,
        course_id=e.course_id,
        form_id=e.form_id,
        overall_score=e.overall_score,
        comments=e.comments,
        date_submitted=e.date_submitted,
    )


@router.post("", response_model=Envelope[EvaluationSubmitted], status_code=status.HTTP_201_CREATED)
def create_evaluation(
    payload: EvaluationSubmit,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    evaluation_id, score = submit_evaluation(db, current_user, payload)
    return ok(
        EvaluationSubmitted(evaluation_id=evaluation_id, overall_score=score),
        "Evaluation submitted successfully.",
    )


@router.get("/mine", response_model=Envelope[list[EvaluationOut]])
def my_evaluations(
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rows = list_submitted_by(db, current_user, limit=limit, offset=offset)
    return ok([_evaluation_out(e) for e in rows])


@router.get("/{evaluation_id}", response_model=Envelope[EvaluationWithResponsesOut])
def get_evaluation(
    evaluation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    evaluation = (
        db.query(Evaluation)
        .options(selectinload(Evaluation.responses))
        .filter(Evaluation.id == evaluation_id)
        .one_or_none()
    )
    if not evaluation:
        raise HTTPException(status_code=404, detail="Evaluation not found")

    assert_can_view_evaluation(current_user, evaluation)

    return ok(
        EvaluationWithResponsesOut(
            **_evaluation_out(evaluation).model_dump(),
            responses=[
                ResponseOut(question_id=r.question_id, rating=r.rating)
                for r in sorted(evaluation.responses, key=lambda r: r.question_id)
            ],
        )
    )
