import logging
from datetime import date, datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from faculty_eval.core.access import assert_can_evaluate
from faculty_eval.core.config import settings
from faculty_eval.core.scoring import ScoredRating, overall_score
from faculty_eval.models.course import Course
from faculty_eval.models.evaluation import Evaluation
from faculty_eval.models.evaluation_form import EvaluationForm
from faculty_eval.models.evaluation_response import EvaluationResponse
from faculty_eval.models.question import Question
from faculty_eval.models.user import User
from faculty_eval.schemas.evaluation import EvaluationSubmit
from faculty_eval.services.user_service import ensure_student_row

logger = logging.getLogger(__name__)


def _validate_responses(db: Session, payload: EvaluationSubmit) -> dict[int, Question]:
    errors: list[dict] = []
    seen: set[int] = set()

    for idx, r in enumerate(payload.responses):
        field = f"responses.{idx}"
        if r.question_id in seen:
            errors.append({"field": f"{field}.question_id", "code": "duplicate", "message": "Only one response per question"})
        seen.add(r.question_id)
        if not settings.RATING_MIN <= r.rating <= settings.RATING_MAX:
            errors.append({
                "field": f"{field}.rating",
                "code": "range",
                "message": f"Rating must be between {settings.RATING_MIN:g} and {settings.RATING_MAX:g}",
            })

    questions = {q.id: q for q in db.query(Question).filter(Question.id.in_(list(seen))).all()} if seen else {}
    for idx, r in enumerate(payload.responses):
        if r.question_id not in questions:
            errors.append({"field": f"responses.{idx}.question_id", "code": "not_found", "message": "Question not found"})

    if errors:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Evaluation validation failed", "errors": errors},
        )
    return questions


def _load_open_form(db: Session, form_id: int, today) -> EvaluationForm:
    form = db.get(EvaluationForm, form_id)
    if not form:
        raise HTTPException(status_code=400, detail="The specified evaluation form does not exist.")
    if not form.accepts_submissions_on(today):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="The specified evaluation form is not active or is outside its date window.",
        )
    return form


def _load_evaluatee(db: Session, evaluatee_id: int) -> User:
    evaluatee = db.get(User, evaluatee_id)
    if not evaluatee or not evaluatee.is_active:
        raise HTTPException(status_code=400, detail="Evaluatee not found or inactive")
    if evaluatee.role != "Faculty":
        raise HTTPException(status_code=400, detail="Evaluatee must be a faculty member")
    return evaluatee


def submit_evaluation(db: Session, evaluator: User, payload: EvaluationSubmit) -> tuple[int, float | None]:
    """
    Persist one evaluation and its responses atomically and compute overall_score.
    Returns (evaluation_id, overall_score).
    """
    submitted_at = datetime.now(timezone.utc)

    questions = _validate_responses(db, payload)
    # form windows are calendar dates in server local time
    _load_open_form(db, payload.form_id, date.today())
    evaluatee = _load_evaluatee(db, payload.evaluatee_id)
    assert_can_evaluate(evaluator, evaluatee)

    if payload.course_id is not None and not db.get(Course, payload.course_id):
        raise HTTPException(status_code=400, detail="Course not found")

    comments = payload.comments.strip() if payload.comments and payload.comments.strip() else None

    try:
        ensure_student_row(db, evaluator)

        evaluation = Evaluation(
            evaluator_id=evaluator.id,
            evaluatee_id=evaluatee.id,
            course_id=payload.course_id,
            form_id=payload.form_id,
            comments=comments,
            date_submitted=submitted_at,
        )
        db.add(evaluation)
        db.flush()

        db.add_all(
            EvaluationResponse(evaluation_id=evaluation.id, question_id=r.question_id, rating=r.rating)
            for r in payload.responses
        )
        db.flush()

        evaluation.overall_score = overall_score([
            ScoredRating(
                rating=r.rating,
                category_id=questions[r.question_id].category_id,
                category_weight=questions[r.question_id].category.weight,
                question_weight=questions[r.question_id].weight,
            )
            for r in payload.responses
        ])
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Evaluation submission failed evaluator=%s evaluatee=%s", evaluator.id, payload.evaluatee_id)
        raise

    logger.info(
        "Evaluation %s submitted evaluator=%s evaluatee=%s score=%s",
        evaluation.id, evaluator.id, evaluatee.id, evaluation.overall_score,
    )
    return evaluation.id, evaluation.overall_score


def list_submitted_by(db: Session, user: User, limit: int = 100, offset: int = 0) -> list[Evaluation]:
    return (
        db.query(Evaluation)
        .filter(Evaluation.evaluator_id == user.id)
        .order_by(Evaluation.date_submitted.desc(), Evaluation.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
