from sqlalchemy import func
from sqlalchemy.orm import Session

from faculty_eval.models.category import Category
from faculty_eval.models.evaluation import Evaluation
from faculty_eval.models.evaluation_response import EvaluationResponse
from faculty_eval.models.question import Question
from faculty_eval.models.user import User


def _num(value) -> float | None:
    return float(value) if value is not None else None


def overall_averages(db: Session) -> list[dict]:
    """Average overall_score per evaluatee, highest first."""
    avg = func.avg(Evaluation.overall_score)
    rows = (
        db.query(
            Evaluation.evaluatee_id,
            User.first_name,
            User.last_name,
            avg.label("average_score"),
            func.count(Evaluation.id).label("evaluations_count"),
        )
        .join(User, User.id == Evaluation.evaluatee_id)
        .group_by(Evaluation.evaluatee_id, User.first_name, User.last_name)
        .order_by(avg.desc().nulls_last(), Evaluation.evaluatee_id.asc())
        .all()
    )
    return [
        {
            "evaluatee_id": r.evaluatee_id,
            "first_name": r.first_name,
            "last_name": r.last_name,
            "average_score": _num(r.average_score),
            "evaluations_count": int(r.evaluations_count),
        }
        for r in rows
    ]


def category_averages(db: Session, evaluatee_id: int) -> list[dict]:
    rows = (
        db.query(
            Category.id.label("category_id"),
            Category.name,
            func.avg(EvaluationResponse.rating).label("average_rating"),
            func.count(EvaluationResponse.id).label("responses_count"),
        )
        .select_from(EvaluationResponse)
        .join(Evaluation, Evaluation.id == EvaluationResponse.evaluation_id)
        .join(Question, Question.id == EvaluationResponse.question_id)
        .join(Category, Category.id == Question.category_id)
        .filter(Evaluation.evaluatee_id == evaluatee_id)
        .group_by(Category.id, Category.name)
        .order_by(Category.id.asc())
        .all()
    )
    return [
        {
            "category_id": r.category_id,
            "name": r.name,
            "average_rating": _num(r.average_rating),
            "responses_count": int(r.responses_count),
        }
        for r in rows
    ]


def top_faculty(db: Session, limit: int = 10) -> list[dict]:
    """Active faculty ranked by average overall_score (only those with evaluations)."""
    avg = func.avg(Evaluation.overall_score)
    rows = (
        db.query(
            User.id.label("user_id"),
            User.first_name,
            User.last_name,
            User.department_id,
            avg.label("average_score"),
            func.count(Evaluation.id).label("evaluations_count"),
        )
        .join(Evaluation, Evaluation.evaluatee_id == User.id)
        .filter(User.role == "Faculty", User.is_active.is_(True))
        .filter(Evaluation.overall_score.is_not(None))
        .group_by(User.id, User.first_name, User.last_name, User.department_id)
        .order_by(avg.desc(), User.last_name.asc(), User.first_name.asc())
        .limit(limit)
        .all()
    )
    return [
        {
            "user_id": r.user_id,
            "first_name": r.first_name,
            "last_name": r.last_name,
            "department_id": r.department_id,
            "average_score": _num(r.average_score),
            "evaluations_count": int(r.evaluations_count),
        }
        for r in rows
    ]
