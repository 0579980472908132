from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from faculty_eval.core.security import get_current_user
from faculty_eval.db.session import get_db
from faculty_eval.models.user import User
from faculty_eval.schemas.envelope import Envelope, ok
from faculty_eval.schemas.report import CategoryAverageOut, OverallAverageOut, TopFacultyOut
from faculty_eval.services import analytics_service, report_service

router = APIRouter(prefix="/reports", tags=["reports"])


def _parse_course_ids(raw: str | None) -> list[int] | None:
    if not raw:
        return None
    ids = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit() or int(part) <= 0:
            raise HTTPException(
                status_code=400,
                detail={
                    "message": "Validation failed",
                    "errors": [{"field": "course_ids", "code": "invalid", "message": f"Invalid course id: {part}"}],
                },
            )
        ids.append(int(part))
    return ids or None


@router.get("/overall", response_model=Envelope[list[OverallAverageOut]])
def overall(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return ok([OverallAverageOut(**r) for r in report_service.overall_averages(db)])


@router.get("/top-faculty", response_model=Envelope[list[TopFacultyOut]])
def top_faculty(
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return ok([TopFacultyOut(**r) for r in report_service.top_faculty(db, limit=limit)])


@router.get("/professors/{professor_id}/analytics", response_model=Envelope[dict])
def professor_analytics(
    professor_id: int,
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    course_ids: str | None = Query(default=None, description="Comma-separated course ids"),
    min_responses: int = Query(default=5, ge=1),
    evaluator_role: str | None = Query(default=None, description="Student, Supervisor or Faculty"),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must be <= end_date")

    result = analytics_service.professor_analytics(
        db,
        professor_id,
        start_date=start_date,
        end_date=end_date,
        course_ids=_parse_course_ids(course_ids),
        min_responses=min_responses,
        evaluator_role=evaluator_role,
    )
    return ok(result)


@router.get("/{evaluatee_id}/categories", response_model=Envelope[list[CategoryAverageOut]])
def categories(
    evaluatee_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    if evaluatee_id <= 0:
        raise HTTPException(status_code=400, detail="Invalid evaluatee id")
    return ok([CategoryAverageOut(**r) for r in report_service.category_averages(db, evaluatee_id)])
