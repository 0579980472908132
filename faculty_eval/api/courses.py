from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from faculty_eval.core.security import get_current_user
from faculty_eval.db.session import get_db
from faculty_eval.models.course import Course
from faculty_eval.models.user import User
from faculty_eval.schemas.course import CourseOut
from faculty_eval.schemas.envelope import Envelope, ok

router = APIRouter(prefix="/courses", tags=["courses"])


def _course_out(c: Course) -> CourseOut:
    return CourseOut(id=c.id, department_id=c.department_id, course_code=c.course_code, course_title=c.course_title)


@router.get("", response_model=Envelope[list[CourseOut]])
def list_courses(
    evaluatee_id: int | None = Query(default=None, description="Courses of this faculty member's department"),
    department_id: int | None = Query(default=None, gt=0),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    if evaluatee_id is not None:
        if evaluatee_id <= 0:
            raise HTTPException(status_code=400, detail="A valid evaluatee_id query parameter is required")
        evaluatee = db.get(User, evaluatee_id)
        if not evaluatee or not evaluatee.department_id:
            return ok([])
        department_id = evaluatee.department_id

    query = db.query(Course)
    if department_id:
        query = query.filter(Course.department_id == department_id)
    rows = query.order_by(Course.course_code.asc(), Course.course_title.asc()).all()
    return ok([_course_out(c) for c in rows])
