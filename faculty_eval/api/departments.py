from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from faculty_eval.db.session import get_db
from faculty_eval.models.department import Department
from faculty_eval.schemas.department import DepartmentOut
from faculty_eval.schemas.envelope import Envelope, ok
from faculty_eval.services.user_service import find_department_by_name

router = APIRouter(prefix="/departments", tags=["departments"])


def _department_out(d: Department) -> DepartmentOut:
    return DepartmentOut(id=d.id, name=d.name)


# public: the signup form needs the department list before a token exists
@router.get("", response_model=Envelope[list[DepartmentOut]])
def list_departments(db: Session = Depends(get_db)):
    rows = db.query(Department).order_by(Department.name.asc()).all()
    return ok([_department_out(d) for d in rows])


@router.get("/search", response_model=Envelope[DepartmentOut])
def find_department(
    name: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    if not name or not name.strip():
        raise HTTPException(status_code=400, detail="Department name is required")
    dep = find_department_by_name(db, name)
    if not dep:
        raise HTTPException(status_code=404, detail="Department not found")
    return ok(_department_out(dep))
