from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from faculty_eval.core.rbac import require_admin
from faculty_eval.core.security import get_current_user
from faculty_eval.db.session import get_db
from faculty_eval.models.evaluation_form import EvaluationForm
from faculty_eval.models.user import User
from faculty_eval.schemas.envelope import Envelope, ok
from faculty_eval.schemas.form import EvaluationFormCreate, EvaluationFormOut, EvaluationFormUpdate

router = APIRouter(prefix="/forms", tags=["forms"])


def _form_out(form: EvaluationForm) -> EvaluationFormOut:
    return EvaluationFormOut(
        id=form.id,
        title=form.title,
        school_year=form.school_year,
        semester=form.semester,
        start_date=form.start_date,
        end_date=form.end_date,
        created_by=form.created_by,
        is_active=form.is_active,
        created_at=form.created_at,
    )


def _get_form_or_404(db: Session, form_id: int) -> EvaluationForm:
    form = db.get(EvaluationForm, form_id)
    if not form:
        raise HTTPException(status_code=404, detail="Evaluation form not found")
    return form


@router.get("", response_model=Envelope[list[EvaluationFormOut]])
def list_forms(
    active: bool | None = Query(default=None, description="Only forms with this active flag"),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    query = db.query(EvaluationForm)
    if active is not None:
        query = query.filter(EvaluationForm.is_active.is_(active))
    rows = query.order_by(EvaluationForm.created_at.desc(), EvaluationForm.id.desc()).all()
    return ok([_form_out(f) for f in rows])


@router.get("/{form_id}", response_model=Envelope[EvaluationFormOut])
def get_form(
    form_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return ok(_form_out(_get_form_or_404(db, form_id)))


@router.post("", response_model=Envelope[EvaluationFormOut], status_code=status.HTTP_201_CREATED)
def create_form(
    payload: EvaluationFormCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    form = EvaluationForm(**payload.model_dump(), created_by=current_user.id)
    db.add(form)
    db.commit()
    db.refresh(form)
    return ok(_form_out(form), "Evaluation form created successfully")


@router.patch("/{form_id}", response_model=Envelope[EvaluationFormOut])
def update_form(
    form_id: int,
    payload: EvaluationFormUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    form = _get_form_or_404(db, form_id)
    updates = payload.model_dump(exclude_unset=True)

    # a partial update can still invert the stored window
    start = updates.get("start_date", form.start_date)
    end = updates.get("end_date", form.end_date)
    if start and end and start > end:
        raise HTTPException(
            status_code=400,
            detail={
                "message": "Validation failed",
                "errors": [{"field": "start_date", "code": "window", "message": "start_date must be <= end_date"}],
            },
        )

    for key, value in updates.items():
        if value is None and key in ("title", "school_year", "is_active"):
            continue
        setattr(form, key, value)

    db.commit()
    db.refresh(form)
    return ok(_form_out(form), "Evaluation form updated successfully")


@router.delete("/{form_id}", response_model=Envelope[EvaluationFormOut])
def delete_form(
    form_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    form = _get_form_or_404(db, form_id)
    form.is_active = False
    db.commit()
    db.refresh(form)
    return ok(_form_out(form), "Evaluation form deactivated successfully")
