from datetime import date, datetime
from pydantic import BaseModel, Field, model_validator

SCHOOL_YEAR_PATTERN = r"^\d{4}-\d{4}$"


def _check_window(start_date: date | None, end_date: date | None):
    if start_date and end_date and start_date > end_date:
        raise ValueError("start_date must be <= end_date")


class EvaluationFormCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    school_year: str = Field(pattern=SCHOOL_YEAR_PATTERN)
    semester: str | None = Field(default=None, max_length=50)
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool = True

    @model_validator(mode="after")
    def _window(self):
        _check_window(self.start_date, self.end_date)
        return self


class EvaluationFormUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    school_year: str | None = Field(default=None, pattern=SCHOOL_YEAR_PATTERN)
    semester: str | None = Field(default=None, max_length=50)
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool | None = None

    @model_validator(mode="after")
    def _window(self):
        _check_window(self.start_date, self.end_date)
        return self


class EvaluationFormOut(BaseModel):
    id: int
    title: str
    school_year: str
    semester: str | None
    start_date: date | None
    end_date: date | None
    created_by: int | None
    is_active: bool
    created_at: datetime | None
