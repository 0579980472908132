from datetime import datetime
from pydantic import BaseModel, Field


class ResponseIn(BaseModel):
    question_id: int = Field(gt=0)
    rating: float = Field(strict=True)


class EvaluationSubmit(BaseModel):
    evaluatee_id: int = Field(gt=0)
    course_id: int | None = Field(default=None, gt=0)
    form_id: int = Field(gt=0)
    responses: list[ResponseIn] = Field(min_length=1)
    comments: str | None = Field(default=None, max_length=5000)


class EvaluationSubmitted(BaseModel):
    evaluation_id: int
    overall_score: float | None


class ResponseOut(BaseModel):
    question_id: int
    rating: float


class EvaluationOut(BaseModel):
    id: int
    evaluator_id: int
    evaluatee_id: int
    course_id: int | None
    form_id: int
    overall_score: float | None
    comments: str | None
    date_submitted: datetime


class EvaluationWithResponsesOut(EvaluationOut):
    responses: list[ResponseOut]
