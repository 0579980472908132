from pydantic import BaseModel


class OverallAverageOut(BaseModel):
    evaluatee_id: int
    first_name: str
    last_name: str
    average_score: float | None
    evaluations_count: int


class CategoryAverageOut(BaseModel):
    category_id: int
    name: str
    average_rating: float | None
    responses_count: int


class TopFacultyOut(BaseModel):
    user_id: int
    first_name: str
    last_name: str
    department_id: int | None
    average_score: float | None
    evaluations_count: int
