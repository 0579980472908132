from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=100)
    weight: float | None = Field(default=None, ge=0)


class CategoryOut(BaseModel):
    id: int
    name: str
    weight: float | None


class QuestionCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    text: str = Field(min_length=1, max_length=300)
    category_id: int = Field(gt=0)
    weight: float | None = Field(default=None, ge=0)


class QuestionOut(BaseModel):
    id: int
    text: str
    category_id: int
    weight: float | None


class CategoryWithQuestionsOut(CategoryOut):
    questions: list[QuestionOut]
