from pydantic import BaseModel


class CourseOut(BaseModel):
    id: int
    department_id: int
    course_code: str
    course_title: str
