from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

PersonName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class UserOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    middle_initial: str | None
    email: str
    user_type: str
    role: str | None
    department_id: int | None
    is_active: bool


class UserDetailOut(UserOut):
    department_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    # role-specific columns (faculty.position, students.year_level, ...) when the table exists
    role_details: dict | None = None


class UserCreate(BaseModel):
    first_name: PersonName
    last_name: PersonName
    middle_initial: str | None = Field(default=None, max_length=5)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=320)
    password: str = Field(min_length=8, max_length=128)
    user_type: str = "User"
    role: str | None = None
    department_id: int | None = Field(default=None, gt=0)


class UserUpdate(BaseModel):
    first_name: PersonName | None = None
    last_name: PersonName | None = None
    middle_initial: str | None = Field(default=None, max_length=5)
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN, max_length=320)
    user_type: str | None = None
    role: str | None = None
    department_id: int | None = Field(default=None, gt=0)
    is_active: bool | None = None


class RoleJoinedUserOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    role: str | None
    department_id: int | None
    role_table: str | None
    role_details: dict | None = None
