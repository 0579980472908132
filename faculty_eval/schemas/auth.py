from pydantic import BaseModel, Field

from faculty_eval.schemas.user import EMAIL_PATTERN, PersonName, UserOut


class SignupRequest(BaseModel):
    first_name: PersonName
    last_name: PersonName
    middle_initial: str | None = None
    email: str = Field(pattern=EMAIL_PATTERN, max_length=320)
    password: str = Field(min_length=8, max_length=128)
    user_type: str = "User"
    role: str | None = None
    department_id: int | None = Field(default=None, gt=0)
    department_name: str | None = None


class LoginRequest(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN, max_length=320)
    password: str = Field(min_length=1)


class AuthOut(BaseModel):
    token: str
    user: UserOut


class ProfileUpdate(BaseModel):
    first_name: PersonName | None = None
    last_name: PersonName | None = None
    middle_initial: str | None = None
    department_id: int | None = Field(default=None, gt=0)
    department_name: str | None = None


class PasswordChange(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8, max_length=128)
