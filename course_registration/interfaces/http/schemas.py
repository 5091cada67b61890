from datetime import date, datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


class MessageResp(CamelModel):
    message: str


# --- users

class SignupReq(CamelModel):
    # credentials are taken verbatim
    model_config = ConfigDict(str_strip_whitespace=False)

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)
    birthday: date
    program: str | None = None
    username: str = Field(min_length=3, max_length=64)
    password: str = Field(min_length=6)
    role: Literal["student", "admin"] = "student"


class LoginReq(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=False)

    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserResp(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: EmailStr
    phone: str
    birthday: date | None = None
    program: str | None = None
    username: str
    role: str
    user_code: str = Field(alias="userID")
    created_at: datetime | None = None


class SignupResp(CamelModel):
    message: str
    user: UserResp


class LoginResp(CamelModel):
    message: str
    user: UserResp
    access_token: str
    token_type: str = "bearer"


# --- courses

class CourseCreate(CamelModel):
    name: str = Field(min_length=1)
    code: str = Field(min_length=1)
    term: str = Field(min_length=1)
    program: str = Field(min_length=1)
    start_date: date
    end_date: date


class CourseUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    code: str | None = Field(default=None, min_length=1)
    term: str | None = Field(default=None, min_length=1)
    program: str | None = Field(default=None, min_length=1)
    start_date: date | None = None
    end_date: date | None = None


class CourseOut(CamelModel):
    id: int
    name: str
    code: str
    term: str
    program: str
    start_date: date
    end_date: date


class CourseUpdatedResp(CamelModel):
    message: str
    updated_course: CourseOut


# --- enrollment

class SelectedCourse(CamelModel):
    id: int = Field(validation_alias=AliasChoices("_id", "id", "courseId"))
    name: str = Field(min_length=1)
    code: str = Field(min_length=1)
    term: str = Field(min_length=1)
    start_date: date | None = None
    end_date: date | None = None


class RegisterCoursesReq(CamelModel):
    student_id: int
    selected_courses: list[SelectedCourse]

    @field_validator("selected_courses", mode="before")
    @classmethod
    def wrap_single_course(cls, v):
        # a lone course object is accepted as a one-element selection
        if isinstance(v, dict):
            return [v]
        return v


class EnrollmentEntryOut(CamelModel):
    id: int
    course_id: int
    name: str
    code: str
    term: str
    start_date: date | None = None
    end_date: date | None = None


class RegistrationResp(CamelModel):
    message: str
    added: list[EnrollmentEntryOut]
    courses: list[EnrollmentEntryOut]


# --- messages

class MessageCreate(CamelModel):
    sender: str = Field(min_length=1)
    student_code: str = Field(alias="studentID", min_length=1)
    message: str = Field(min_length=1)


class MessageOut(CamelModel):
    id: int
    sender: str
    student_code: str = Field(alias="studentID")
    message: str
    timestamp: datetime
