from dataclasses import dataclass, field
from datetime import date, datetime

STUDENT = "student"
ADMIN = "admin"
ROLES = (STUDENT, ADMIN)


@dataclass(frozen=True)
class User:
    id: int | None
    username: str
    email: str
    role: str = STUDENT
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    birthday: date | None = None
    program: str | None = None
    user_code: str = ""
    created_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN


@dataclass(frozen=True)
class Principal:
    """Caller identity resolved from the bearer token of one request."""
    user_id: int
    username: str
    role: str = STUDENT

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN

    def can_act_for(self, student_id: int) -> bool:
        return self.is_admin or self.user_id == student_id


@dataclass(frozen=True)
class CourseSnapshot:
    """Course fields copied into an enrollment entry at registration time."""
    course_id: int
    name: str
    code: str
    term: str
    start_date: date | None = None
    end_date: date | None = None

    @property
    def key(self) -> tuple[int, str]:
        return (self.course_id, self.term)


@dataclass(frozen=True)
class EnrollmentEntry:
    id: int
    course_id: int
    name: str
    code: str
    term: str
    start_date: date | None = None
    end_date: date | None = None


@dataclass(frozen=True)
class RegistrationResult:
    added: list[EnrollmentEntry] = field(default_factory=list)
    courses: list[EnrollmentEntry] = field(default_factory=list)
