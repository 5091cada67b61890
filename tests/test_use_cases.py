import re
from datetime import date

import pytest

from course_registration.application.dto import SignupInput
from course_registration.application.use_cases.authenticate_user import AuthenticateUser
from course_registration.application.use_cases.enrollment import DropCourse, ListRegisteredCourses, RegisterCourses
from course_registration.application.use_cases.register_user import RegisterUser, generate_user_code
from course_registration.domain.entities import CourseSnapshot
from course_registration.domain.errors import (
    AuthenticationFailed,
    Conflict,
    InternalError,
    NotFound,
    ValidationFailed,
)
from course_registration.infrastructure.repositories import EnrollmentRepository, UserRepository


class FakeHasher:
    def hash(self, plain): return f"hashed:{plain}"
    def verify(self, plain, hashed): return hashed == f"hashed:{plain}"
    def dummy_verify(self): self.dummy_calls = getattr(self, "dummy_calls", 0) + 1


def scripted_codes(*codes):
    """Code generator returning the given codes in order"""
    it = iter(codes)
    return lambda role, digits: next(it)


def student(username, email=None):
    return SignupInput(
        first_name="Test",
        last_name=username.title(),
        email=email or f"{username}@example.com",
        phone="403-555-0100",
        birthday=date(2000, 1, 1),
        username=username,
        password="secret123",
        program="Diploma",
    )


CS101_FALL = CourseSnapshot(course_id=1, name="Intro to Programming", code="CS101", term="Fall",
                            start_date=date(2024, 9, 1), end_date=date(2024, 12, 15))
CS101_WINTER = CourseSnapshot(course_id=1, name="Intro to Programming", code="CS101", term="Winter")
CS102_FALL = CourseSnapshot(course_id=2, name="Data Structures", code="CS102", term="Fall")


@pytest.mark.parametrize("role,prefix", [("student", "SD"), ("admin", "AD")])
def test_generate_user_code_prefix(role, prefix):
    code = generate_user_code(role)
    assert re.fullmatch(prefix + r"\d{1,4}", code)


def test_colliding_user_code_is_retried(db_session):
    uc = RegisterUser(UserRepository(db_session), FakeHasher(),
                      code_generator=scripted_codes("SD1234", "SD1234", "SD5678"))
    first = uc.execute(student("alice"))
    second = uc.execute(student("bob"))
    assert first.user_code == "SD1234"
    assert second.user_code == "SD5678"


def test_user_code_attempts_are_bounded(db_session):
    uc = RegisterUser(UserRepository(db_session), FakeHasher(),
                      code_generator=lambda role, digits: "SD1", max_attempts=3)
    uc.execute(student("alice"))
    with pytest.raises(InternalError):
        uc.execute(student("bob"))
    assert UserRepository(db_session).get_by_username("bob") is None


def test_register_user_rejects_unknown_role(db_session):
    data = student("alice")
    data.role = "teacher"
    with pytest.raises(ValidationFailed):
        RegisterUser(UserRepository(db_session), FakeHasher()).execute(data)


def test_register_user_stores_hash(db_session):
    RegisterUser(UserRepository(db_session), FakeHasher()).execute(student("alice"))
    _, password_hash = UserRepository(db_session).get_with_password_hash("alice")
    assert password_hash == "hashed:secret123"


def test_authenticate_unknown_user_still_verifies(db_session):
    hasher = FakeHasher()
    with pytest.raises(AuthenticationFailed):
        AuthenticateUser(UserRepository(db_session), hasher).execute("nobody", "x")
    assert hasher.dummy_calls == 1


def test_authenticate_success(db_session):
    RegisterUser(UserRepository(db_session), FakeHasher()).execute(student("alice"))
    user = AuthenticateUser(UserRepository(db_session), FakeHasher()).execute("alice", "secret123")
    assert user.username == "alice"


def test_register_courses_twice_conflicts(db_session):
    repo = EnrollmentRepository(db_session)
    RegisterCourses(repo).execute(1, [CS101_FALL])
    with pytest.raises(Conflict):
        RegisterCourses(repo).execute(1, [CS101_FALL])
    assert [(e.course_id, e.term) for e in repo.list_entries(1)] == [(1, "Fall")]


def test_register_courses_keeps_insertion_order(db_session):
    repo = EnrollmentRepository(db_session)
    RegisterCourses(repo).execute(1, [CS102_FALL])
    result = RegisterCourses(repo).execute(1, [CS101_WINTER, CS101_FALL])
    assert [(e.code, e.term) for e in result.courses] == [
        ("CS102", "Fall"), ("CS101", "Winter"), ("CS101", "Fall"),
    ]
    assert len(result.added) == 2


def test_register_courses_requires_input(db_session):
    with pytest.raises(ValidationFailed):
        RegisterCourses(EnrollmentRepository(db_session)).execute(1, [])


def test_enrollments_are_per_student(db_session):
    repo = EnrollmentRepository(db_session)
    RegisterCourses(repo).execute(1, [CS101_FALL])
    RegisterCourses(repo).execute(2, [CS101_FALL])
    assert len(ListRegisteredCourses(repo).execute(1)) == 1
    assert len(ListRegisteredCourses(repo).execute(2)) == 1


def test_drop_course_reports_removed_count(db_session):
    repo = EnrollmentRepository(db_session)
    RegisterCourses(repo).execute(1, [CS101_FALL, CS101_WINTER, CS102_FALL])
    assert DropCourse(repo).execute(1, 1) == 2
    assert [e.code for e in repo.list_entries(1)] == ["CS102"]


def test_drop_course_without_enrollment(db_session):
    repo = EnrollmentRepository(db_session)
    with pytest.raises(NotFound, match="Student courses not found"):
        DropCourse(repo).execute(5, 1)
    assert not repo.exists(5)


def test_drop_only_touches_own_enrollment(db_session):
    repo = EnrollmentRepository(db_session)
    RegisterCourses(repo).execute(1, [CS101_FALL])
    RegisterCourses(repo).execute(2, [CS101_FALL])
    DropCourse(repo).execute(1, 1)
    assert len(repo.list_entries(2)) == 1
