import structlog

from ...domain.entities import CourseSnapshot, EnrollmentEntry, RegistrationResult
from ...domain.errors import Conflict, NotFound, ValidationFailed

logger = structlog.get_logger()

DUPLICATE_REGISTRATION = "You have already registered for these courses in the same term."


class IEnrollmentRepository:
    def add_entries(self, student_id: int, courses: list[CourseSnapshot]) -> list[EnrollmentEntry]:
        """Insert every course whose (course_id, term) is not registered yet.

        Must run as one transaction and persist nothing when no entry is new.
        """
    def list_entries(self, student_id: int) -> list[EnrollmentEntry]: ...
    def remove_course(self, student_id: int, course_id: int) -> int: ...
    def exists(self, student_id: int) -> bool: ...


class RegisterCourses:
    def __init__(self, repo: IEnrollmentRepository):
        self.repo = repo

    def execute(self, student_id: int, courses: list[CourseSnapshot]) -> RegistrationResult:
        if not student_id or not courses:
            raise ValidationFailed("Student ID and selected courses are required.")
        added = self.repo.add_entries(student_id, courses)
        if not added:
            logger.info("course_registration_conflict", student_id=student_id,
                        requested=[c.key for c in courses])
            raise Conflict(DUPLICATE_REGISTRATION)
        logger.info("courses_registered", student_id=student_id,
                    added=[(e.course_id, e.term) for e in added])
        return RegistrationResult(added=added, courses=self.repo.list_entries(student_id))


class ListRegisteredCourses:
    def __init__(self, repo: IEnrollmentRepository):
        self.repo = repo

    def execute(self, student_id: int) -> list[EnrollmentEntry]:
        return self.repo.list_entries(student_id)


class DropCourse:
    # Matches on course_id only, so every term of that course is dropped.
    def __init__(self, repo: IEnrollmentRepository):
        self.repo = repo

    def execute(self, student_id: int, course_id: int) -> int:
        removed = self.repo.remove_course(student_id, course_id)
        if removed:
            logger.info("course_dropped", student_id=student_id, course_id=course_id, removed=removed)
            return removed
        if not self.repo.exists(student_id):
            raise NotFound("Student courses not found.")
        raise NotFound("Course not found in student's registered courses.")
