from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .models import EnrollmentEntryORM, EnrollmentORM, UserORM
from ..application.dto import NewUserRecord
from ..application.use_cases.enrollment import IEnrollmentRepository
from ..application.use_cases.register_user import DuplicateUserCode, IUserRepository
from ..domain.entities import CourseSnapshot, EnrollmentEntry, User
from ..domain.errors import Conflict


def to_domain(u: UserORM) -> User:
    return User(
        id=u.id,
        username=u.username,
        email=u.email,
        role=u.role,
        first_name=u.first_name,
        last_name=u.last_name,
        phone=u.phone,
        birthday=u.birthday,
        program=u.program,
        user_code=u.user_code,
        created_at=u.created_at,
    )


def entry_to_domain(e: EnrollmentEntryORM) -> EnrollmentEntry:
    return EnrollmentEntry(
        id=e.id,
        course_id=e.course_id,
        name=e.name,
        code=e.code,
        term=e.term,
        start_date=e.start_date,
        end_date=e.end_date,
    )


class UserRepository(IUserRepository):
    def __init__(self, db: Session): self.db = db

    def get_by_username(self, username: str) -> User | None:
        row = self.db.query(UserORM).filter(UserORM.username == username).first()
        return to_domain(row) if row else None

    def get_by_email(self, email: str) -> User | None:
        row = self.db.query(UserORM).filter(UserORM.email == email).first()
        return to_domain(row) if row else None

    def get_with_password_hash(self, username: str) -> tuple[User, str] | None:
        row = self.db.query(UserORM).filter(UserORM.username == username).first()
        return (to_domain(row), row.password_hash) if row else None

    def list_by_role(self, role: str) -> list[User]:
        rows = self.db.query(UserORM).filter(UserORM.role == role).order_by(UserORM.id).all()
        return [to_domain(r) for r in rows]

    def create(self, record: NewUserRecord) -> User:
        row = UserORM(
            first_name=record.first_name,
            last_name=record.last_name,
            email=record.email,
            phone=record.phone,
            birthday=record.birthday,
            username=record.username,
            password_hash=record.password_hash,
            role=record.role,
            user_code=record.user_code,
            program=record.program,
        )
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            # a concurrent signup may have taken the username or email meanwhile
            if self.get_by_username(record.username):
                raise Conflict("Username already taken.")
            if self.get_by_email(record.email):
                raise Conflict("Email already registered.")
            raise DuplicateUserCode(record.user_code)
        self.db.refresh(row)
        return to_domain(row)


class EnrollmentRepository(IEnrollmentRepository):
    """Enrollment storage built on insert-if-absent and single-statement deletes."""

    def __init__(self, db: Session): self.db = db

    def _insert(self):
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert
        if dialect == "sqlite":
            return sqlite.insert
        raise NotImplementedError(f"conditional insert is not supported on {dialect}")

    def add_entries(self, student_id: int, courses: list[CourseSnapshot]) -> list[EnrollmentEntry]:
        insert = self._insert()
        try:
            self.db.execute(
                insert(EnrollmentORM)
                .values(student_id=student_id)
                .on_conflict_do_nothing(index_elements=["student_id"])
            )
            enrollment_id = self.db.execute(
                select(EnrollmentORM.id).where(EnrollmentORM.student_id == student_id)
            ).scalar_one()

            added_keys = set()
            for course in courses:
                stmt = (
                    insert(EnrollmentEntryORM)
                    .values(
                        enrollment_id=enrollment_id,
                        course_id=course.course_id,
                        name=course.name,
                        code=course.code,
                        term=course.term,
                        start_date=course.start_date,
                        end_date=course.end_date,
                    )
                    .on_conflict_do_nothing(index_elements=["enrollment_id", "course_id", "term"])
                )
                if self.db.execute(stmt).rowcount:
                    added_keys.add(course.key)

            if not added_keys:
                # leaves no trace, not even a freshly created enrollment row
                self.db.rollback()
                return []
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        rows = self.db.execute(
            select(EnrollmentEntryORM)
            .where(EnrollmentEntryORM.enrollment_id == enrollment_id)
            .order_by(EnrollmentEntryORM.id)
        ).scalars().all()
        return [entry_to_domain(r) for r in rows if (r.course_id, r.term) in added_keys]

    def list_entries(self, student_id: int) -> list[EnrollmentEntry]:
        rows = self.db.execute(
            select(EnrollmentEntryORM)
            .join(EnrollmentORM, EnrollmentEntryORM.enrollment_id == EnrollmentORM.id)
            .where(EnrollmentORM.student_id == student_id)
            .order_by(EnrollmentEntryORM.id)
        ).scalars().all()
        return [entry_to_domain(r) for r in rows]

    def remove_course(self, student_id: int, course_id: int) -> int:
        enrollment_id = (select(EnrollmentORM.id)
                         .where(EnrollmentORM.student_id == student_id)
                         .scalar_subquery())
        stmt = (
            delete(EnrollmentEntryORM)
            .where(EnrollmentEntryORM.enrollment_id == enrollment_id,
                   EnrollmentEntryORM.course_id == course_id)
            .execution_options(synchronize_session=False)
        )
        try:
            removed = self.db.execute(stmt).rowcount
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return removed

    def exists(self, student_id: int) -> bool:
        found = self.db.execute(
            select(EnrollmentORM.id).where(EnrollmentORM.student_id == student_id)
        ).first()
        return found is not None
