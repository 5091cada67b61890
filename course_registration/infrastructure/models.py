from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import Date, ForeignKey, Integer, String, Text, TIMESTAMP, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base


class UserORM(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    birthday: Mapped[date] = mapped_column(Date, nullable=False)
    username: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="student", index=True)
    # human-readable ID shown to users, e.g. SD4821
    user_code: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    program: Mapped[str | None] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=lambda: datetime.now(timezone.utc)
    )

    def __repr__(self) -> str:
        return f"UserORM(id={self.id!r}, username={self.username!r}, role={self.role!r})"


class CourseORM(Base):
    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    term: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    program: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    def __repr__(self) -> str:
        return f"CourseORM(id={self.id!r}, code={self.code!r}, term={self.term!r})"


class EnrollmentORM(Base):
    __tablename__ = "enrollments"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(Integer, unique=True, index=True, nullable=False)

    entries: Mapped[list["EnrollmentEntryORM"]] = relationship(
        "EnrollmentEntryORM",
        back_populates="enrollment",
        order_by="EnrollmentEntryORM.id",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"EnrollmentORM(id={self.id!r}, student_id={self.student_id!r})"


class EnrollmentEntryORM(Base):
    __tablename__ = "enrollment_entries"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    enrollment_id: Mapped[int] = mapped_column(
        ForeignKey("enrollments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # no FK to courses: the snapshot outlives catalog edits and deletes
    course_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(String(32), nullable=False)
    term: Mapped[str] = mapped_column(String(64), nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    enrollment: Mapped["EnrollmentORM"] = relationship("EnrollmentORM", back_populates="entries")

    __table_args__ = (
        UniqueConstraint("enrollment_id", "course_id", "term", name="uq_enrollment_course_term"),
    )

    def __repr__(self) -> str:
        return f"EnrollmentEntryORM(id={self.id!r}, course_id={self.course_id!r}, term={self.term!r})"


class MessageORM(Base):
    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    sender: Mapped[str] = mapped_column(String(255), nullable=False)
    student_code: Mapped[str] = mapped_column(String(32), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=lambda: datetime.now(timezone.utc)
    )


User = UserORM
Course = CourseORM
Enrollment = EnrollmentORM
EnrollmentEntry = EnrollmentEntryORM
Message = MessageORM

__all__ = [
    "Base",
    "UserORM",
    "CourseORM",
    "EnrollmentORM",
    "EnrollmentEntryORM",
    "MessageORM",
    "User",
    "Course",
    "Enrollment",
    "EnrollmentEntry",
    "Message",
]
