from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ....application.use_cases.enrollment import DropCourse, ListRegisteredCourses, RegisterCourses
from ....domain.entities import CourseSnapshot, EnrollmentEntry, Principal
from ....domain.errors import Conflict, NotFound
from ....infrastructure.db import get_db
from ....infrastructure.metrics import enrollment_operations_total
from ....infrastructure.repositories import EnrollmentRepository
from ..authz import ensure_can_act_for, get_principal
from ..schemas import EnrollmentEntryOut, MessageResp, RegisterCoursesReq, RegistrationResp

router = APIRouter(prefix="/api/studentCourses", tags=["enrollment"])


def to_out(entry: EnrollmentEntry) -> EnrollmentEntryOut:
    return EnrollmentEntryOut(
        id=entry.id,
        course_id=entry.course_id,
        name=entry.name,
        code=entry.code,
        term=entry.term,
        start_date=entry.start_date,
        end_date=entry.end_date,
    )


@router.get("/{student_id}", response_model=list[EnrollmentEntryOut])
def registered_courses(student_id: int,
                       principal: Principal = Depends(get_principal),
                       db: Session = Depends(get_db)):
    ensure_can_act_for(principal, student_id)
    entries = ListRegisteredCourses(EnrollmentRepository(db)).execute(student_id)
    return [to_out(e) for e in entries]


@router.post("", response_model=RegistrationResp, status_code=status.HTTP_201_CREATED)
def register_courses(payload: RegisterCoursesReq,
                     principal: Principal = Depends(get_principal),
                     db: Session = Depends(get_db)):
    ensure_can_act_for(principal, payload.student_id)
    snapshots = [
        CourseSnapshot(
            course_id=c.id,
            name=c.name,
            code=c.code,
            term=c.term,
            start_date=c.start_date,
            end_date=c.end_date,
        )
        for c in payload.selected_courses
    ]
    try:
        result = RegisterCourses(EnrollmentRepository(db)).execute(payload.student_id, snapshots)
    except Conflict:
        enrollment_operations_total.labels(operation="register", outcome="conflict").inc()
        raise
    enrollment_operations_total.labels(operation="register", outcome="ok").inc()
    return RegistrationResp(
        message="Courses successfully saved!",
        added=[to_out(e) for e in result.added],
        courses=[to_out(e) for e in result.courses],
    )


@router.delete("/{student_id}/{course_id}", response_model=MessageResp)
def drop_course(student_id: int, course_id: int,
                principal: Principal = Depends(get_principal),
                db: Session = Depends(get_db)):
    ensure_can_act_for(principal, student_id)
    try:
        DropCourse(EnrollmentRepository(db)).execute(student_id, course_id)
    except NotFound:
        enrollment_operations_total.labels(operation="drop", outcome="not_found").inc()
        raise
    enrollment_operations_total.labels(operation="drop", outcome="ok").inc()
    return MessageResp(message="Course removed successfully!")
