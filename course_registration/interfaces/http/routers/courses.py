from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from ....domain.errors import NotFound
from ....infrastructure.db import get_db
from ....infrastructure.models import Course
from ....infrastructure.metrics import db_queries_total
from ..schemas import CourseOut, CourseCreate, CourseUpdate, CourseUpdatedResp, MessageResp
from ..authz import require_admin

router = APIRouter(prefix="/api/courses", tags=["courses"])

def _get_or_404(db: Session, course_id: int) -> Course:
    db_queries_total.inc()
    row = db.query(Course).filter(Course.id==course_id).first()
    if not row: raise NotFound("Course not found.")
    return row

@router.get("", response_model=list[CourseOut])
def list_courses(db: Session = Depends(get_db),
                 program: str | None = Query(None),
                 term: str | None = Query(None)):
    # empty filters pass everything through
    db_queries_total.inc()
    q = db.query(Course)
    if program: q = q.filter(Course.program==program)
    if term: q = q.filter(Course.term==term)
    return [CourseOut.model_validate(row) for row in q.order_by(Course.id).all()]

@router.get("/{course_id}", response_model=CourseOut)
def get_course(course_id: int, db: Session = Depends(get_db)):
    return CourseOut.model_validate(_get_or_404(db, course_id))

# --- Admin-only CRUD:

@router.post("", response_model=CourseOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
def create_course(payload: CourseCreate, db: Session = Depends(get_db)):
    row = Course(**payload.model_dump())
    db.add(row); db.commit(); db.refresh(row)
    return CourseOut.model_validate(row)

@router.put("/{course_id}", response_model=CourseUpdatedResp, dependencies=[Depends(require_admin)])
def update_course(course_id: int, payload: CourseUpdate, db: Session = Depends(get_db)):
    row = _get_or_404(db, course_id)
    for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(row, field, value)
    db.commit(); db.refresh(row)
    return CourseUpdatedResp(message="Course updated successfully!", updated_course=CourseOut.model_validate(row))

@router.delete("/{course_id}", response_model=MessageResp, dependencies=[Depends(require_admin)])
def delete_course(course_id: int, db: Session = Depends(get_db)):
    # enrollment entries keep their own copy of the course fields
    row = _get_or_404(db, course_id)
    db.delete(row); db.commit()
    return MessageResp(message="Course deleted successfully!")
