from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from ....infrastructure.db import get_db
from ....infrastructure.models import Message
from ..authz import get_principal, require_admin
from ..schemas import MessageCreate, MessageOut

router = APIRouter(prefix="/api/messages", tags=["messages"])

# Append-only: there is no update or delete route.

@router.get("", response_model=list[MessageOut], dependencies=[Depends(require_admin)])
def list_messages(db: Session = Depends(get_db)):
    rows = db.query(Message).order_by(Message.id).all()
    return [MessageOut.model_validate(row) for row in rows]

@router.post("", response_model=MessageOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(get_principal)])
def send_message(payload: MessageCreate, db: Session = Depends(get_db)):
    row = Message(sender=payload.sender, student_code=payload.student_code, message=payload.message)
    db.add(row); db.commit(); db.refresh(row)
    return MessageOut.model_validate(row)
