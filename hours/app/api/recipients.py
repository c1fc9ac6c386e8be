"""Invoice recipient endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from hours.app.crud.crud_client import client_crud
from hours.app.crud.crud_recipient import recipient_crud
from hours.app.db.session import get_db
from hours.app.schemas.recipient import RecipientCreate, RecipientRead

router = APIRouter(prefix="/recipients", tags=["recipients"])


@router.post("/", response_model=RecipientRead, status_code=status.HTTP_201_CREATED)
async def add_recipient(recipient_in: RecipientCreate, db: Session = Depends(get_db)):
    return recipient_crud.create(db, obj_in=recipient_in)


@router.get("/", response_model=List[RecipientRead])
async def list_recipients(client_name: str, db: Session = Depends(get_db)):
    client = client_crud.require(db, name=client_name)
    return recipient_crud.get_multi(db, client_id=client.id)


@router.delete("/{recipient_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_recipient(recipient_id: int, db: Session = Depends(get_db)):
    recipient_crud.delete(db, recipient_id=recipient_id)
