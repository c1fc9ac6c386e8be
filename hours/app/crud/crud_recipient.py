"""CRUD operations for invoice recipients."""

from typing import List

from sqlalchemy.orm import Session

from hours.app.core.errors import NotFoundError
from hours.app.crud.crud_client import client_crud
from hours.app.models.recipient import Recipient
from hours.app.schemas.recipient import RecipientCreate


class CRUDRecipient:
    def create(self, db: Session, *, obj_in: RecipientCreate) -> Recipient:
        client = client_crud.require(db, name=obj_in.client_name)
        if obj_in.is_primary:
            db.query(Recipient).filter(Recipient.client_id == client.id).update({Recipient.is_primary: False})
        obj = Recipient(client_id=client.id, **obj_in.model_dump(exclude={"client_name"}))
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj

    def get_multi(self, db: Session, *, client_id: int) -> List[Recipient]:
        """Recipients of a client, primary first."""
        return (
            db.query(Recipient)
            .filter(Recipient.client_id == client_id)
            .order_by(Recipient.is_primary.desc(), Recipient.id)
            .all()
        )

    def delete(self, db: Session, *, recipient_id: int) -> Recipient:
        obj = db.get(Recipient, recipient_id)
        if obj is None:
            raise NotFoundError(f"recipient {recipient_id} not found")
        db.delete(obj)
        db.commit()
        return obj


recipient_crud = CRUDRecipient()
