"""CRUD operations for clients."""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from hours.app.core.errors import ConflictError, NotFoundError, PreconditionError
from hours.app.models.client import Client
from hours.app.models.contract import Contract
from hours.app.schemas.client import ClientCreate, ClientUpdate

logger = logging.getLogger(__name__)


class CRUDClient:
    def create(self, db: Session, *, obj_in: ClientCreate) -> Client:
        if self.get_by_name(db, name=obj_in.name) is not None:
            raise ConflictError(f"client '{obj_in.name}' already exists")
        obj = Client(**obj_in.model_dump())
        db.add(obj)
        db.commit()
        db.refresh(obj)
        logger.info("Added client %s (id=%s)", obj.name, obj.id)
        return obj

    def get_by_name(self, db: Session, *, name: str) -> Optional[Client]:
        return db.query(Client).filter(Client.name == name).first()

    def require(self, db: Session, *, name: str) -> Client:
        client = self.get_by_name(db, name=name)
        if client is None:
            raise NotFoundError(f"client '{name}' not found")
        return client

    def get_multi(self, db: Session) -> List[Tuple[Client, int]]:
        """All clients ordered by name, each with its number of active contracts."""
        active_counts = (
            db.query(Contract.client_id, func.count(Contract.id).label("active"))
            .filter(Contract.status == "active")
            .group_by(Contract.client_id)
            .subquery()
        )
        rows = (
            db.query(Client, func.coalesce(active_counts.c.active, 0))
            .outerjoin(active_counts, active_counts.c.client_id == Client.id)
            .order_by(Client.name)
            .all()
        )
        return [(client, int(count)) for client, count in rows]

    def update(self, db: Session, *, db_obj: Client, obj_in: ClientUpdate) -> Client:
        update_data = {field: value for field, value in obj_in.model_dump(exclude_unset=True).items() if value}
        if not update_data:
            raise PreconditionError("no fields provided to update")
        new_name = update_data.pop("new_name", None)
        if new_name and new_name != db_obj.name:
            if self.get_by_name(db, name=new_name) is not None:
                raise ConflictError(f"client '{new_name}' already exists")
            db_obj.name = new_name
        for field, value in update_data.items():
            setattr(db_obj, field, value)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, db_obj: Client) -> Client:
        db.delete(db_obj)
        db.commit()
        logger.info("Deleted client %s with its contracts, entries and invoices", db_obj.name)
        return db_obj


client_crud = CRUDClient()
