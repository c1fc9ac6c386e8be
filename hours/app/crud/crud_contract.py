"""CRUD operations for contracts."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from hours.app.core.errors import ConflictError, NotFoundError, PreconditionError
from hours.app.crud.crud_client import client_crud
from hours.app.models.client import Client
from hours.app.models.contract import CONTRACT_STATUSES, Contract
from hours.app.schemas.contract import ContractCreate

logger = logging.getLogger(__name__)


class CRUDContract:
    def create(self, db: Session, *, obj_in: ContractCreate) -> Contract:
        client = client_crud.require(db, name=obj_in.client_name)
        if self.get_by_number(db, contract_number=obj_in.contract_number) is not None:
            raise ConflictError(f"contract {obj_in.contract_number} already exists")
        if obj_in.end_date is not None and obj_in.end_date < obj_in.start_date:
            raise PreconditionError("contract end date is before its start date")
        obj = Contract(
            client_id=client.id,
            contract_number=obj_in.contract_number,
            name=obj_in.name,
            hourly_rate=obj_in.hourly_rate,
            currency=obj_in.currency or "USD",
            contract_type=obj_in.contract_type or "hourly",
            start_date=obj_in.start_date,
            end_date=obj_in.end_date,
            payment_terms=obj_in.payment_terms,
            notes=obj_in.notes,
        )
        db.add(obj)
        db.commit()
        db.refresh(obj)
        logger.info("Added contract %s for %s", obj.contract_number, client.name)
        return obj

    def get_by_number(self, db: Session, *, contract_number: str) -> Optional[Contract]:
        return db.query(Contract).filter(Contract.contract_number == contract_number).first()

    def require(self, db: Session, *, contract_number: str) -> Contract:
        contract = self.get_by_number(db, contract_number=contract_number)
        if contract is None:
            raise NotFoundError(f"contract {contract_number} not found")
        return contract

    def get_multi(self, db: Session, *, client_name: str | None = None, status: str | None = None) -> List[Contract]:
        query = db.query(Contract).join(Client, Contract.client_id == Client.id).options(joinedload(Contract.client))
        if client_name:
            query = query.filter(Client.name.like(f"%{client_name}%"))
        if status:
            query = query.filter(Contract.status == status)
        return query.order_by(Contract.start_date.desc(), Contract.contract_number).all()

    def set_status(self, db: Session, *, db_obj: Contract, status: str) -> Contract:
        if status not in CONTRACT_STATUSES:
            raise PreconditionError(f"invalid contract status '{status}'. Valid statuses are: {', '.join(CONTRACT_STATUSES)}")
        db_obj.status = status
        db.commit()
        db.refresh(db_obj)
        return db_obj


contract_crud = CRUDContract()
