"""Contract endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from hours.app.crud.crud_contract import contract_crud
from hours.app.db.session import get_db
from hours.app.schemas.contract import ContractCreate, ContractRead, ContractStatus, ContractStatusUpdate

router = APIRouter(prefix="/contracts", tags=["contracts"])


@router.post("/", response_model=ContractRead, status_code=status.HTTP_201_CREATED)
async def create_contract(contract_in: ContractCreate, db: Session = Depends(get_db)):
    return contract_crud.create(db, obj_in=contract_in)


@router.get("/", response_model=List[ContractRead])
async def list_contracts(
    client_name: str | None = None,
    status: ContractStatus | None = None,
    db: Session = Depends(get_db),
):
    return contract_crud.get_multi(db, client_name=client_name, status=status)


@router.get("/{contract_number}", response_model=ContractRead)
async def get_contract(contract_number: str, db: Session = Depends(get_db)):
    return contract_crud.require(db, contract_number=contract_number)


@router.patch("/{contract_number}/status", response_model=ContractRead)
async def update_contract_status(contract_number: str, status_in: ContractStatusUpdate, db: Session = Depends(get_db)):
    contract = contract_crud.require(db, contract_number=contract_number)
    return contract_crud.set_status(db, db_obj=contract, status=status_in.status)
