"""Client endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from hours.app.crud.crud_client import client_crud
from hours.app.db.session import get_db
from hours.app.schemas.client import ClientCreate, ClientRead, ClientSummary, ClientUpdate

router = APIRouter(prefix="/clients", tags=["clients"])


@router.post("/", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
async def create_client(client_in: ClientCreate, db: Session = Depends(get_db)):
    return client_crud.create(db, obj_in=client_in)


@router.get("/", response_model=List[ClientSummary])
async def list_clients(db: Session = Depends(get_db)):
    return [
        ClientSummary.model_validate(client).model_copy(update={"active_contracts": active})
        for client, active in client_crud.get_multi(db)
    ]


@router.get("/{client_name}", response_model=ClientRead)
async def get_client(client_name: str, db: Session = Depends(get_db)):
    return client_crud.require(db, name=client_name)


@router.patch("/{client_name}", response_model=ClientRead)
async def update_client(client_name: str, client_in: ClientUpdate, db: Session = Depends(get_db)):
    client = client_crud.require(db, name=client_name)
    return client_crud.update(db, db_obj=client, obj_in=client_in)


@router.delete("/{client_name}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(client_name: str, db: Session = Depends(get_db)):
    client = client_crud.require(db, name=client_name)
    client_crud.delete(db, db_obj=client)
