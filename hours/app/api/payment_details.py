"""Per-client payment details."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hours.app.core.errors import NotFoundError
from hours.app.crud.crud_client import client_crud
from hours.app.crud.crud_payment_details import payment_details_crud
from hours.app.db.session import get_db
from hours.app.schemas.payment_details import PaymentDetailsRead, PaymentDetailsSet

router = APIRouter(prefix="/payment-details", tags=["payment_details"])


@router.put("/", response_model=PaymentDetailsRead)
async def set_payment_details(details_in: PaymentDetailsSet, db: Session = Depends(get_db)):
    client = client_crud.require(db, name=details_in.client_name)
    return payment_details_crud.set(db, client_id=client.id, obj_in=details_in)


@router.get("/{client_name}", response_model=PaymentDetailsRead)
async def get_payment_details(client_name: str, db: Session = Depends(get_db)):
    client = client_crud.require(db, name=client_name)
    details = payment_details_crud.get(db, client_id=client.id)
    if details is None:
        raise NotFoundError(f"no payment details configured for client '{client_name}'")
    return details
