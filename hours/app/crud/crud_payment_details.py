"""Payment details: one row per client, written with upsert semantics."""

from typing import Optional

from sqlalchemy.orm import Session

from hours.app.models.payment_details import PaymentDetails
from hours.app.schemas.payment_details import PaymentDetailsBase


class CRUDPaymentDetails:
    def get(self, db: Session, *, client_id: int) -> Optional[PaymentDetails]:
        return db.query(PaymentDetails).filter(PaymentDetails.client_id == client_id).first()

    def set(self, db: Session, *, client_id: int, obj_in: PaymentDetailsBase) -> PaymentDetails:
        obj = self.get(db, client_id=client_id)
        if obj is None:
            obj = PaymentDetails(client_id=client_id)
            db.add(obj)
        for field, value in obj_in.model_dump(include=set(PaymentDetailsBase.model_fields)).items():
            setattr(obj, field, value)
        db.commit()
        db.refresh(obj)
        return obj


payment_details_crud = CRUDPaymentDetails()
