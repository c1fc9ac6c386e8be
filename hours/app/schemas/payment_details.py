"""Payment details schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class PaymentDetailsBase(BaseModel):
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    routing_number: Optional[str] = None
    swift_code: Optional[str] = None
    payment_terms: Optional[str] = None
    notes: Optional[str] = None


class PaymentDetailsSet(PaymentDetailsBase):
    client_name: str


class PaymentDetailsRead(PaymentDetailsBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    client_id: int
    updated_at: datetime
