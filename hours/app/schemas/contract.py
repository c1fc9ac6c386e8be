"""Contract schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ContractStatus = Literal["active", "completed", "on_hold", "cancelled"]
ContractType = Literal["hourly", "fixed", "retainer"]


class ContractCreate(BaseModel):
    client_name: str
    contract_number: str = Field(min_length=1)
    name: str
    hourly_rate: Decimal = Field(ge=0)
    currency: Optional[str] = None
    contract_type: Optional[ContractType] = None
    start_date: date
    end_date: Optional[date] = None
    payment_terms: Optional[str] = None
    notes: Optional[str] = None


class ContractRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    client_id: int
    contract_number: str
    name: str
    hourly_rate: Decimal
    currency: str
    contract_type: str
    start_date: date
    end_date: Optional[date]
    status: str
    payment_terms: Optional[str]
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime


class ContractStatusUpdate(BaseModel):
    status: ContractStatus
