"""Invoice schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from hours.app.schemas.time_entry import TimeEntryRead

InvoiceStatus = Literal["draft", "sent", "paid", "overdue", "cancelled"]


class InvoiceCreate(BaseModel):
    client_name: str
    period: str
    due_days: Optional[int] = Field(default=None, ge=0)


class InvoiceStatusUpdate(BaseModel):
    status: InvoiceStatus


class InvoiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    client_id: int
    client_name: Optional[str] = None
    invoice_number: str
    issue_date: date
    due_date: date
    total_amount: Decimal
    total_hours: Decimal
    status: str
    pdf_path: Optional[str]
    created_at: datetime


class InvoiceDetail(InvoiceRead):
    time_entries: List[TimeEntryRead]


class InvoiceList(BaseModel):
    count: int
    total_amount: Decimal
    invoices: List[InvoiceRead]
