"""Time entry schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TimeEntryCreate(BaseModel):
    contract_number: str
    hours: Decimal = Field(gt=0)
    date: Optional[str] = None
    description: Optional[str] = None


class BulkTimeEntryItem(TimeEntryCreate):
    client_name: Optional[str] = None


class BulkTimeEntryCreate(BaseModel):
    entries: List[BulkTimeEntryItem]


class TimeEntryUpdate(BaseModel):
    hours: Optional[Decimal] = Field(default=None, gt=0)
    date: Optional[str] = None
    description: Optional[str] = None


class TimeEntryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    contract_id: int
    date: date
    hours: Decimal
    description: Optional[str]
    contract_ref: Optional[str] = None
    invoice_id: Optional[int]
    created_at: datetime


class TimeEntryDetail(TimeEntryRead):
    client_name: str
    contract_number: str
    contract_name: str
    hourly_rate: Decimal
    currency: str
    invoice_number: Optional[str] = None


class TimeEntryList(BaseModel):
    count: int
    total_hours: Decimal
    entries: List[TimeEntryDetail]


class EntryIds(BaseModel):
    entry_ids: List[str]


class MarkInvoiced(EntryIds):
    invoice_number: str


class BatchResult(BaseModel):
    count: int
    entry_ids: List[str]


class ParseRequest(BaseModel):
    text: str


class ParsedEntryRead(BaseModel):
    client_name: str
    hours: Decimal
    dates: List[date]
    description: Optional[str] = None


class TimeEntrySearch(BaseModel):
    client_name: Optional[str] = None
    description: Optional[str] = None
    contract_ref: Optional[str] = None
    min_hours: Optional[Decimal] = None
    max_hours: Optional[Decimal] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    invoiced: Optional[bool] = None
