"""Time entry endpoints: logging, editing, searching and billing links."""

from dataclasses import asdict
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from hours.app.db.session import get_db
from hours.app.schemas.time_entry import (
    BatchResult,
    BulkTimeEntryCreate,
    EntryIds,
    MarkInvoiced,
    ParsedEntryRead,
    ParseRequest,
    TimeEntryCreate,
    TimeEntryDetail,
    TimeEntryList,
    TimeEntryRead,
    TimeEntrySearch,
    TimeEntryUpdate,
)
from hours.app.services import billing_status
from hours.app.services import time_entries
from hours.app.services.periods import parse_natural_language

router = APIRouter(prefix="/time-entries", tags=["time_entries"])


@router.post("/", response_model=TimeEntryRead, status_code=status.HTTP_201_CREATED)
async def log_hours(entry_in: TimeEntryCreate, db: Session = Depends(get_db)):
    return time_entries.log_hours(
        db, entry_in.contract_number, entry_in.hours, date=entry_in.date, description=entry_in.description
    )


@router.post("/bulk", response_model=List[TimeEntryRead], status_code=status.HTTP_201_CREATED)
async def bulk_log_hours(bulk_in: BulkTimeEntryCreate, db: Session = Depends(get_db)):
    return time_entries.bulk_log_hours(db, bulk_in.entries)


@router.post("/parse", response_model=ParsedEntryRead)
async def parse_entry(request: ParseRequest):
    return ParsedEntryRead(**asdict(parse_natural_language(request.text)))


@router.get("/", response_model=TimeEntryList)
async def search_time_entries(
    client_name: str | None = None,
    description: str | None = None,
    contract_ref: str | None = None,
    min_hours: Decimal | None = None,
    max_hours: Decimal | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    invoiced: bool | None = None,
    db: Session = Depends(get_db),
):
    filters = TimeEntrySearch(
        client_name=client_name,
        description=description,
        contract_ref=contract_ref,
        min_hours=min_hours,
        max_hours=max_hours,
        start_date=start_date,
        end_date=end_date,
        invoiced=invoiced,
    )
    return time_entries.search_time_entries(db, filters)


@router.post("/mark-invoiced", response_model=BatchResult)
async def mark_entries_invoiced(mark_in: MarkInvoiced, db: Session = Depends(get_db)):
    return billing_status.mark_entries_invoiced(db, mark_in.invoice_number, mark_in.entry_ids)


@router.post("/unmark", response_model=BatchResult)
async def unmark_entries(ids_in: EntryIds, db: Session = Depends(get_db)):
    return billing_status.unmark_entries(db, ids_in.entry_ids)


@router.post("/bulk-delete", response_model=BatchResult)
async def bulk_delete_time_entries(ids_in: EntryIds, force: bool = False, db: Session = Depends(get_db)):
    return billing_status.bulk_delete_time_entries(db, ids_in.entry_ids, force=force)


@router.get("/{entry_id}", response_model=TimeEntryDetail)
async def get_time_entry(entry_id: str, db: Session = Depends(get_db)):
    return time_entries.to_detail(time_entries.get_time_entry(db, entry_id))


@router.patch("/{entry_id}", response_model=TimeEntryRead)
async def update_time_entry(entry_id: str, entry_in: TimeEntryUpdate, db: Session = Depends(get_db)):
    return time_entries.update_time_entry(
        db, entry_id, hours=entry_in.hours, date=entry_in.date, description=entry_in.description
    )


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_time_entry(entry_id: str, force: bool = False, db: Session = Depends(get_db)):
    billing_status.delete_time_entry(db, entry_id, force=force)
