"""Logging, editing and querying time entries."""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from hours.app.core.errors import ConflictError, NotFoundError, PreconditionError
from hours.app.core.time import local_today
from hours.app.crud.crud_contract import contract_crud
from hours.app.db.session import transaction
from hours.app.models.client import Client
from hours.app.models.contract import Contract
from hours.app.models.time_entry import TimeEntry, new_entry_id
from hours.app.schemas.time_entry import BulkTimeEntryItem, TimeEntryDetail, TimeEntryList, TimeEntrySearch
from hours.app.services.periods import parse_date

logger = logging.getLogger(__name__)


def to_detail(entry: TimeEntry) -> TimeEntryDetail:
    contract = entry.contract
    return TimeEntryDetail(
        id=entry.id,
        contract_id=entry.contract_id,
        date=entry.date,
        hours=entry.hours,
        description=entry.description,
        contract_ref=entry.contract_ref,
        invoice_id=entry.invoice_id,
        created_at=entry.created_at,
        client_name=contract.client.name,
        contract_number=contract.contract_number,
        contract_name=contract.name,
        hourly_rate=contract.hourly_rate,
        currency=contract.currency,
        invoice_number=entry.invoice.invoice_number if entry.invoice else None,
    )


def _new_entry(
    db: Session,
    contract_number: str,
    hours: Decimal,
    entry_date: Optional[str],
    description: Optional[str],
    today: date | None,
    client_name: Optional[str] = None,
) -> TimeEntry:
    contract = contract_crud.require(db, contract_number=contract_number)
    if client_name and contract.client.name != client_name:
        raise PreconditionError(f"contract {contract_number} does not belong to client '{client_name}'")
    if not contract.is_active:
        raise PreconditionError(f"contract {contract_number} is {contract.status}, hours can only be logged to active contracts")
    if hours is None or Decimal(hours) <= 0:
        raise PreconditionError("hours must be greater than zero")
    entry = TimeEntry(
        id=new_entry_id(),
        contract_id=contract.id,
        client_id=contract.client_id,
        date=parse_date(entry_date, today=today) if entry_date else (today or local_today()),
        hours=Decimal(hours),
        description=description,
        contract_ref=contract.contract_number,
    )
    entry.contract = contract
    db.add(entry)
    return entry


def log_hours(
    db: Session,
    contract_number: str,
    hours: Decimal,
    date: Optional[str] = None,
    description: Optional[str] = None,
    today=None,
) -> TimeEntry:
    with transaction(db):
        entry = _new_entry(db, contract_number, hours, date, description, today)
    db.refresh(entry)
    logger.info("Logged %s hours on %s for contract %s", entry.hours, entry.date, contract_number)
    return entry


def bulk_log_hours(db: Session, entries: Iterable[BulkTimeEntryItem], today=None) -> List[TimeEntry]:
    """Log several entries at once; if any one is invalid nothing is written."""
    items = list(entries)
    if not items:
        raise PreconditionError("no entries provided")
    with transaction(db):
        created = [
            _new_entry(db, item.contract_number, item.hours, item.date, item.description, today, item.client_name)
            for item in items
        ]
    for entry in created:
        db.refresh(entry)
    logger.info("Logged %d time entries", len(created))
    return created


def get_time_entry(db: Session, entry_id: str) -> TimeEntry:
    entry = (
        db.query(TimeEntry)
        .options(joinedload(TimeEntry.contract).joinedload(Contract.client), joinedload(TimeEntry.invoice))
        .filter(TimeEntry.id == entry_id)
        .first()
    )
    if entry is None:
        raise NotFoundError(f"time entry {entry_id} not found")
    return entry


def update_time_entry(
    db: Session,
    entry_id: str,
    hours: Optional[Decimal] = None,
    date: Optional[str] = None,
    description: Optional[str] = None,
    today=None,
) -> TimeEntry:
    entry = get_time_entry(db, entry_id)
    if entry.is_invoiced:
        raise ConflictError(f"time entry {entry_id} is billed on invoice {entry.invoice.invoice_number} and cannot be edited")
    if hours is None and not date and description is None:
        raise PreconditionError("no fields provided to update")
    if hours is not None and Decimal(hours) <= 0:
        raise PreconditionError("hours must be greater than zero")

    with transaction(db):
        if hours is not None:
            entry.hours = Decimal(hours)
        if date:
            entry.date = parse_date(date, today=today)
        if description is not None:
            entry.description = description
    db.refresh(entry)
    return entry


def search_time_entries(db: Session, filters: TimeEntrySearch, today=None) -> TimeEntryList:
    query = (
        db.query(TimeEntry)
        .join(Contract, TimeEntry.contract_id == Contract.id)
        .join(Client, Contract.client_id == Client.id)
        .options(joinedload(TimeEntry.contract).joinedload(Contract.client), joinedload(TimeEntry.invoice))
    )
    if filters.client_name:
        query = query.filter(Client.name == filters.client_name)
    if filters.description:
        query = query.filter(TimeEntry.description.like(f"%{filters.description}%"))
    if filters.contract_ref:
        pattern = f"%{filters.contract_ref}%"
        query = query.filter(or_(Contract.contract_number.like(pattern), TimeEntry.contract_ref.like(pattern)))
    if filters.min_hours is not None:
        query = query.filter(TimeEntry.hours >= filters.min_hours)
    if filters.max_hours is not None:
        query = query.filter(TimeEntry.hours <= filters.max_hours)
    if filters.start_date:
        query = query.filter(TimeEntry.date >= parse_date(filters.start_date, today=today))
    if filters.end_date:
        query = query.filter(TimeEntry.date <= parse_date(filters.end_date, today=today))
    if filters.invoiced is True:
        query = query.filter(TimeEntry.invoice_id.isnot(None))
    elif filters.invoiced is False:
        query = query.filter(TimeEntry.invoice_id.is_(None))

    entries = query.order_by(TimeEntry.date.desc(), TimeEntry.created_at.desc()).all()
    return TimeEntryList(
        count=len(entries),
        total_hours=sum((Decimal(entry.hours) for entry in entries), Decimal("0.00")),
        entries=[to_detail(entry) for entry in entries],
    )


def list_hours(
    db: Session,
    client_name: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    today=None,
) -> TimeEntryList:
    filters = TimeEntrySearch(client_name=client_name, start_date=start_date, end_date=end_date)
    return search_time_entries(db, filters, today=today)
