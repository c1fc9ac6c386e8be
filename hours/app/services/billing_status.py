"""Linking entries to invoices, invoice status changes and entry deletion."""

import logging
from typing import Iterable, List

from sqlalchemy.orm import Session

from hours.app.core.errors import ConflictError, NotFoundError, PreconditionError
from hours.app.crud.crud_invoice import invoice_crud
from hours.app.db.session import transaction
from hours.app.models.invoice import Invoice
from hours.app.models.time_entry import TimeEntry
from hours.app.schemas.time_entry import BatchResult

logger = logging.getLogger(__name__)

UPDATABLE_INVOICE_STATUSES = ("draft", "sent", "paid", "overdue", "cancelled")


def _require_ids(entry_ids: Iterable[str]) -> List[str]:
    ids = [entry_id for entry_id in entry_ids if entry_id]
    if not ids:
        raise PreconditionError("no time entry ids provided")
    return ids


def _load_entries(db: Session, entry_ids: List[str]) -> List[TimeEntry]:
    found = {entry.id: entry for entry in db.query(TimeEntry).filter(TimeEntry.id.in_(entry_ids)).all()}
    missing = [entry_id for entry_id in entry_ids if entry_id not in found]
    if missing:
        logger.info("Skipping %d unknown time entries: %s", len(missing), ", ".join(missing))
    # keep caller order, drop duplicates
    return [found[entry_id] for entry_id in dict.fromkeys(entry_ids) if entry_id in found]


def mark_entries_invoiced(db: Session, invoice_number: str, entry_ids: Iterable[str]) -> BatchResult:
    """Link entries to an existing invoice. A conflicting link aborts the whole batch."""
    invoice = invoice_crud.require(db, invoice_number=invoice_number)
    ids = _require_ids(entry_ids)

    marked = []
    with transaction(db):
        for entry in _load_entries(db, ids):
            if entry.invoice_id == invoice.id:
                continue
            if entry.invoice_id is not None:
                raise ConflictError(f"time entry {entry.id} is already linked to another invoice")
            entry.invoice_id = invoice.id
            marked.append(entry.id)

    logger.info("Marked %d entries as invoiced on %s", len(marked), invoice_number)
    return BatchResult(count=len(marked), entry_ids=marked)


def unmark_entries(db: Session, entry_ids: Iterable[str]) -> BatchResult:
    """Clear the invoice link of each found entry, whatever the invoice's status."""
    ids = _require_ids(entry_ids)
    unmarked = []
    with transaction(db):
        for entry in _load_entries(db, ids):
            entry.invoice_id = None
            unmarked.append(entry.id)
    logger.info("Unmarked %d entries", len(unmarked))
    return BatchResult(count=len(unmarked), entry_ids=unmarked)


def update_invoice_status(db: Session, invoice_number: str, status: str) -> Invoice:
    if status not in UPDATABLE_INVOICE_STATUSES:
        raise PreconditionError(
            f"invalid status '{status}'. Valid statuses are: {', '.join(UPDATABLE_INVOICE_STATUSES)}"
        )
    invoice = invoice_crud.require(db, invoice_number=invoice_number)
    with transaction(db):
        invoice.status = status
    db.refresh(invoice)
    logger.info("Invoice %s is now %s", invoice_number, status)
    return invoice


def _check_deletable(entry: TimeEntry, force: bool) -> None:
    if entry.invoice_id is not None and not force:
        raise ConflictError(f"time entry {entry.id} is billed on an invoice, unmark it first or delete with force")


def delete_time_entry(db: Session, entry_id: str, force: bool = False) -> None:
    entry = db.get(TimeEntry, entry_id)
    if entry is None:
        raise NotFoundError(f"time entry {entry_id} not found")
    _check_deletable(entry, force)
    with transaction(db):
        db.delete(entry)
    logger.info("Deleted time entry %s", entry_id)


def bulk_delete_time_entries(db: Session, entry_ids: Iterable[str], force: bool = False) -> BatchResult:
    ids = _require_ids(entry_ids)
    deleted = []
    with transaction(db):
        for entry in _load_entries(db, ids):
            _check_deletable(entry, force)
            db.delete(entry)
            deleted.append(entry.id)
    logger.info("Deleted %d time entries", len(deleted))
    return BatchResult(count=len(deleted), entry_ids=deleted)
