from datetime import date
from decimal import Decimal

import pytest

from hours.app.core.errors import ConflictError, NotFoundError, PreconditionError
from hours.app.crud.crud_client import client_crud
from hours.app.crud.crud_contract import contract_crud
from hours.app.db.base import Base
from hours.app.db.session import engine
from hours.app.models.invoice import Invoice
from hours.app.models.time_entry import TimeEntry
from hours.app.schemas.client import ClientCreate
from hours.app.schemas.contract import ContractCreate
from hours.app.services.billing_status import (
    bulk_delete_time_entries,
    delete_time_entry,
    mark_entries_invoiced,
    unmark_entries,
    update_invoice_status,
)
from hours.app.services.time_entries import log_hours


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def seed_entries(db, count=3):
    client = client_crud.create(db, obj_in=ClientCreate(name="Acme"))
    contract_crud.create(
        db,
        obj_in=ContractCreate(
            client_name="Acme", contract_number="AC-1", name="Support", hourly_rate=Decimal("100"), start_date=date(2024, 1, 1)
        ),
    )
    entries = [log_hours(db, "AC-1", Decimal("1"), date=f"2024-01-0{day + 1}") for day in range(count)]
    return client, [entry.id for entry in entries]


def make_invoice(db, client, number):
    invoice = Invoice(
        client_id=client.id,
        invoice_number=number,
        issue_date=date(2024, 2, 1),
        due_date=date(2024, 3, 2),
        total_amount=Decimal("0"),
    )
    db.add(invoice)
    db.commit()
    db.refresh(invoice)
    return invoice


def linked_invoice_ids(db, entry_ids):
    db.expire_all()
    return [db.get(TimeEntry, entry_id).invoice_id for entry_id in entry_ids]


def test_mark_entries_invoiced_links_and_counts(db):
    client, entry_ids = seed_entries(db)
    invoice = make_invoice(db, client, "INV-A")

    result = mark_entries_invoiced(db, "INV-A", entry_ids[:2])

    assert result.count == 2
    assert result.entry_ids == entry_ids[:2]
    assert linked_invoice_ids(db, entry_ids) == [invoice.id, invoice.id, None]


def test_conflicting_link_rolls_back_whole_batch(db):
    client, (x, y, z) = seed_entries(db)
    first = make_invoice(db, client, "INV-A")
    make_invoice(db, client, "INV-B")
    mark_entries_invoiced(db, "INV-A", [x])

    with pytest.raises(ConflictError):
        mark_entries_invoiced(db, "INV-B", [y, x, z])

    assert linked_invoice_ids(db, [x, y, z]) == [first.id, None, None]


def test_marking_again_for_same_invoice_is_not_counted(db):
    client, entry_ids = seed_entries(db)
    make_invoice(db, client, "INV-A")
    mark_entries_invoiced(db, "INV-A", entry_ids[:1])

    result = mark_entries_invoiced(db, "INV-A", entry_ids)

    assert result.count == 2
    assert result.entry_ids == entry_ids[1:]


def test_unknown_entries_are_skipped(db):
    client, entry_ids = seed_entries(db, count=1)
    make_invoice(db, client, "INV-A")

    result = mark_entries_invoiced(db, "INV-A", ["missing", entry_ids[0]])

    assert result.count == 1


def test_mark_requires_invoice_and_ids(db):
    client, entry_ids = seed_entries(db, count=1)
    with pytest.raises(NotFoundError):
        mark_entries_invoiced(db, "INV-404", entry_ids)
    make_invoice(db, client, "INV-A")
    with pytest.raises(PreconditionError):
        mark_entries_invoiced(db, "INV-A", [])


def test_unmark_clears_links_regardless_of_status(db):
    client, entry_ids = seed_entries(db)
    make_invoice(db, client, "INV-A")
    mark_entries_invoiced(db, "INV-A", entry_ids)
    update_invoice_status(db, "INV-A", "paid")

    result = unmark_entries(db, entry_ids + ["missing"])

    assert result.count == 3
    assert linked_invoice_ids(db, entry_ids) == [None, None, None]


def test_update_invoice_status(db):
    client, _ = seed_entries(db, count=1)
    make_invoice(db, client, "INV-A")

    invoice = update_invoice_status(db, "INV-A", "sent")
    assert invoice.status == "sent"
    # no transition ordering
    assert update_invoice_status(db, "INV-A", "draft").status == "draft"

    with pytest.raises(PreconditionError, match="Valid statuses"):
        update_invoice_status(db, "INV-A", "archived")
    with pytest.raises(NotFoundError):
        update_invoice_status(db, "INV-404", "paid")


def test_billed_entries_need_force_to_delete(db):
    client, (billed, free, _) = seed_entries(db)
    make_invoice(db, client, "INV-A")
    mark_entries_invoiced(db, "INV-A", [billed])

    delete_time_entry(db, free)
    with pytest.raises(ConflictError):
        delete_time_entry(db, billed)
    delete_time_entry(db, billed, force=True)

    assert db.get(TimeEntry, free) is None
    assert db.get(TimeEntry, billed) is None
    with pytest.raises(NotFoundError):
        delete_time_entry(db, free)


def test_bulk_delete_aborts_on_billed_entry(db):
    client, entry_ids = seed_entries(db)
    make_invoice(db, client, "INV-A")
    mark_entries_invoiced(db, "INV-A", entry_ids[-1:])

    with pytest.raises(ConflictError):
        bulk_delete_time_entries(db, entry_ids)
    assert db.query(TimeEntry).count() == 3

    result = bulk_delete_time_entries(db, entry_ids + ["missing"], force=True)
    assert result.count == 3
    assert db.query(TimeEntry).count() == 0
