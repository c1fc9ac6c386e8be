from datetime import date
from decimal import Decimal

import pytest

from hours.app.core.errors import ConflictError, NotFoundError, ParseError, PreconditionError
from hours.app.crud.crud_client import client_crud
from hours.app.crud.crud_contract import contract_crud
from hours.app.db.base import Base
from hours.app.db.session import engine
from hours.app.models.invoice import Invoice
from hours.app.models.time_entry import TimeEntry
from hours.app.schemas.client import ClientCreate
from hours.app.schemas.contract import ContractCreate
from hours.app.schemas.time_entry import BulkTimeEntryItem, TimeEntrySearch
from hours.app.services.time_entries import (
    bulk_log_hours,
    get_time_entry,
    list_hours,
    log_hours,
    search_time_entries,
    to_detail,
    update_time_entry,
)

TODAY = date(2024, 3, 15)


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def seed_contracts(db):
    for name, number, rate in (("Acme", "AC-1", "100"), ("Globex", "GX-7", "90")):
        client_crud.create(db, obj_in=ClientCreate(name=name))
        contract_crud.create(
            db,
            obj_in=ContractCreate(
                client_name=name, contract_number=number, name=f"{name} retainer", hourly_rate=Decimal(rate), start_date=date(2024, 1, 1)
            ),
        )


def test_log_hours_defaults_to_today_and_records_contract(db):
    seed_contracts(db)

    entry = log_hours(db, "AC-1", Decimal("2.5"), description="Standup", today=TODAY)

    assert entry.date == TODAY
    assert entry.hours == Decimal("2.5")
    assert entry.contract_ref == "AC-1"
    assert entry.client_id == entry.contract.client_id
    assert len(entry.id) == 36
    assert entry.invoice_id is None


def test_log_hours_resolves_relative_dates(db):
    seed_contracts(db)
    entry = log_hours(db, "AC-1", Decimal("1"), date="yesterday", today=TODAY)
    assert entry.date == date(2024, 3, 14)


def test_log_hours_rejects_unknown_or_inactive_contracts(db):
    seed_contracts(db)
    with pytest.raises(NotFoundError):
        log_hours(db, "NOPE-1", Decimal("1"), today=TODAY)

    contract = contract_crud.require(db, contract_number="GX-7")
    contract_crud.set_status(db, db_obj=contract, status="on_hold")
    with pytest.raises(PreconditionError, match="active"):
        log_hours(db, "GX-7", Decimal("1"), today=TODAY)


def test_bulk_log_hours_is_all_or_nothing(db):
    seed_contracts(db)
    good = BulkTimeEntryItem(client_name="Acme", contract_number="AC-1", hours=Decimal("1"), date="2024-03-01")
    wrong_owner = BulkTimeEntryItem(client_name="Acme", contract_number="GX-7", hours=Decimal("2"), date="2024-03-01")
    bad_date = BulkTimeEntryItem(contract_number="GX-7", hours=Decimal("2"), date="someday")

    with pytest.raises(PreconditionError):
        bulk_log_hours(db, [good, wrong_owner], today=TODAY)
    with pytest.raises(ParseError):
        bulk_log_hours(db, [good, bad_date], today=TODAY)
    assert db.query(TimeEntry).count() == 0

    created = bulk_log_hours(db, [good, BulkTimeEntryItem(contract_number="GX-7", hours=Decimal("2"))], today=TODAY)
    assert len(created) == 2
    assert db.query(TimeEntry).count() == 2


def test_get_time_entry_detail(db):
    seed_contracts(db)
    entry = log_hours(db, "GX-7", Decimal("4"), date="2024-03-04", today=TODAY)

    detail = to_detail(get_time_entry(db, entry.id))

    assert detail.client_name == "Globex"
    assert detail.contract_number == "GX-7"
    assert detail.hourly_rate == Decimal("90")
    assert detail.invoice_number is None
    with pytest.raises(NotFoundError):
        get_time_entry(db, "missing")


def test_update_time_entry(db):
    seed_contracts(db)
    entry = log_hours(db, "AC-1", Decimal("1"), date="2024-03-04", today=TODAY)

    updated = update_time_entry(db, entry.id, hours=Decimal("1.75"), date="2024-03-05", description="Pairing")

    assert updated.hours == Decimal("1.75")
    assert updated.date == date(2024, 3, 5)
    assert updated.description == "Pairing"
    with pytest.raises(PreconditionError):
        update_time_entry(db, entry.id)


def test_billed_entries_cannot_be_edited(db):
    seed_contracts(db)
    entry = log_hours(db, "AC-1", Decimal("1"), date="2024-03-04", today=TODAY)
    client = client_crud.require(db, name="Acme")
    invoice = Invoice(
        client_id=client.id, invoice_number="INV-X", issue_date=TODAY, due_date=TODAY, total_amount=Decimal("100")
    )
    db.add(invoice)
    db.flush()
    entry.invoice_id = invoice.id
    db.commit()

    with pytest.raises(ConflictError):
        update_time_entry(db, entry.id, hours=Decimal("3"))


def test_search_time_entries_filters(db):
    seed_contracts(db)
    log_hours(db, "AC-1", Decimal("1"), date="2024-03-01", description="Code review", today=TODAY)
    log_hours(db, "AC-1", Decimal("6"), date="2024-03-08", description="Migration work", today=TODAY)
    log_hours(db, "GX-7", Decimal("3"), date="2024-02-20", description="Code review", today=TODAY)

    everything = search_time_entries(db, TimeEntrySearch())
    assert everything.count == 3
    assert [entry.date for entry in everything.entries] == [date(2024, 3, 8), date(2024, 3, 1), date(2024, 2, 20)]
    assert everything.total_hours == Decimal("10")

    reviews = search_time_entries(db, TimeEntrySearch(description="review"))
    assert reviews.count == 2

    acme_long = search_time_entries(db, TimeEntrySearch(client_name="Acme", min_hours=Decimal("2")))
    assert [entry.description for entry in acme_long.entries] == ["Migration work"]

    by_contract = search_time_entries(db, TimeEntrySearch(contract_ref="GX"))
    assert by_contract.count == 1

    march = search_time_entries(db, TimeEntrySearch(start_date="this month", max_hours=Decimal("5")), today=TODAY)
    assert [entry.description for entry in march.entries] == ["Code review"]

    assert search_time_entries(db, TimeEntrySearch(invoiced=True)).count == 0
    assert search_time_entries(db, TimeEntrySearch(invoiced=False)).count == 3


def test_list_hours_for_client_and_range(db):
    seed_contracts(db)
    log_hours(db, "AC-1", Decimal("1"), date="2024-03-01", today=TODAY)
    log_hours(db, "AC-1", Decimal("2"), date="2024-02-01", today=TODAY)
    log_hours(db, "GX-7", Decimal("3"), date="2024-03-02", today=TODAY)

    result = list_hours(db, client_name="Acme", start_date="2024-03-01", end_date="2024-03-31", today=TODAY)

    assert result.count == 1
    assert result.total_hours == Decimal("1")
