from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from hours.app.core.errors import NotFoundError, ParseError, PersistenceError, PreconditionError, RenderError
from hours.app.crud.crud_business_info import business_info_crud
from hours.app.crud.crud_client import client_crud
from hours.app.crud.crud_contract import contract_crud
from hours.app.crud.crud_payment_details import payment_details_crud
from hours.app.db.base import Base
from hours.app.db.session import engine
from hours.app.models.contract import Contract
from hours.app.models.invoice import Invoice
from hours.app.models.time_entry import TimeEntry
from hours.app.schemas.business_info import BusinessInfoSet
from hours.app.schemas.client import ClientCreate
from hours.app.schemas.contract import ContractCreate
from hours.app.schemas.payment_details import PaymentDetailsBase
from hours.app.services.billing import create_invoice, generate_invoice_number
from hours.app.services.billing_status import unmark_entries
from hours.app.services.time_entries import log_hours

ISSUED = date(2024, 2, 1)


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def seed_business(db, prefix=None):
    business_info_crud.set(
        db,
        obj_in=BusinessInfoSet(
            business_name="Solo Dev LLC", contact_name="Sam Doe", email="sam@example.com", invoice_prefix=prefix
        ),
    )


def seed_client(db, name="Acme", with_payment=True):
    client = client_crud.create(db, obj_in=ClientCreate(name=name, city="Springfield"))
    if with_payment:
        payment_details_crud.set(db, client_id=client.id, obj_in=PaymentDetailsBase(bank_name="First Bank", account_number="0042"))
    return client


def seed_contract(db, client_name="Acme", number="AC-1", rate="100"):
    return contract_crud.create(
        db,
        obj_in=ContractCreate(
            client_name=client_name,
            contract_number=number,
            name="Platform work",
            hourly_rate=Decimal(rate),
            start_date=date(2024, 1, 1),
        ),
    )


def seed_acme(db):
    seed_business(db)
    seed_client(db)
    seed_contract(db)
    first = log_hours(db, "AC-1", Decimal("2"), date="2024-01-05", description="Kickoff")
    second = log_hours(db, "AC-1", Decimal("3"), date="2024-01-10", description="API design")
    return first.id, second.id


def test_create_invoice_consolidates_unbilled_hours(db, renderer, tmp_path):
    entry_ids = seed_acme(db)

    invoice = create_invoice(db, "Acme", "January 2024", renderer=renderer, output_dir=tmp_path, today=ISSUED)

    assert invoice.total_amount == Decimal("500")
    assert invoice.total_hours == Decimal("5")
    assert invoice.status == "pending"
    assert invoice.issue_date == ISSUED
    assert invoice.due_date == date(2024, 3, 2)
    assert invoice.invoice_number.startswith("INV-202402-")
    assert invoice.pdf_path == str(tmp_path / "invoice_2024-02-01.pdf")
    assert sorted(entry.id for entry in invoice.time_entries) == sorted(entry_ids)

    document, output_path = renderer.calls[0]
    assert output_path == tmp_path / "invoice_2024-02-01.pdf"
    assert document.invoice_number == invoice.invoice_number
    assert document.total_amount == Decimal("500")
    assert [item.amount for item in document.line_items] == [Decimal("200.00"), Decimal("300.00")]
    assert document.client.name == "Acme"
    assert document.payment_details.bank_name == "First Bank"


def test_second_invoice_for_same_period_has_nothing_to_bill(db, renderer, tmp_path):
    seed_acme(db)
    create_invoice(db, "Acme", "January 2024", renderer=renderer, output_dir=tmp_path, today=ISSUED)

    with pytest.raises(PreconditionError, match="no unbilled hours"):
        create_invoice(db, "Acme", "January 2024", renderer=renderer, output_dir=tmp_path, today=ISSUED)
    assert db.query(Invoice).count() == 1


def test_total_is_sum_over_contracts_at_their_rates(db, renderer, tmp_path):
    seed_acme(db)
    seed_contract(db, number="AC-2", rate="80.50")
    log_hours(db, "AC-2", Decimal("1.5"), date="2024-01-20")
    # outside the period
    log_hours(db, "AC-2", Decimal("4"), date="2024-02-02")

    invoice = create_invoice(db, "Acme", "2024-01", renderer=renderer, output_dir=tmp_path, today=ISSUED)

    assert invoice.total_amount == Decimal("620.75")
    assert invoice.total_hours == Decimal("6.5")
    document, _ = renderer.calls[0]
    assert [item.contract_number for item in document.line_items] == ["AC-1", "AC-1", "AC-2"]
    assert sum(item.amount for item in document.line_items) == invoice.total_amount


def test_custom_prefix_and_due_days(db, renderer, tmp_path):
    seed_acme(db)
    business_info_crud.set(
        db,
        obj_in=BusinessInfoSet(business_name="Solo Dev LLC", contact_name="Sam Doe", email="sam@example.com", invoice_prefix="SD"),
    )

    invoice = create_invoice(db, "Acme", "January 2024", due_days=14, renderer=renderer, output_dir=tmp_path, today=ISSUED)

    assert invoice.invoice_number.startswith("SD-202402-")
    assert invoice.due_date == date(2024, 2, 15)


def test_invoice_numbers_are_unique():
    numbers = {generate_invoice_number("INV", ISSUED) for _ in range(50)}
    assert len(numbers) == 50
    assert all(len(number.split("-")[2]) == 8 for number in numbers)


def test_preconditions_are_checked_before_any_write(db, renderer, tmp_path):
    with pytest.raises(NotFoundError):
        create_invoice(db, "Nobody", "January 2024", renderer=renderer, output_dir=tmp_path, today=ISSUED)

    seed_client(db, with_payment=False)
    seed_contract(db)
    log_hours(db, "AC-1", Decimal("2"), date="2024-01-05")
    with pytest.raises(PreconditionError, match="business info"):
        create_invoice(db, "Acme", "January 2024", renderer=renderer, output_dir=tmp_path, today=ISSUED)

    seed_business(db)
    with pytest.raises(PreconditionError, match="payment details"):
        create_invoice(db, "Acme", "January 2024", renderer=renderer, output_dir=tmp_path, today=ISSUED)

    assert db.query(Invoice).count() == 0
    assert renderer.calls == []


def test_unparseable_period_is_rejected(db, renderer, tmp_path):
    seed_acme(db)
    with pytest.raises(ParseError):
        create_invoice(db, "Acme", "sometime soon", renderer=renderer, output_dir=tmp_path, today=ISSUED)


def test_render_failure_rolls_back_invoice_and_links(db, failing_renderer, tmp_path):
    seed_acme(db)

    with pytest.raises(RenderError):
        create_invoice(db, "Acme", "January 2024", renderer=failing_renderer, output_dir=tmp_path, today=ISSUED)

    assert db.query(Invoice).count() == 0
    assert db.query(TimeEntry).filter(TimeEntry.invoice_id.isnot(None)).count() == 0


def test_unmarked_entries_can_be_invoiced_again(db, renderer, tmp_path):
    entry_ids = seed_acme(db)
    first = create_invoice(db, "Acme", "January 2024", renderer=renderer, output_dir=tmp_path, today=ISSUED)

    unmark_entries(db, list(entry_ids))
    second = create_invoice(db, "Acme", "January 2024", renderer=renderer, output_dir=tmp_path, today=ISSUED)

    assert second.invoice_number != first.invoice_number
    assert second.total_amount == Decimal("500")
    db.refresh(first)
    assert first.total_amount == Decimal("500")
    assert first.time_entries == []


def test_issued_total_is_frozen_when_rate_changes(db, renderer, tmp_path):
    seed_acme(db)
    invoice = create_invoice(db, "Acme", "January 2024", renderer=renderer, output_dir=tmp_path, today=ISSUED)

    contract = db.query(Contract).filter(Contract.contract_number == "AC-1").one()
    contract.hourly_rate = Decimal("150")
    db.commit()
    log_hours(db, "AC-1", Decimal("1"), date="2024-02-05")

    later = create_invoice(db, "Acme", "February 2024", renderer=renderer, output_dir=tmp_path, today=date(2024, 3, 1))

    db.refresh(invoice)
    assert invoice.total_amount == Decimal("500")
    assert later.total_amount == Decimal("150")


class WritingRenderer:
    def render(self, document, output_path):
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(b"%PDF-1.7 " + document.invoice_number.encode())


def test_failed_commit_removes_rendered_document(db, tmp_path, monkeypatch):
    seed_acme(db)

    def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(db, "commit", failing_commit)

    with pytest.raises(PersistenceError):
        create_invoice(db, "Acme", "January 2024", renderer=WritingRenderer(), output_dir=tmp_path, today=ISSUED)

    assert not (tmp_path / "invoice_2024-02-01.pdf").exists()
    assert db.query(Invoice).count() == 0
    assert db.query(TimeEntry).filter(TimeEntry.invoice_id.isnot(None)).count() == 0


def test_successful_invoice_keeps_rendered_document(db, tmp_path):
    seed_acme(db)

    invoice = create_invoice(db, "Acme", "January 2024", renderer=WritingRenderer(), output_dir=tmp_path, today=ISSUED)

    assert (tmp_path / "invoice_2024-02-01.pdf").read_bytes().endswith(invoice.invoice_number.encode())
