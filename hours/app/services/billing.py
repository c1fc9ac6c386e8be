"""Invoice consolidation: turn a client's unbilled hours for a period into one invoice."""

import logging
import uuid
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from pathlib import Path
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from hours.app.core.errors import PreconditionError
from hours.app.core.settings import get_settings
from hours.app.core.time import local_today
from hours.app.crud.crud_business_info import business_info_crud
from hours.app.crud.crud_client import client_crud
from hours.app.crud.crud_payment_details import payment_details_crud
from hours.app.crud.crud_recipient import recipient_crud
from hours.app.db.session import transaction
from hours.app.models.business_info import BusinessInfo
from hours.app.models.client import Client
from hours.app.models.contract import Contract
from hours.app.models.invoice import Invoice
from hours.app.models.payment_details import PaymentDetails
from hours.app.models.time_entry import TimeEntry
from hours.app.schemas.invoice_document import (
    DocumentBusiness,
    DocumentLineItem,
    DocumentParty,
    DocumentPaymentDetails,
    DocumentRecipient,
    InvoiceDocument,
)
from hours.app.services.invoice_renderer import InvoiceRenderer, invoice_output_path
from hours.app.services.periods import Period, parse_period

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def quantize_amount(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def line_amount(entry: TimeEntry) -> Decimal:
    """Hours times the contract's current rate, unrounded."""
    return Decimal(entry.hours) * Decimal(entry.contract.hourly_rate)


def generate_invoice_number(prefix: str | None, issue_date: date) -> str:
    return f"{prefix or 'INV'}-{issue_date:%Y%m}-{uuid.uuid4().hex[:8]}"


def get_unbilled_entries(db: Session, client_id: int, period: Period) -> List[TimeEntry]:
    """Entries of every contract of the client inside the period that no invoice references yet."""
    return (
        db.query(TimeEntry)
        .join(Contract, TimeEntry.contract_id == Contract.id)
        .options(joinedload(TimeEntry.contract))
        .filter(
            Contract.client_id == client_id,
            TimeEntry.date >= period.start,
            TimeEntry.date <= period.end,
            TimeEntry.invoice_id.is_(None),
        )
        .order_by(TimeEntry.date, TimeEntry.created_at)
        .all()
    )


def build_invoice_document(
    db: Session,
    invoice: Invoice,
    client: Client,
    business: BusinessInfo,
    payment: PaymentDetails,
    entries: List[TimeEntry],
) -> InvoiceDocument:
    ordered = sorted(entries, key=lambda entry: (entry.contract.contract_number, entry.date))
    line_items = [
        DocumentLineItem(
            entry_id=entry.id,
            date=entry.date,
            description=entry.description,
            hours=entry.hours,
            contract_number=entry.contract.contract_number,
            contract_name=entry.contract.name,
            hourly_rate=entry.contract.hourly_rate,
            currency=entry.contract.currency,
            amount=quantize_amount(line_amount(entry)),
        )
        for entry in ordered
    ]
    return InvoiceDocument(
        invoice_number=invoice.invoice_number,
        issue_date=invoice.issue_date,
        due_date=invoice.due_date,
        business=DocumentBusiness.model_validate(business),
        client=DocumentParty.model_validate(client),
        recipients=[DocumentRecipient.model_validate(r) for r in recipient_crud.get_multi(db, client_id=client.id)],
        payment_details=DocumentPaymentDetails.model_validate(payment),
        line_items=line_items,
        total_hours=sum((Decimal(entry.hours) for entry in entries), Decimal("0.00")),
        total_amount=invoice.total_amount,
    )


def create_invoice(
    db: Session,
    client_name: str,
    period: str,
    *,
    renderer: InvoiceRenderer,
    due_days: Optional[int] = None,
    output_dir: Path | None = None,
    today: date | None = None,
) -> Invoice:
    """
    Consolidate a client's unbilled hours in ``period`` into a single invoice.

    Every selected entry is linked to the new invoice and the rendered document path is
    stored on it. Either all of that is committed or, on any failure including rendering,
    none of it is.
    """
    client = client_crud.require(db, name=client_name)
    business = business_info_crud.get(db)
    if business is None:
        raise PreconditionError("business information not configured, use set business info first")
    payment = payment_details_crud.get(db, client_id=client.id)
    if payment is None:
        raise PreconditionError(f"payment details not configured for client '{client.name}', set payment details first")

    settings = get_settings()
    today = today or local_today()
    resolved = parse_period(period, today=today)

    entries = get_unbilled_entries(db, client.id, resolved)
    if not entries:
        raise PreconditionError(f"no unbilled hours found for '{client.name}' in {period}")

    total_amount = quantize_amount(sum((line_amount(entry) for entry in entries), Decimal("0")))
    due_days = settings.default_due_days if due_days is None else due_days

    rendered_path = None
    try:
        with transaction(db):
            invoice = Invoice(
                client_id=client.id,
                invoice_number=generate_invoice_number(business.invoice_prefix, today),
                issue_date=today,
                due_date=today + timedelta(days=due_days),
                total_amount=total_amount,
                status="pending",
            )
            db.add(invoice)
            db.flush()

            for entry in entries:
                entry.invoice_id = invoice.id
            db.flush()

            document = build_invoice_document(db, invoice, client, business, payment, entries)
            output_path = invoice_output_path(output_dir or settings.invoice_output_dir, today)
            renderer.render(document, output_path)
            rendered_path = output_path
            invoice.pdf_path = str(output_path)
    except Exception:
        logger.warning("Invoice for %s (%s) rolled back", client.name, period)
        # no invoice row refers to the document any more
        if rendered_path is not None:
            rendered_path.unlink(missing_ok=True)
        raise

    db.refresh(invoice)
    logger.info(
        "Created invoice %s for %s: %d entries, %s hours, total %s",
        invoice.invoice_number,
        client.name,
        len(entries),
        document.total_hours,
        total_amount,
    )
    return invoice
