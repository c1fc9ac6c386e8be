"""Invoice endpoints."""

from decimal import Decimal
from pathlib import Path

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from hours.app.crud.crud_invoice import invoice_crud
from hours.app.db.session import get_db
from hours.app.schemas.invoice import InvoiceCreate, InvoiceDetail, InvoiceList, InvoiceRead, InvoiceStatusUpdate
from hours.app.services.billing import create_invoice
from hours.app.services.billing_status import update_invoice_status
from hours.app.services.invoice_renderer import InvoiceRenderer, get_output_dir, get_renderer
from hours.app.services.periods import parse_date

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.post("/", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
async def generate_invoice(
    invoice_in: InvoiceCreate,
    db: Session = Depends(get_db),
    renderer: InvoiceRenderer = Depends(get_renderer),
    output_dir: Path = Depends(get_output_dir),
):
    return create_invoice(
        db,
        invoice_in.client_name,
        invoice_in.period,
        due_days=invoice_in.due_days,
        renderer=renderer,
        output_dir=output_dir,
    )


@router.get("/", response_model=InvoiceList)
async def list_invoices(
    client_name: str | None = None,
    status: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    db: Session = Depends(get_db),
):
    invoices = invoice_crud.get_multi(
        db,
        client_name=client_name,
        status=status,
        start_date=parse_date(start_date) if start_date else None,
        end_date=parse_date(end_date) if end_date else None,
    )
    return InvoiceList(
        count=len(invoices),
        total_amount=sum((invoice.total_amount for invoice in invoices), Decimal("0.00")),
        invoices=[InvoiceRead.model_validate(invoice) for invoice in invoices],
    )


@router.get("/{invoice_number}", response_model=InvoiceDetail)
async def get_invoice(invoice_number: str, db: Session = Depends(get_db)):
    return invoice_crud.require(db, invoice_number=invoice_number)


@router.patch("/{invoice_number}/status", response_model=InvoiceRead)
async def set_invoice_status(invoice_number: str, status_in: InvoiceStatusUpdate, db: Session = Depends(get_db)):
    return update_invoice_status(db, invoice_number, status_in.status)
