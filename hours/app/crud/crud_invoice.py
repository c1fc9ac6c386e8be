"""Read-side queries for invoices. Invoices are created by the billing service."""

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from hours.app.core.errors import NotFoundError
from hours.app.models.client import Client
from hours.app.models.invoice import Invoice


class CRUDInvoice:
    def get_by_number(self, db: Session, *, invoice_number: str) -> Optional[Invoice]:
        return (
            db.query(Invoice)
            .options(joinedload(Invoice.client), joinedload(Invoice.time_entries))
            .filter(Invoice.invoice_number == invoice_number)
            .first()
        )

    def require(self, db: Session, *, invoice_number: str) -> Invoice:
        invoice = self.get_by_number(db, invoice_number=invoice_number)
        if invoice is None:
            raise NotFoundError(f"invoice {invoice_number} not found")
        return invoice

    def get_multi(
        self,
        db: Session,
        *,
        client_name: str | None = None,
        status: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> List[Invoice]:
        query = db.query(Invoice).join(Client, Invoice.client_id == Client.id).options(joinedload(Invoice.client))
        if client_name:
            query = query.filter(Client.name == client_name)
        if status:
            query = query.filter(Invoice.status == status)
        if start_date:
            query = query.filter(Invoice.issue_date >= start_date)
        if end_date:
            query = query.filter(Invoice.issue_date <= end_date)
        return query.order_by(Invoice.issue_date.desc(), Invoice.id.desc()).all()


invoice_crud = CRUDInvoice()
