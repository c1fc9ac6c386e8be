"""Invoice model for billing."""

from decimal import Decimal

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from hours.app.core.time import utc_now
from hours.app.db.base_class import Base

INVOICE_STATUSES = ("pending", "draft", "sent", "paid", "overdue", "cancelled")


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    invoice_number = Column(String, nullable=False, unique=True)

    issue_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)
    # frozen at consolidation time; never recomputed from entries or rates
    total_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String, nullable=False, default="pending", index=True)
    pdf_path = Column(String, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utc_now)

    client = relationship("Client", back_populates="invoices")
    time_entries = relationship("TimeEntry", back_populates="invoice", order_by="TimeEntry.date")

    @property
    def total_hours(self) -> Decimal:
        return sum((entry.hours for entry in self.time_entries), Decimal("0.00"))

    @property
    def client_name(self) -> str | None:
        return self.client.name if self.client else None
