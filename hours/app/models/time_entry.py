"""Time entry model: hours logged against a contract."""

import uuid

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from hours.app.core.time import utc_now
from hours.app.db.base_class import Base


def new_entry_id() -> str:
    return str(uuid.uuid4())


class TimeEntry(Base):
    __tablename__ = "time_entries"

    id = Column(String(36), primary_key=True, default=new_entry_id)
    contract_id = Column(Integer, ForeignKey("contracts.id", ondelete="CASCADE"), nullable=False, index=True)
    # owning client, mirrored from the contract; NOT NULL on ledgers created before contracts
    client_id = Column(Integer, nullable=True, index=True)
    date = Column(Date, nullable=False, index=True)
    hours = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=True)
    contract_ref = Column(String, nullable=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    contract = relationship("Contract", back_populates="time_entries")
    invoice = relationship("Invoice", back_populates="time_entries")

    @property
    def is_invoiced(self) -> bool:
        return self.invoice_id is not None
