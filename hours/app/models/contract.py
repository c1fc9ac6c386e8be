"""Contract model: a billing agreement with its own rate, currency and status."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from hours.app.core.time import utc_now
from hours.app.db.base_class import Base

CONTRACT_STATUSES = ("active", "completed", "on_hold", "cancelled")
CONTRACT_TYPES = ("hourly", "fixed", "retainer")


class Contract(Base):
    __tablename__ = "contracts"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    contract_number = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=False)
    hourly_rate = Column(Numeric(10, 2), nullable=False)
    currency = Column(String, nullable=False, default="USD")
    contract_type = Column(String, nullable=False, default="hourly")
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    status = Column(String, nullable=False, default="active", index=True)
    payment_terms = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    client = relationship("Client", back_populates="contracts")
    time_entries = relationship("TimeEntry", back_populates="contract", cascade="all, delete-orphan")

    @property
    def is_active(self) -> bool:
        return self.status == "active"
