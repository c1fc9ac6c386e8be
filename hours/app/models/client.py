"""Client model for the hours ledger."""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from hours.app.core.time import utc_now
from hours.app.db.base_class import Base


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)
    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    zip_code = Column(String, nullable=True)
    country = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    contracts = relationship("Contract", back_populates="client", cascade="all, delete-orphan")
    recipients = relationship("Recipient", back_populates="client", cascade="all, delete-orphan")
    payment_details = relationship("PaymentDetails", back_populates="client", uselist=False, cascade="all, delete-orphan")
    invoices = relationship("Invoice", back_populates="client", cascade="all, delete-orphan")
