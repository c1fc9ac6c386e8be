"""The invoicing party's profile, stored as a single row."""

from sqlalchemy import Column, DateTime, Integer, String

from hours.app.core.time import utc_now
from hours.app.db.base_class import Base

BUSINESS_INFO_ID = 1


class BusinessInfo(Base):
    __tablename__ = "business_info"

    id = Column(Integer, primary_key=True, default=BUSINESS_INFO_ID)
    business_name = Column(String, nullable=False)
    contact_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    zip_code = Column(String, nullable=True)
    country = Column(String, nullable=True)
    tax_id = Column(String, nullable=True)
    website = Column(String, nullable=True)
    logo_path = Column(String, nullable=True)
    invoice_prefix = Column(String, nullable=False, default="INV")
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)
