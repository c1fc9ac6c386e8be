"""Business profile schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class BusinessInfoBase(BaseModel):
    business_name: str
    contact_name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    tax_id: Optional[str] = None
    website: Optional[str] = None
    logo_path: Optional[str] = None


class BusinessInfoSet(BusinessInfoBase):
    invoice_prefix: Optional[str] = None


class BusinessInfoRead(BusinessInfoBase):
    model_config = ConfigDict(from_attributes=True)

    invoice_prefix: str
    updated_at: datetime
