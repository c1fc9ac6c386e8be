"""Snapshot of an invoice handed to the document renderer.

The renderer only ever sees these models, never ORM rows or billing state.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class DocumentParty(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None


class DocumentBusiness(BaseModel):
    model_config = ConfigDict(from_attributes=True)

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


class DocumentRecipient(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    email: str
    title: Optional[str] = None
    phone: Optional[str] = None
    is_primary: bool = False


class DocumentPaymentDetails(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    routing_number: Optional[str] = None
    swift_code: Optional[str] = None
    payment_terms: Optional[str] = None
    notes: Optional[str] = None


class DocumentLineItem(BaseModel):
    entry_id: str
    date: date
    description: Optional[str] = None
    hours: Decimal
    contract_number: str
    contract_name: str
    hourly_rate: Decimal
    currency: str
    amount: Decimal


class InvoiceDocument(BaseModel):
    invoice_number: str
    issue_date: date
    due_date: date
    business: DocumentBusiness
    client: DocumentParty
    recipients: List[DocumentRecipient]
    payment_details: DocumentPaymentDetails
    line_items: List[DocumentLineItem]
    total_hours: Decimal
    total_amount: Decimal

    @property
    def currency(self) -> str:
        currencies = {item.currency for item in self.line_items}
        return currencies.pop() if len(currencies) == 1 else ""
