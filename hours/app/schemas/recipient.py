"""Recipient schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class RecipientCreate(BaseModel):
    client_name: str
    name: str
    email: str
    title: Optional[str] = None
    phone: Optional[str] = None
    is_primary: bool = False


class RecipientRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    client_id: int
    name: str
    email: str
    title: Optional[str]
    phone: Optional[str]
    is_primary: bool
    created_at: datetime
