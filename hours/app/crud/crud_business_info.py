"""The business profile singleton."""

from typing import Optional

from sqlalchemy.orm import Session

from hours.app.models.business_info import BUSINESS_INFO_ID, BusinessInfo
from hours.app.schemas.business_info import BusinessInfoSet


class CRUDBusinessInfo:
    def get(self, db: Session) -> Optional[BusinessInfo]:
        return db.get(BusinessInfo, BUSINESS_INFO_ID)

    def set(self, db: Session, *, obj_in: BusinessInfoSet) -> BusinessInfo:
        obj = self.get(db)
        if obj is None:
            obj = BusinessInfo(id=BUSINESS_INFO_ID)
            db.add(obj)
        data = obj_in.model_dump()
        data["invoice_prefix"] = data.get("invoice_prefix") or "INV"
        for field, value in data.items():
            setattr(obj, field, value)
        db.commit()
        db.refresh(obj)
        return obj


business_info_crud = CRUDBusinessInfo()
