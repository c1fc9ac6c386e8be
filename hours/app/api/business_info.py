"""The business profile printed on every invoice."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hours.app.core.errors import NotFoundError
from hours.app.crud.crud_business_info import business_info_crud
from hours.app.db.session import get_db
from hours.app.schemas.business_info import BusinessInfoRead, BusinessInfoSet

router = APIRouter(prefix="/business-info", tags=["business_info"])


@router.put("/", response_model=BusinessInfoRead)
async def set_business_info(info_in: BusinessInfoSet, db: Session = Depends(get_db)):
    return business_info_crud.set(db, obj_in=info_in)


@router.get("/", response_model=BusinessInfoRead)
async def get_business_info(db: Session = Depends(get_db)):
    info = business_info_crud.get(db)
    if info is None:
        raise NotFoundError("business information not configured")
    return info
