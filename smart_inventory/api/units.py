from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from smart_inventory.database import get_db
from smart_inventory.schemas.uom import UnitCreate, UnitOut, UnitUpdate
from smart_inventory.services import uom_service

router = APIRouter(prefix="/units", tags=["Units of Measure"])


@router.get("", response_model=list[UnitOut])
def list_units(db: Session = Depends(get_db)):
    return uom_service.list_units(db)


@router.post("", response_model=UnitOut, status_code=201)
def create_unit(data: UnitCreate, db: Session = Depends(get_db)):
    return uom_service.create_unit(db, data)


@router.post("/seed", response_model=list[UnitOut])
def seed_units(db: Session = Depends(get_db)):
    """Install the standard catalog if no unit exists yet."""
    uom_service.seed_defaults(db)
    return uom_service.list_units(db)


@router.get("/default", response_model=UnitOut)
def default_unit(db: Session = Depends(get_db)):
    unit = uom_service.get_default_unit(db)
    if not unit:
        raise HTTPException(404, "No default unit configured")
    return unit


@router.patch("/{unit_id}", response_model=UnitOut)
def update_unit(unit_id: str, data: UnitUpdate, db: Session = Depends(get_db)):
    return uom_service.update_unit(db, unit_id, data)
