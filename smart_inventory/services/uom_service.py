import logging

from sqlalchemy.orm import Session

from smart_inventory.database import commit
from smart_inventory.errors import NotFoundError, ValidationError
from smart_inventory.models.uom import UnitOfMeasure
from smart_inventory.schemas.uom import UnitCreate, UnitUpdate

logger = logging.getLogger(__name__)

# (name, symbol, category, is_default)
STANDARD_UNITS = [
    ("Pieces", "pcs", "Count", True),
    ("Kilograms", "kg", "Weight", False),
    ("Grams", "g", "Weight", False),
    ("Liters", "L", "Volume", False),
    ("Milliliters", "mL", "Volume", False),
    ("Meters", "m", "Length", False),
    ("Centimeters", "cm", "Length", False),
    ("Boxes", "box", "Count", False),
    ("Packs", "pack", "Count", False),
    ("Dozens", "doz", "Count", False),
]


def list_units(db: Session) -> list[UnitOfMeasure]:
    return db.query(UnitOfMeasure).order_by(UnitOfMeasure.created_at, UnitOfMeasure.name).all()


def get_unit(db: Session, unit_id: str) -> UnitOfMeasure | None:
    return db.query(UnitOfMeasure).filter(UnitOfMeasure.id == unit_id).first()


def get_default_unit(db: Session) -> UnitOfMeasure | None:
    return db.query(UnitOfMeasure).filter(UnitOfMeasure.is_default.is_(True)).first()


def seed_defaults(db: Session) -> list[UnitOfMeasure]:
    """Insert the standard catalog when no unit exists yet; otherwise do nothing."""
    if db.query(UnitOfMeasure).first() is not None:
        return []
    units = [
        UnitOfMeasure(name=name, symbol=symbol, category=category, is_default=is_default)
        for name, symbol, category, is_default in STANDARD_UNITS
    ]
    db.add_all(units)
    commit(db)
    logger.info("Seeded %d standard units of measure", len(units))
    return units


def _clear_default(db: Session, keep_id: str | None = None) -> None:
    q = db.query(UnitOfMeasure).filter(UnitOfMeasure.is_default.is_(True))
    for unit in q.all():
        if unit.id != keep_id:
            unit.is_default = False


def create_unit(db: Session, data: UnitCreate) -> UnitOfMeasure:
    if not data.name.strip() or not data.symbol.strip():
        raise ValidationError("Unit name and symbol are required")
    if data.is_default:
        _clear_default(db)
    unit = UnitOfMeasure(
        name=data.name.strip(),
        symbol=data.symbol.strip(),
        category=data.category,
        is_default=data.is_default,
    )
    db.add(unit)
    commit(db)
    db.refresh(unit)
    return unit


def update_unit(db: Session, unit_id: str, data: UnitUpdate) -> UnitOfMeasure:
    unit = get_unit(db, unit_id)
    if not unit:
        raise NotFoundError(f"Unit {unit_id} not found")
    update_data = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    for field in ("name", "symbol"):
        if field in update_data and not update_data[field].strip():
            raise ValidationError(f"Unit {field} cannot be empty")
    if update_data.get("is_default"):
        _clear_default(db, keep_id=unit.id)
    for field, value in update_data.items():
        setattr(unit, field, value)
    commit(db)
    db.refresh(unit)
    return unit
