from datetime import datetime

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from smart_inventory.api.deps import get_currency
from smart_inventory.config import settings
from smart_inventory.database import get_db, read_snapshot
from smart_inventory.schemas.item import DashboardStats
from smart_inventory.schemas.report import ExportOut, ReportFormat, ReportKind
from smart_inventory.services import export_service, item_service, report_service, storage_service
from smart_inventory.services.currency import CurrencyFormatter

router = APIRouter(prefix="/reports", tags=["Reports"])


def _render(db: Session, kind: ReportKind, fmt: ReportFormat, storage_id: str | None,
            currency: CurrencyFormatter, now: datetime) -> str:
    # Items and storages come from the same snapshot so the rows and the
    # per-storage breakdown never disagree
    with read_snapshot(db):
        if storage_id:
            storage_service.require_storage(db, storage_id)
        items = item_service.snapshot_items(db, storage_id=storage_id)
        storages = storage_service.list_storages(db, limit=None)
        return report_service.generate_report(
            items,
            storages,
            kind,
            fmt,
            storage_id=storage_id,
            app_name=settings.APP_NAME,
            generated_at=now,
            currency=currency,
        )


@router.get("/dashboard", response_model=DashboardStats)
def dashboard(db: Session = Depends(get_db)):
    with read_snapshot(db):
        return item_service.dashboard_stats(db)


@router.get("/{kind}")
def get_report(
    kind: ReportKind,
    fmt: ReportFormat = Query(ReportFormat.CSV, alias="format"),
    storage_id: str | None = None,
    db: Session = Depends(get_db),
    currency: CurrencyFormatter = Depends(get_currency),
):
    now = datetime.now()
    text = _render(db, kind, fmt, storage_id, currency, now)
    filename = export_service.export_filename(settings.APP_NAME, kind, fmt, now)
    return Response(
        content=text,
        media_type=export_service.MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.post("/{kind}/export", response_model=ExportOut)
def export_report(
    kind: ReportKind,
    fmt: ReportFormat = Query(ReportFormat.CSV, alias="format"),
    storage_id: str | None = None,
    db: Session = Depends(get_db),
    currency: CurrencyFormatter = Depends(get_currency),
):
    now = datetime.now()
    text = _render(db, kind, fmt, storage_id, currency, now)
    filename = export_service.export_filename(settings.APP_NAME, kind, fmt, now)
    path = export_service.write_export(text, filename, settings.EXPORT_DIR, fmt)
    return ExportOut(
        filename=path.name,
        path=str(path),
        kind=kind,
        format=fmt,
        size=path.stat().st_size,
    )
