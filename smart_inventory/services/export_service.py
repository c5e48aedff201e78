import logging
import pathlib
from datetime import datetime
from typing import Callable

from smart_inventory.errors import ExportFailure
from smart_inventory.schemas.report import ReportFormat, ReportKind

logger = logging.getLogger(__name__)

KIND_FILE_LABELS = {
    ReportKind.INVENTORY_SUMMARY: "Inventory_Summary",
    ReportKind.LOW_STOCK_LIST: "Low_Stock_List",
    ReportKind.REORDER_LIST: "Reorder_List",
}

FORMAT_EXTENSIONS = {
    ReportFormat.CSV: "csv",
    ReportFormat.HTML: "pdf",
}

MEDIA_TYPES = {
    ReportFormat.CSV: "text/csv",
    ReportFormat.HTML: "text/html",
}

# Turns HTML markup into PDF bytes; PDF rasterization lives outside this package
PdfRenderer = Callable[[str], bytes]


def export_filename(app_name: str, kind: ReportKind, fmt: ReportFormat, when: datetime) -> str:
    """<AppName>_<ReportKind>_<yyyy-MM-dd_HH-mm>.<csv|pdf>"""
    app = "".join(app_name.split())
    stamp = when.strftime("%Y-%m-%d_%H-%M")
    return f"{app}_{KIND_FILE_LABELS[kind]}_{stamp}.{FORMAT_EXTENSIONS[fmt]}"


def write_export(
    text: str,
    filename: str,
    export_dir: str,
    fmt: ReportFormat,
    pdf_renderer: PdfRenderer | None = None,
) -> pathlib.Path:
    """Write report text to export_dir and return the file written.

    CSV is written as-is. HTML goes through pdf_renderer when one is given;
    otherwise the markup itself is saved with an .html suffix.
    """
    target_dir = pathlib.Path(export_dir)
    path = target_dir / filename
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        if fmt == ReportFormat.HTML:
            if pdf_renderer is not None:
                path.write_bytes(pdf_renderer(text))
            else:
                path = path.with_suffix(".html")
                path.write_text(text, encoding="utf-8")
        else:
            path.write_text(text, encoding="utf-8")
    except OSError as e:
        logger.error("Export to %s failed: %s", path, e)
        raise ExportFailure(f"Could not write report file {path.name}: {e}") from e

    logger.info("Exported report to %s", path)
    return path
