from enum import Enum as PyEnum

from pydantic import BaseModel


class ReportKind(str, PyEnum):
    INVENTORY_SUMMARY = "inventory_summary"
    LOW_STOCK_LIST = "low_stock_list"
    REORDER_LIST = "reorder_list"


class ReportFormat(str, PyEnum):
    CSV = "csv"
    HTML = "html"


class ExportOut(BaseModel):
    filename: str
    path: str
    kind: ReportKind
    format: ReportFormat
    size: int
