"""Report aggregation.

Projects a snapshot of items (and storages) into one of the report kinds and
renders it as CSV or HTML. Nothing in here touches the database or the file
system: the same snapshot and parameters always give the same text.
"""

import csv
import html
import io
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from smart_inventory.errors import ValidationError
from smart_inventory.schemas.report import ReportFormat, ReportKind
from smart_inventory.services.currency import CurrencyFormatter

REPORT_TITLES = {
    ReportKind.INVENTORY_SUMMARY: "Inventory Summary",
    ReportKind.LOW_STOCK_LIST: "Low Stock & Out of Stock Items",
    ReportKind.REORDER_LIST: "Reorder List",
}

ACTION_URGENT = "URGENT: Restock"
ACTION_MONITOR = "Monitor/Reorder"
PRIORITY_HIGH = "HIGH"
PRIORITY_MEDIUM = "MEDIUM"


@dataclass
class Column:
    header: str
    money: bool = False
    css: bool = False  # cell carries the row's status class in HTML


@dataclass
class Section:
    title: str
    columns: list[Column]
    rows: list[list[str]] = field(default_factory=list)
    row_classes: list[str] = field(default_factory=list)


@dataclass
class SummaryLine:
    label: str
    value: str
    money: bool = False


@dataclass
class Report:
    kind: ReportKind
    title: str
    table: Section
    summary: list[SummaryLine]
    breakdown: Section | None = None


def _num(value: float) -> str:
    return f"{value:.2f}"


def needs_attention(item) -> bool:
    return item.is_low_stock or item.is_out_of_stock


def reorder_quantity(item) -> float:
    return max(item.max_quantity - item.current_quantity, item.min_quantity)


def reorder_priority(item) -> str:
    return PRIORITY_HIGH if item.is_out_of_stock else PRIORITY_MEDIUM


def _status_class(item) -> str:
    if item.is_out_of_stock:
        return "urgent"
    if item.is_low_stock:
        return "warning"
    return ""


def _summary_section(items: list) -> Section:
    section = Section(
        title=REPORT_TITLES[ReportKind.INVENTORY_SUMMARY],
        columns=[
            Column("Item Name"),
            Column("SKU"),
            Column("Storage"),
            Column("Current Quantity"),
            Column("UOM"),
            Column("Unit Cost", money=True),
            Column("Total Value", money=True),
            Column("Stock Status", css=True),
            Column("Last Updated"),
        ],
    )
    for item in items:
        section.rows.append([
            item.name,
            item.sku,
            item.storage_name,
            _num(item.current_quantity),
            item.uom_symbol,
            _num(item.unit_cost),
            _num(item.total_value),
            item.stock_status.value,
            item.updated_at.strftime("%Y-%m-%d") if item.updated_at else "",
        ])
        section.row_classes.append(_status_class(item))
    return section


def _low_stock_section(items: list) -> Section:
    section = Section(
        title=REPORT_TITLES[ReportKind.LOW_STOCK_LIST],
        columns=[
            Column("Item Name"),
            Column("SKU"),
            Column("Storage"),
            Column("Current Quantity"),
            Column("Min Quantity"),
            Column("UOM"),
            Column("Stock Status", css=True),
            Column("Action Required", css=True),
        ],
    )
    for item in items:
        section.rows.append([
            item.name,
            item.sku,
            item.storage_name,
            _num(item.current_quantity),
            _num(item.min_quantity),
            item.uom_symbol,
            item.stock_status.value,
            ACTION_URGENT if item.is_out_of_stock else ACTION_MONITOR,
        ])
        section.row_classes.append("urgent" if item.is_out_of_stock else "warning")
    return section


def _reorder_section(items: list) -> Section:
    section = Section(
        title=REPORT_TITLES[ReportKind.REORDER_LIST],
        columns=[
            Column("Item Name"),
            Column("SKU"),
            Column("Storage"),
            Column("Current Quantity"),
            Column("Max Quantity"),
            Column("Reorder Quantity"),
            Column("UOM"),
            Column("Priority", css=True),
        ],
    )
    for item in items:
        section.rows.append([
            item.name,
            item.sku,
            item.storage_name,
            _num(item.current_quantity),
            _num(item.max_quantity),
            _num(reorder_quantity(item)),
            item.uom_symbol,
            reorder_priority(item),
        ])
        section.row_classes.append("urgent" if item.is_out_of_stock else "warning")
    return section


def _storage_breakdown(items: list, storages: list) -> Section | None:
    """Per-storage totals, in snapshot order, unassigned items last."""
    groups: dict[str | None, dict] = {}
    for s in storages:
        groups[s.id] = {"name": s.name, "count": 0, "quantity": 0.0, "value": 0.0}
    for item in items:
        key = item.storage_id
        if key not in groups:
            groups[key] = {"name": item.storage_name, "count": 0, "quantity": 0.0, "value": 0.0}
        g = groups[key]
        g["count"] += 1
        g["quantity"] += item.current_quantity
        g["value"] += item.total_value
    if not groups:
        return None

    # Keep "No Storage" at the end regardless of where it was first seen
    ordered = [g for k, g in groups.items() if k is not None]
    if None in groups:
        ordered.append(groups[None])

    section = Section(
        title="By Storage",
        columns=[Column("Storage"), Column("Items"), Column("Total Quantity"), Column("Total Value", money=True)],
    )
    for g in ordered:
        section.rows.append([g["name"], str(g["count"]), _num(g["quantity"]), _num(g["value"])])
        section.row_classes.append("")
    return section


def _summary_lines(kind: ReportKind, items: list) -> list[SummaryLine]:
    out_of_stock = sum(1 for i in items if i.is_out_of_stock)
    low_stock = sum(1 for i in items if i.is_low_stock)
    lines = [
        SummaryLine("Total Items", str(len(items))),
        SummaryLine("Total Value", _num(sum(i.total_value for i in items)), money=True),
        SummaryLine("Out of Stock", str(out_of_stock)),
        SummaryLine("Low Stock", str(low_stock)),
    ]
    if kind == ReportKind.REORDER_LIST:
        lines.append(SummaryLine("High Priority", str(out_of_stock)))
        lines.append(SummaryLine("Medium Priority", str(len(items) - out_of_stock)))
    return lines


def _coerce(enum_cls, value, label: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Unknown {label}: {value}") from None


def build_report(
    items: Iterable,
    storages: Iterable = (),
    kind: ReportKind | str = ReportKind.INVENTORY_SUMMARY,
    storage_id: str | None = None,
) -> Report:
    kind = _coerce(ReportKind, kind, "report kind")
    items = list(items)
    storages = list(storages)
    if storage_id is not None:
        items = [i for i in items if i.storage_id == storage_id]
        storages = [s for s in storages if s.id == storage_id]

    breakdown = None
    if kind == ReportKind.INVENTORY_SUMMARY:
        selected = items
        table = _summary_section(selected)
        breakdown = _storage_breakdown(selected, storages)
    elif kind == ReportKind.LOW_STOCK_LIST:
        selected = [i for i in items if needs_attention(i)]
        table = _low_stock_section(selected)
    else:
        selected = [i for i in items if needs_attention(i)]
        table = _reorder_section(selected)

    return Report(
        kind=kind,
        title=REPORT_TITLES[kind],
        table=table,
        summary=_summary_lines(kind, selected),
        breakdown=breakdown,
    )


def render_csv(report: Report) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow([c.header for c in report.table.columns])
    writer.writerows(report.table.rows)

    writer.writerow([])
    writer.writerow(["Summary"])
    for line in report.summary:
        writer.writerow([line.label, line.value])

    if report.breakdown is not None:
        writer.writerow([])
        writer.writerow([report.breakdown.title])
        writer.writerow([c.header for c in report.breakdown.columns])
        writer.writerows(report.breakdown.rows)
    return buf.getvalue()


_STYLE = """\
body { font-family: Arial, sans-serif; margin: 20px; }
.header { text-align: center; margin-bottom: 30px; }
.title { font-size: 24px; font-weight: bold; margin-bottom: 10px; }
.subtitle { font-size: 16px; color: #666; }
table { width: 100%; border-collapse: collapse; margin: 20px 0; }
th, td { border: 1px solid #ddd; padding: 8px; text-align: left; }
th { background-color: #f2f2f2; font-weight: bold; }
.summary { background-color: #f9f9f9; padding: 15px; margin: 20px 0; border-radius: 5px; }
.urgent { color: #d32f2f; font-weight: bold; }
.warning { color: #f57c00; font-weight: bold; }"""


def _esc(value: str) -> str:
    return html.escape(value, quote=True)


def _html_table(section: Section, currency: CurrencyFormatter) -> list[str]:
    out = ["<table>", "<tr>"]
    out.extend(f"<th>{_esc(c.header)}</th>" for c in section.columns)
    out.append("</tr>")
    for row, row_class in zip(section.rows, section.row_classes):
        out.append("<tr>")
        for col, cell in zip(section.columns, row):
            text = currency.format_price(float(cell)) if col.money else cell
            attr = f' class="{row_class}"' if col.css and row_class else ""
            out.append(f"<td{attr}>{_esc(text)}</td>")
        out.append("</tr>")
    out.append("</table>")
    return out


def render_html(
    report: Report,
    app_name: str = "Smart Inventory",
    generated_at: datetime | None = None,
    currency: CurrencyFormatter | None = None,
) -> str:
    currency = currency or CurrencyFormatter()
    out = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="UTF-8">',
        f"<title>{_esc(app_name)} - {_esc(report.title)}</title>",
        f"<style>\n{_STYLE}\n</style>",
        "</head>",
        "<body>",
        '<div class="header">',
        f'<div class="title">{_esc(app_name)} Report</div>',
    ]
    if generated_at is not None:
        out.append(f'<div class="subtitle">Generated on {_esc(generated_at.strftime("%B %d, %Y %H:%M"))}</div>')
    out.append("</div>")
    out.append(f"<h2>{_esc(report.title)}</h2>")

    out.append('<div class="summary">')
    lines = []
    for line in report.summary:
        value = currency.format_price(float(line.value)) if line.money else line.value
        lines.append(f"<strong>{_esc(line.label)}:</strong> {_esc(value)}")
    out.append("<br>\n".join(lines))
    out.append("</div>")

    out.extend(_html_table(report.table, currency))
    if report.breakdown is not None:
        out.append(f"<h3>{_esc(report.breakdown.title)}</h3>")
        out.extend(_html_table(report.breakdown, currency))

    out.extend(["</body>", "</html>"])
    return "\n".join(out) + "\n"


def generate_report(
    items: Iterable,
    storages: Iterable,
    kind: ReportKind | str,
    fmt: ReportFormat | str,
    *,
    storage_id: str | None = None,
    app_name: str = "Smart Inventory",
    generated_at: datetime | None = None,
    currency: CurrencyFormatter | None = None,
) -> str:
    fmt = _coerce(ReportFormat, fmt, "report format")
    report = build_report(items, storages, kind, storage_id=storage_id)
    if fmt == ReportFormat.CSV:
        return render_csv(report)
    return render_html(report, app_name=app_name, generated_at=generated_at, currency=currency)

