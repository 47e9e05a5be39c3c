"""
utils/export.py — Plan export as CSV text and as an Excel workbook (openpyxl).

One row per group, sorted by group number:
Group, Start Day, End Day, Cathode Out Range, Harvest Day, Cleaning Range.
Groups without a cleaning phase get "-" in the last column.

Both exports are built in memory; the routes stream them as downloads.
"""

from io import BytesIO
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side

from config import EXPORT_BASENAME, NO_CLEANING_PLACEHOLDER
from models import (
    PHASE_ANODE, PHASE_CATHODE_IN, PHASE_CATHODE_OUT, PHASE_CATHODE_REINSERTED,
    PHASE_CLEANING,
)

CSV_HEADER = ['Group', 'Start Day', 'End Day', 'Cathode Out Range', 'Harvest Day', 'Cleaning Range']
PHASE_HEADER = ['Group', 'Phase', 'Type', 'Start Day', 'End Day', 'Duration (days)']

# Phase colors for the phase sheet
PHASE_FILLS = {
    PHASE_ANODE: PatternFill(start_color='1565C0', end_color='1565C0', fill_type='solid'),
    PHASE_CATHODE_IN: PatternFill(start_color='00897B', end_color='00897B', fill_type='solid'),
    PHASE_CATHODE_OUT: PatternFill(start_color='FFB300', end_color='FFB300', fill_type='solid'),
    PHASE_CATHODE_REINSERTED: PatternFill(start_color='4CAF50', end_color='4CAF50', fill_type='solid'),
    PHASE_CLEANING: PatternFill(start_color='7B1FA2', end_color='7B1FA2', fill_type='solid'),
}

HEADER_FONT = Font(name='Calibri', bold=True, color='FFFFFF', size=11)
HEADER_FILL = PatternFill(start_color='1565C0', end_color='1565C0', fill_type='solid')
HEADER_ALIGNMENT = Alignment(horizontal='center', vertical='center', wrap_text=True)
HEADER_BORDER = Border(
    bottom=Side(style='thin', color='0D47A1'),
    right=Side(style='thin', color='E2E8F0'),
)
CELL_BORDER = Border(
    bottom=Side(style='thin', color='E2E8F0'),
    right=Side(style='thin', color='E2E8F0'),
)


def plan_rows(plan):
    """Export rows for a plan, in plan order."""
    return [
        [
            gp.group,
            gp.start_day,
            gp.end_day,
            gp.cathode_out_range,
            gp.harvest_day,
            gp.cleaning_range if gp.cleaning_range is not None else NO_CLEANING_PLACEHOLDER,
        ]
        for gp in plan
    ]


def generate_csv(plan):
    """
    Render a plan as CSV text.

    Returns:
        (csv_text, filename), or (None, None) for an empty plan.
    """
    if not plan:
        return None, None

    lines = [','.join(CSV_HEADER)]
    lines.extend(','.join(str(v) for v in row) for row in plan_rows(plan))
    return '\n'.join(lines), f"{EXPORT_BASENAME}.csv"


def _write_header(ws, columns):
    for col_idx, col_name in enumerate(columns, 1):
        cell = ws.cell(row=1, column=col_idx, value=col_name)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = HEADER_ALIGNMENT
        cell.border = HEADER_BORDER


def _build_summary_sheet(ws, plan):
    """One row per group, same columns as the CSV export."""
    _write_header(ws, CSV_HEADER)

    for row_idx, row in enumerate(plan_rows(plan), 2):
        for col_idx, value in enumerate(row, 1):
            ws.cell(row=row_idx, column=col_idx, value=value).border = CELL_BORDER

    for col, width in zip('ABCDEF', (10, 12, 12, 20, 14, 18)):
        ws.column_dimensions[col].width = width
    ws.freeze_panes = 'A2'


def _build_phase_sheet(ws, plan):
    """One row per phase, type cell colored by phase type."""
    _write_header(ws, PHASE_HEADER)

    row_idx = 2
    for gp in plan:
        for phase in gp.phases:
            ws.cell(row=row_idx, column=1, value=gp.group).border = CELL_BORDER
            ws.cell(row=row_idx, column=2, value=phase.name).border = CELL_BORDER

            type_cell = ws.cell(row=row_idx, column=3, value=phase.type)
            type_cell.border = CELL_BORDER
            type_cell.fill = PHASE_FILLS[phase.type]
            type_cell.font = Font(color='FFFFFF', bold=True)

            ws.cell(row=row_idx, column=4, value=phase.start_day).border = CELL_BORDER
            ws.cell(row=row_idx, column=5, value=phase.end_day).border = CELL_BORDER
            ws.cell(row=row_idx, column=6, value=phase.duration_days).border = CELL_BORDER
            row_idx += 1

    for col, width in zip('ABCDEF', (10, 28, 20, 12, 12, 16)):
        ws.column_dimensions[col].width = width
    ws.freeze_panes = 'A2'


def generate_excel(plan):
    """Generate an Excel workbook with a summary sheet and a phase sheet.

    Returns:
        (BytesIO buffer, filename) on success, (None, None) for an empty plan.
    """
    import openpyxl

    if not plan:
        return None, None

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = 'Plan'
    _build_summary_sheet(ws, plan)
    _build_phase_sheet(wb.create_sheet(title='Phasen'), plan)

    buffer = BytesIO()
    wb.save(buffer)
    buffer.seek(0)

    return buffer, f"{EXPORT_BASENAME}.xlsx"
