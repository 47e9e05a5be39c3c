"""
routes/export.py — CSV and Excel export routes.

Provides:
- POST /export/csv    — Download the plan as harvest-plan.csv
- POST /export/excel  — Download the plan as harvest-plan.xlsx

The posted form is validated and the plan rebuilt on every export, so an
export never contains a plan that the current values would reject.
"""

from flask import Blueprint, Response, current_app, send_file

from forms import HarvestPlanForm
from plan_engine import generate_plan
from routes.plan import result_response
from utils.export import generate_csv, generate_excel

export_bp = Blueprint('export', __name__, url_prefix='/export')


def _plan_from_request():
    return generate_plan(HarvestPlanForm.from_request().to_form_values())


@export_bp.route('/csv', methods=['POST'])
def export_csv():
    """Export the posted plan as CSV."""
    result = _plan_from_request()
    if not result.ok:
        return result_response(result)

    content, filename = generate_csv(result.plan)
    current_app.logger.info("Exporting %d group(s) to %s", len(result.plan), filename)
    return Response(
        content,
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={filename}'},
    )


@export_bp.route('/excel', methods=['POST'])
def export_excel():
    """Export the posted plan as an Excel workbook."""
    result = _plan_from_request()
    if not result.ok:
        return result_response(result)

    buffer, filename = generate_excel(result.plan)
    current_app.logger.info("Exporting %d group(s) to %s", len(result.plan), filename)
    return send_file(
        buffer,
        as_attachment=True,
        download_name=filename,
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )
