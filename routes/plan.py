"""
routes/plan.py — Harvest plan JSON endpoints.

Provides:
- GET  /plan/                    — Plan for the default form values
- GET  /plan/defaults            — Default form values (reset)
- POST /plan/validate            — Live validity check while typing (no findings)
- POST /plan/normalize-cathodes  — Cathode C value that fills the anode phase
- POST /plan/generate            — Validate and build the plan
"""

from flask import Blueprint, current_app, jsonify

from forms import HarvestPlanForm
from plan_engine import default_form_values, generate_plan, normalize_cathodes
from utils.validators import HarvestPlanValidator

plan_bp = Blueprint('plan', __name__, url_prefix='/plan')


def _defaults():
    return default_form_values(current_app.config.get('PLAN_DEFAULTS'))


def result_response(result):
    """JSON response for a PlanResult; 400 when errors blocked the plan."""
    status = 200 if result.ok else 400
    return jsonify(result.to_dict()), status


@plan_bp.route('/')
def index():
    """Plan for the default values, as shown on first load."""
    values = _defaults()
    result = generate_plan(values)
    payload = result.to_dict()
    payload['form'] = values.to_dict()
    return jsonify(payload)


@plan_bp.route('/defaults')
def defaults():
    """Default form values used by "reset to defaults"."""
    return jsonify(_defaults().to_dict())


@plan_bp.route('/validate', methods=['POST'])
def validate():
    """Live check on every input change; only the verdict is returned."""
    values = HarvestPlanForm.from_request().to_form_values()
    return jsonify({'valid': HarvestPlanValidator().on_change(values)})


@plan_bp.route('/normalize-cathodes', methods=['POST'])
def normalize():
    """Return the cathode C duration that makes A + B + C == anode_days."""
    values = HarvestPlanForm.from_request().to_form_values()
    return jsonify({'cathodeC': normalize_cathodes(values)})


@plan_bp.route('/generate', methods=['POST'])
def generate():
    """Validate the posted form and build its plan."""
    values = HarvestPlanForm.from_request().to_form_values()
    result = generate_plan(values)
    if not result.ok:
        current_app.logger.info("Rejected plan request: %d finding(s)", len(result.messages))
    return result_response(result)
