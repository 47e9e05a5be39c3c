"""
utils/validators.py — Input validation for the harvest plan form.

Validates:
- Numeric fields against FIELD_LIMITS (missing values count as invalid)
- The harvest order string (must be a full permutation of 1..group_count)
- The cathode sub-phase sum against anode_days (warning only)

Findings are evaluated independently: one failing check never hides
another. Only error-severity findings block plan generation. A cathode
sum mismatch is a warning: cathode phases may under- or overrun the
anode phase.
"""

import logging
import math
import re

from config import FIELD_LIMITS
from models import ValidationMessage, SEVERITY_ERROR, SEVERITY_WARN

logger = logging.getLogger(__name__)

ORDER_SEPARATOR = re.compile(r'[,\s]+')

FIELD_LABELS = {
    'group_count': 'Anzahl Gruppen',
    'anode_days': 'Anodentage',
    'cathode_a': 'Kathoden-Phase A',
    'cathode_b': 'Kathoden-Phase B',
    'cathode_c': 'Kathoden-Phase C',
    'cleaning_days': 'Reinigungstage',
    'group_start_offset_days': 'Startversatz',
}

MSG_REQUIRED = 'Bitte alle Pflichtfelder korrekt ausfüllen.'
MSG_ORDER_INVALID = 'Harvest-Reihenfolge ist ungültig.'
MSG_CATHODE_SUM = 'Summe der Kathoden-Phasen entspricht nicht anodeDays.'


def _parse_positive_int(token):
    """
    Return token as a positive int, or None if it is not one.

    Any numeric spelling of a whole number counts: "3", "+3", "3.0", "3e0".
    """
    # float() also accepts digit separators ("1_0"), which are not numbers here
    if '_' in token:
        return None
    try:
        value = float(token)
    except ValueError:
        return None
    if not math.isfinite(value) or not value.is_integer() or value <= 0:
        return None
    return int(value)


def parse_harvest_order(raw, group_count):
    """
    Parse a harvest order token string into a processing order.

    Tokens are split on runs of commas and whitespace. Anything that is not
    a positive integer is dropped before the count check, so "1, 2, x, 3"
    with group_count=4 fails on the count rather than raising.

    Args:
        raw: Order string as typed by the user (e.g. "3, 1 2").
        group_count: Number of groups the order must cover.

    Returns:
        The tokens in their original order if they form a permutation of
        1..group_count, otherwise an empty list.
    """
    if not raw or not group_count:
        return []

    numbers = []
    for token in ORDER_SEPARATOR.split(raw.strip()):
        value = _parse_positive_int(token)
        if value is not None:
            numbers.append(value)

    if len(numbers) != group_count:
        return []

    unique = sorted(set(numbers))
    if unique != list(range(1, group_count + 1)):
        return []

    return numbers


def cathode_sum(values):
    """Sum of the three cathode sub-phases; missing values count as 0."""
    return (values.cathode_a or 0) + (values.cathode_b or 0) + (values.cathode_c or 0)


def cathode_sum_mismatch(values):
    return cathode_sum(values) != values.anode_days


def _range_findings(values):
    findings = []
    for name, (low, high) in FIELD_LIMITS.items():
        value = getattr(values, name)
        label = FIELD_LABELS[name]
        if value is None:
            findings.append(ValidationMessage(SEVERITY_ERROR, f"{MSG_REQUIRED} ({label} fehlt)", name))
        elif value < low or (high is not None and value > high):
            if high is None:
                bounds = f"mindestens {low}"
            else:
                bounds = f"zwischen {low} und {high}"
            findings.append(ValidationMessage(
                SEVERITY_ERROR, f"{MSG_REQUIRED} ({label} muss {bounds} liegen)", name
            ))
    return findings


def collect_findings(values):
    """
    Run every check on a FormValues bundle and return all findings.

    Order of findings: range errors, harvest order error, cathode warning.
    """
    findings = _range_findings(values)

    if not parse_harvest_order(values.harvest_order, values.group_count):
        findings.append(ValidationMessage(SEVERITY_ERROR, MSG_ORDER_INVALID, 'harvest_order'))

    if cathode_sum_mismatch(values):
        findings.append(ValidationMessage(SEVERITY_WARN, MSG_CATHODE_SUM, 'cathode_c'))

    return findings


def has_errors(findings):
    return any(f.is_error for f in findings)


class HarvestPlanValidator:
    """
    Decides whether a form bundle is acceptable for plan generation.

    Findings are only published on ``messages`` when the caller asks for
    them (show_errors=True). Live checks while the user is typing pass
    show_errors=False so that no error UI flashes up mid-edit.
    """

    def __init__(self):
        self.messages = []

    def validate(self, values, show_errors=False):
        """Return True iff there are no error-severity findings."""
        findings = collect_findings(values)
        if show_errors:
            self.messages = findings
        valid = not has_errors(findings)
        logger.debug("Validated form: valid=%s, %d finding(s)", valid, len(findings))
        return valid

    def on_change(self, values):
        """Hook for every input change; independent of plan regeneration."""
        return self.validate(values, show_errors=False)
