"""
plan_engine.py — Core harvest plan algorithm.

This module implements:
- Plan building: per-group phase intervals, event days and summary ranges
- Plan horizon: last plan day and the timeline length a view should cover
- The "generate plan" action: validate, assemble inputs, build
- Form helpers: default order string, default values, cathode normalization

Algorithm details (days are relative integers starting at 1):
- Groups start in harvest order, staggered by group_start_offset_days:
  start = 1 + index * offset. The output is then sorted by group number,
  so list position says nothing about who starts first.
- Anode phase: [start, start + anode_days - 1]
- Cathode sub-phases chain from start: in (A days), out (B), reinserted (C).
  A + B + C need not equal anode_days; the cathode phases then end before
  or after the anode phase.
- Harvest day: the day after the anode phase ends.
- Cleaning (if cleaning_days > 0) starts on the harvest day; the group ends
  one day after cleaning, otherwise on the harvest day.
"""

import logging

from config import PLAN_DEFAULTS, TIMELINE_MIN_DAYS
from models import (
    FormValues, GroupPlan, HarvestPlanInputs, PlanEvent, PlanPhase, PlanResult,
    PHASE_ANODE, PHASE_CATHODE_IN, PHASE_CATHODE_OUT, PHASE_CATHODE_REINSERTED,
    PHASE_CLEANING,
)
from utils.validators import HarvestPlanValidator, has_errors, parse_harvest_order

logger = logging.getLogger(__name__)


PHASE_NAMES = {
    PHASE_ANODE: 'Anode im Elektrolyt',
    PHASE_CATHODE_IN: 'Kathoden drin',
    PHASE_CATHODE_OUT: 'Kathoden entfernt',
    PHASE_CATHODE_REINSERTED: 'Kathoden wieder eingesetzt',
    PHASE_CLEANING: 'Cleaning',
}

EVENT_START = 'Einheben'
EVENT_CATHODE_OUT = 'Kathoden raus'
EVENT_CATHODE_IN = 'Kathoden rein'
EVENT_HARVEST = 'Harvest/Anoden raus'
EVENT_CLEANING_DONE = 'Cleaning done'


def format_range(start, end):
    return f"{start} - {end}"


def _phase(phase_type, start_day, duration_days):
    return PlanPhase(
        name=PHASE_NAMES[phase_type],
        start_day=start_day,
        end_day=start_day + duration_days - 1,
        duration_days=duration_days,
        type=phase_type,
    )


def build_group_plan(inputs, group, index):
    """
    Build the timeline for one group at position `index` of the harvest order.

    Args:
        inputs: HarvestPlanInputs for the whole plan.
        group: Group number.
        index: 0-based position of the group in inputs.harvest_order.

    Returns:
        GroupPlan for the group.
    """
    cathode_a, cathode_b, cathode_c = inputs.cathode_phases

    start_day = 1 + index * inputs.group_start_offset_days
    anode = _phase(PHASE_ANODE, start_day, inputs.anode_days)

    # Cathode sub-phases, each starting the day after the previous ends
    cathode_in = _phase(PHASE_CATHODE_IN, start_day, cathode_a)
    cathode_out = _phase(PHASE_CATHODE_OUT, cathode_in.end_day + 1, cathode_b)
    cathode_reinserted = _phase(PHASE_CATHODE_REINSERTED, cathode_out.end_day + 1, cathode_c)

    harvest_day = anode.end_day + 1

    phases = [anode, cathode_in, cathode_out, cathode_reinserted]
    events = [
        PlanEvent(EVENT_START, start_day),
        PlanEvent(EVENT_CATHODE_OUT, cathode_out.start_day),
        PlanEvent(EVENT_CATHODE_IN, cathode_reinserted.start_day),
        PlanEvent(EVENT_HARVEST, harvest_day),
    ]

    cleaning_range = None
    end_day = harvest_day
    if inputs.cleaning_days > 0:
        cleaning = _phase(PHASE_CLEANING, harvest_day, inputs.cleaning_days)
        phases.append(cleaning)
        end_day = cleaning.end_day + 1
        events.append(PlanEvent(EVENT_CLEANING_DONE, end_day))
        cleaning_range = format_range(cleaning.start_day, cleaning.end_day)

    return GroupPlan(
        group=group,
        start_day=start_day,
        end_day=end_day,
        phases=tuple(phases),
        events=tuple(events),
        harvest_day=harvest_day,
        cathode_out_range=format_range(cathode_out.start_day, cathode_out.end_day),
        cleaning_range=cleaning_range,
    )


def build_plan(inputs):
    """
    Build the harvest plan for every group, sorted by group number.

    Callers must pass validated inputs: harvest_order is a permutation of
    1..group_count and every numeric field is within FIELD_LIMITS.

    Args:
        inputs: HarvestPlanInputs.

    Returns:
        List of GroupPlan, one per group, ascending by group.
    """
    plans = [
        build_group_plan(inputs, group, index)
        for index, group in enumerate(inputs.harvest_order)
    ]
    plans.sort(key=lambda gp: gp.group)
    return plans


def max_plan_day(plan):
    """Last day covered by any group, 0 for an empty plan."""
    return max((gp.end_day for gp in plan), default=0)


def timeline_days(plan):
    """Number of days a timeline view needs to show the whole plan."""
    return max(TIMELINE_MIN_DAYS, max_plan_day(plan))


def default_order(group_count):
    """Identity harvest order as a form string: "1,2,...,n"."""
    return ','.join(str(i) for i in range(1, group_count + 1))


def default_form_values(defaults=None):
    """Form bundle used on first load and on "reset to defaults"."""
    defaults = dict(PLAN_DEFAULTS, **(defaults or {}))
    return FormValues(
        group_count=defaults['group_count'],
        anode_days=defaults['anode_days'],
        cathode_a=defaults['cathode_a'],
        cathode_b=defaults['cathode_b'],
        cathode_c=defaults['cathode_c'],
        cleaning_days=defaults['cleaning_days'],
        harvest_order=default_order(defaults['group_count']),
        group_start_offset_days=defaults['group_start_offset_days'],
    )


def normalize_cathodes(values):
    """
    Value for cathode phase C that makes A + B + C fill the anode phase.

    Never negative: if A + B already exceed anode_days, C becomes 0.
    """
    remaining = (values.anode_days or 0) - (values.cathode_a or 0) - (values.cathode_b or 0)
    return max(remaining, 0)


def inputs_from_form(values):
    """Assemble HarvestPlanInputs from form values that passed validation."""
    return HarvestPlanInputs(
        group_count=values.group_count,
        anode_days=values.anode_days,
        cathode_phases=(values.cathode_a, values.cathode_b, values.cathode_c),
        cleaning_days=values.cleaning_days,
        harvest_order=parse_harvest_order(values.harvest_order, values.group_count),
        group_start_offset_days=values.group_start_offset_days,
    )


def generate_plan(values):
    """
    Validate a form bundle and build its plan.

    Steps:
    1. Validate with findings shown
    2. On any error: return an empty plan with the findings
    3. Otherwise assemble HarvestPlanInputs and build the plan
    4. Attach the plan horizon and any remaining (warning) findings

    Args:
        values: FormValues from the form layer.

    Returns:
        PlanResult. result.ok is False when the plan was blocked.
    """
    validator = HarvestPlanValidator()
    validator.validate(values, show_errors=True)
    messages = tuple(validator.messages)

    if has_errors(messages):
        logger.info("Plan generation blocked by %d finding(s)", len(messages))
        return PlanResult(plan=(), messages=messages, max_plan_day=0,
                          timeline_days=TIMELINE_MIN_DAYS)

    for message in messages:
        logger.warning("Plan generated with warning: %s", message.detail)

    inputs = inputs_from_form(values)
    plan = build_plan(inputs)
    last_day = max_plan_day(plan)
    logger.info("Built plan for %d group(s), last day %d", len(plan), last_day)

    return PlanResult(
        plan=tuple(plan),
        messages=messages,
        max_plan_day=last_day,
        timeline_days=timeline_days(plan),
    )
