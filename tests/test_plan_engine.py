"""
tests/test_plan_engine.py — Unit tests for the harvest plan algorithm.

Tests cover:
- Staggered start days in harvest order, output sorted by group
- Phase chaining and durations
- Harvest day, cleaning phase and group end day
- Events and summary ranges
- Plan horizon, defaults and cathode normalization
- The generate action (blocking errors, non-blocking warnings)
"""

import pytest

from models import FormValues, HarvestPlanInputs, PHASE_TYPES
from plan_engine import (
    build_plan,
    default_form_values,
    default_order,
    generate_plan,
    inputs_from_form,
    max_plan_day,
    normalize_cathodes,
    timeline_days,
)


@pytest.fixture
def staggered_inputs():
    """Three groups, started in order 2, 1, 3 with a 5-day stagger."""
    return HarvestPlanInputs(
        group_count=3,
        anode_days=10,
        cathode_phases=(4, 3, 3),
        cleaning_days=2,
        harvest_order=(2, 1, 3),
        group_start_offset_days=5,
    )


def _by_group(plan):
    return {gp.group: gp for gp in plan}


def _phase(group_plan, phase_type):
    return [p for p in group_plan.phases if p.type == phase_type][0]


def test_output_sorted_by_group(staggered_inputs):
    """Output is listed by group number even though group 2 starts first."""
    plan = build_plan(staggered_inputs)
    assert [gp.group for gp in plan] == [1, 2, 3]


def test_start_days_follow_harvest_order(staggered_inputs):
    plan = _by_group(build_plan(staggered_inputs))
    assert plan[2].start_day == 1
    assert plan[1].start_day == 6
    assert plan[3].start_day == 11


def test_group_timeline_example(staggered_inputs):
    """Group 2: anode 1-10, harvest 11, cleaning 11-12, end 13."""
    gp = _by_group(build_plan(staggered_inputs))[2]

    anode = _phase(gp, 'anode')
    assert (anode.start_day, anode.end_day, anode.duration_days) == (1, 10, 10)
    assert gp.harvest_day == 11

    cleaning = _phase(gp, 'cleaning')
    assert (cleaning.start_day, cleaning.end_day) == (11, 12)
    assert gp.cleaning_range == "11 - 12"
    assert gp.end_day == 13
    assert gp.cathode_out_range == "5 - 7"


def test_events(staggered_inputs):
    gp = _by_group(build_plan(staggered_inputs))[1]
    assert [(e.name, e.day) for e in gp.events] == [
        ('Einheben', 6),
        ('Kathoden raus', 10),
        ('Kathoden rein', 13),
        ('Harvest/Anoden raus', 16),
        ('Cleaning done', 18),
    ]


def test_phase_order_and_names(staggered_inputs):
    gp = build_plan(staggered_inputs)[0]
    assert tuple(p.type for p in gp.phases) == PHASE_TYPES
    assert [p.name for p in gp.phases] == [
        'Anode im Elektrolyt',
        'Kathoden drin',
        'Kathoden entfernt',
        'Kathoden wieder eingesetzt',
        'Cleaning',
    ]


def test_phase_ranges_consistent(staggered_inputs):
    """Durations match the ranges and the cathode phases chain without gaps."""
    for gp in build_plan(staggered_inputs):
        for phase in gp.phases:
            assert phase.duration_days == phase.end_day - phase.start_day + 1

        cathode_in = _phase(gp, 'cathode-in')
        cathode_out = _phase(gp, 'cathode-out')
        reinserted = _phase(gp, 'cathode-reinserted')
        assert cathode_in.start_day == gp.start_day
        assert cathode_out.start_day == cathode_in.end_day + 1
        assert reinserted.start_day == cathode_out.end_day + 1


def test_no_cleaning_phase():
    inputs = HarvestPlanInputs(
        group_count=2,
        anode_days=14,
        cathode_phases=(5, 5, 4),
        cleaning_days=0,
        harvest_order=(1, 2),
        group_start_offset_days=1,
    )
    for gp in build_plan(inputs):
        anode_end = gp.start_day + 14 - 1
        assert gp.harvest_day == anode_end + 1
        assert gp.end_day == gp.harvest_day
        assert gp.cleaning_range is None
        assert 'cleaning' not in [p.type for p in gp.phases]
        assert 'Cleaning done' not in [e.name for e in gp.events]
        assert len(gp.events) == 4


def test_cathode_overrun_is_allowed():
    """Cathode phases longer than the anode phase simply end after it."""
    inputs = HarvestPlanInputs(
        group_count=1,
        anode_days=14,
        cathode_phases=(5, 5, 5),
        cleaning_days=0,
        harvest_order=(1,),
        group_start_offset_days=0,
    )
    gp = build_plan(inputs)[0]
    assert _phase(gp, 'cathode-reinserted').end_day == 15
    assert _phase(gp, 'anode').end_day == 14
    assert gp.harvest_day == 15


def test_zero_offset_starts_all_groups_together():
    inputs = HarvestPlanInputs(
        group_count=4,
        anode_days=3,
        cathode_phases=(1, 1, 1),
        cleaning_days=1,
        harvest_order=(4, 3, 2, 1),
        group_start_offset_days=0,
    )
    plan = build_plan(inputs)
    assert {gp.start_day for gp in plan} == {1}
    assert {gp.end_day for gp in plan} == {5}


def test_build_plan_is_deterministic(staggered_inputs):
    assert build_plan(staggered_inputs) == build_plan(staggered_inputs)


def test_inputs_reject_wrong_cathode_count():
    with pytest.raises(ValueError):
        HarvestPlanInputs(
            group_count=1,
            anode_days=1,
            cathode_phases=(1, 0),
            cleaning_days=0,
            harvest_order=(1,),
            group_start_offset_days=0,
        )


def test_plan_horizon(staggered_inputs):
    plan = build_plan(staggered_inputs)
    assert max_plan_day(plan) == 23
    assert timeline_days(plan) == 42
    assert max_plan_day([]) == 0
    assert timeline_days([]) == 42


def test_timeline_grows_with_long_plans():
    inputs = HarvestPlanInputs(
        group_count=2,
        anode_days=60,
        cathode_phases=(20, 20, 20),
        cleaning_days=5,
        harvest_order=(1, 2),
        group_start_offset_days=10,
    )
    plan = build_plan(inputs)
    assert max_plan_day(plan) == 76
    assert timeline_days(plan) == 76


def test_default_order():
    assert default_order(4) == "1,2,3,4"
    assert default_order(1) == "1"


def test_default_form_values():
    values = default_form_values()
    assert values.group_count == 8
    assert values.anode_days == 14
    assert (values.cathode_a, values.cathode_b, values.cathode_c) == (5, 5, 4)
    assert values.cleaning_days == 0
    assert values.group_start_offset_days == 1
    assert values.harvest_order == "1,2,3,4,5,6,7,8"


def test_default_form_values_override():
    values = default_form_values({'group_count': 3})
    assert values.group_count == 3
    assert values.harvest_order == "1,2,3"
    assert values.anode_days == 14


def test_normalize_cathodes():
    assert normalize_cathodes(FormValues(anode_days=14, cathode_a=5, cathode_b=5)) == 4
    assert normalize_cathodes(FormValues(anode_days=8, cathode_a=5, cathode_b=5)) == 0
    assert normalize_cathodes(FormValues(anode_days=10)) == 10


def test_inputs_from_form_keeps_order():
    values = FormValues(
        group_count=3, anode_days=10, cathode_a=4, cathode_b=3, cathode_c=3,
        cleaning_days=2, harvest_order="2, 1 3", group_start_offset_days=5,
    )
    inputs = inputs_from_form(values)
    assert inputs.harvest_order == (2, 1, 3)
    assert inputs.cathode_phases == (4, 3, 3)


def test_generate_plan_success():
    result = generate_plan(default_form_values())
    assert result.ok
    assert result.messages == ()
    assert [gp.group for gp in result.plan] == list(range(1, 9))
    assert result.max_plan_day == 22
    assert result.timeline_days == 42


def test_generate_plan_blocked_by_errors():
    values = FormValues(
        group_count=3, anode_days=10, cathode_a=4, cathode_b=3, cathode_c=3,
        cleaning_days=0, harvest_order="1,1,2", group_start_offset_days=0,
    )
    result = generate_plan(values)
    assert not result.ok
    assert result.plan == ()
    assert result.max_plan_day == 0
    assert result.timeline_days == 42
    assert [m.field for m in result.messages] == ['harvest_order']


def test_generate_plan_proceeds_with_warning():
    """A cathode sum mismatch is reported but still yields a plan."""
    values = FormValues(
        group_count=2, anode_days=14, cathode_a=5, cathode_b=5, cathode_c=5,
        cleaning_days=0, harvest_order="2,1", group_start_offset_days=1,
    )
    result = generate_plan(values)
    assert result.ok
    assert len(result.plan) == 2
    assert [m.severity for m in result.messages] == ['warn']


def test_to_dict_shape(staggered_inputs):
    data = build_plan(staggered_inputs)[1].to_dict()
    assert data['group'] == 2
    assert data['startDay'] == 1
    assert data['endDay'] == 13
    assert data['harvestDay'] == 11
    assert data['cathodeOutRange'] == "5 - 7"
    assert data['cleaningRange'] == "11 - 12"
    assert data['phases'][0] == {
        'name': 'Anode im Elektrolyt', 'startDay': 1, 'endDay': 10,
        'durationDays': 10, 'type': 'anode',
    }
    assert data['events'][-1] == {'name': 'Cleaning done', 'day': 13}


def test_zero_length_cathode_phase():
    """A zero-day sub-phase ends the day before it starts and the chain continues."""
    inputs = HarvestPlanInputs(
        group_count=1,
        anode_days=5,
        cathode_phases=(0, 3, 2),
        cleaning_days=0,
        harvest_order=(1,),
        group_start_offset_days=0,
    )
    gp = build_plan(inputs)[0]

    cathode_in = _phase(gp, 'cathode-in')
    assert (cathode_in.start_day, cathode_in.end_day, cathode_in.duration_days) == (1, 0, 0)

    cathode_out = _phase(gp, 'cathode-out')
    assert (cathode_out.start_day, cathode_out.end_day) == (1, 3)
    assert gp.cathode_out_range == "1 - 3"
    assert [(e.name, e.day) for e in gp.events][:2] == [('Einheben', 1), ('Kathoden raus', 1)]
