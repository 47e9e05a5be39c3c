"""
models.py — Python dataclasses for the harvest plan application.

Inputs (HarvestPlanInputs, FormValues), plan output (PlanPhase, PlanEvent,
GroupPlan, PlanResult) and validation findings (ValidationMessage).
Output entities are frozen: a plan is built once and replaced wholesale
by the next generation call, never edited in place.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


# Phase types, in the order phases appear within a group
PHASE_ANODE = 'anode'
PHASE_CATHODE_IN = 'cathode-in'
PHASE_CATHODE_OUT = 'cathode-out'
PHASE_CATHODE_REINSERTED = 'cathode-reinserted'
PHASE_CLEANING = 'cleaning'

PHASE_TYPES = (
    PHASE_ANODE,
    PHASE_CATHODE_IN,
    PHASE_CATHODE_OUT,
    PHASE_CATHODE_REINSERTED,
    PHASE_CLEANING,
)

SEVERITY_ERROR = 'error'
SEVERITY_WARN = 'warn'
SEVERITY_INFO = 'info'

SEVERITIES = (SEVERITY_ERROR, SEVERITY_WARN, SEVERITY_INFO)


@dataclass(frozen=True)
class HarvestPlanInputs:
    """Validated parameters for one plan generation."""
    group_count: int
    anode_days: int
    cathode_phases: Tuple[int, int, int]
    cleaning_days: int
    harvest_order: Tuple[int, ...]
    group_start_offset_days: int

    def __post_init__(self):
        if len(self.cathode_phases) != 3:
            raise ValueError(
                f"cathode_phases needs exactly 3 durations, got {len(self.cathode_phases)}"
            )
        # Accept lists from callers but keep the frozen value hashable
        object.__setattr__(self, 'cathode_phases', tuple(self.cathode_phases))
        object.__setattr__(self, 'harvest_order', tuple(self.harvest_order))


@dataclass(frozen=True)
class FormValues:
    """Raw form bundle. None marks a missing or non-numeric field."""
    group_count: Optional[int] = None
    anode_days: Optional[int] = None
    cathode_a: Optional[int] = None
    cathode_b: Optional[int] = None
    cathode_c: Optional[int] = None
    cleaning_days: Optional[int] = None
    harvest_order: str = ""
    group_start_offset_days: Optional[int] = None

    def to_dict(self):
        return {
            'group_count': self.group_count,
            'anode_days': self.anode_days,
            'cathode_a': self.cathode_a,
            'cathode_b': self.cathode_b,
            'cathode_c': self.cathode_c,
            'cleaning_days': self.cleaning_days,
            'harvest_order': self.harvest_order,
            'group_start_offset_days': self.group_start_offset_days,
        }


@dataclass(frozen=True)
class ValidationMessage:
    """A single validation finding shown to the user."""
    severity: str
    detail: str
    field: Optional[str] = None

    def __post_init__(self):
        if self.severity not in SEVERITIES:
            raise ValueError(f"Unknown severity: {self.severity}")

    @property
    def is_error(self) -> bool:
        return self.severity == SEVERITY_ERROR

    def to_dict(self):
        data = {'severity': self.severity, 'detail': self.detail}
        if self.field:
            data['field'] = self.field
        return data


@dataclass(frozen=True)
class PlanPhase:
    """A closed day interval [start_day, end_day] within a group's timeline."""
    name: str
    start_day: int
    end_day: int
    duration_days: int
    type: str

    def to_dict(self):
        return {
            'name': self.name,
            'startDay': self.start_day,
            'endDay': self.end_day,
            'durationDays': self.duration_days,
            'type': self.type,
        }


@dataclass(frozen=True)
class PlanEvent:
    """A named single-day marker."""
    name: str
    day: int

    def to_dict(self):
        return {'name': self.name, 'day': self.day}


@dataclass(frozen=True)
class GroupPlan:
    """Full timeline for one group."""
    group: int
    start_day: int
    end_day: int
    phases: Tuple[PlanPhase, ...]
    events: Tuple[PlanEvent, ...]
    harvest_day: int
    cathode_out_range: str
    cleaning_range: Optional[str] = None

    def to_dict(self):
        data = {
            'group': self.group,
            'startDay': self.start_day,
            'endDay': self.end_day,
            'phases': [p.to_dict() for p in self.phases],
            'events': [e.to_dict() for e in self.events],
            'harvestDay': self.harvest_day,
            'cathodeOutRange': self.cathode_out_range,
        }
        if self.cleaning_range is not None:
            data['cleaningRange'] = self.cleaning_range
        return data


@dataclass(frozen=True)
class PlanResult:
    """Outcome of a "generate plan" action: the plan plus its findings."""
    plan: Tuple[GroupPlan, ...] = ()
    messages: Tuple[ValidationMessage, ...] = ()
    max_plan_day: int = 0
    timeline_days: int = 0

    @property
    def ok(self) -> bool:
        return not any(m.is_error for m in self.messages)

    def to_dict(self):
        return {
            'plan': [gp.to_dict() for gp in self.plan],
            'messages': [m.to_dict() for m in self.messages],
            'maxPlanDay': self.max_plan_day,
            'timelineDays': self.timeline_days,
        }
