"""
config.py — Default values and field limits for the harvest plan form.

PLAN_DEFAULTS seeds the form on first load and on "reset to defaults".
FIELD_LIMITS holds the inclusive (min, max) range per numeric field;
a max of None means the field is only bounded from below.

The Flask factory copies PLAN_DEFAULTS into app.config['PLAN_DEFAULTS'],
so a deployment (or a test) can override them with test_config.
"""

PLAN_DEFAULTS = {
    'group_count': 8,
    'anode_days': 14,
    'cathode_a': 5,
    'cathode_b': 5,
    'cathode_c': 4,
    'cleaning_days': 0,
    'group_start_offset_days': 1,
}

FIELD_LIMITS = {
    'group_count': (1, 100),
    'anode_days': (1, 365),
    'cathode_a': (0, None),
    'cathode_b': (0, None),
    'cathode_c': (0, None),
    'cleaning_days': (0, 60),
    'group_start_offset_days': (0, 30),
}

# Minimum horizon (days) a timeline view covers, even for short plans
TIMELINE_MIN_DAYS = 42

# Placeholder written to exports when a group has no cleaning phase
NO_CLEANING_PLACEHOLDER = '-'

EXPORT_BASENAME = 'harvest-plan'
