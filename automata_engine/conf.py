from typing import Dict

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .limits import WorkBudget

DEFAULTS = {
    # Subset construction refuses NFAs larger than this (2**n possible subsets)
    'MAX_INPUT_STATES': 20,
    'MAX_STATES': 4096,
    'TIME_BUDGET_SECONDS': None,
    'COMPLETE_CONVERTED_DFA': False,
}


def engine_settings() -> Dict:
    """``settings.AUTOMATA_ENGINE`` merged over the defaults"""
    overrides = getattr(settings, 'AUTOMATA_ENGINE', None) or {}
    unknown = set(overrides) - set(DEFAULTS)
    if unknown:
        raise ImproperlyConfigured(f"Unknown AUTOMATA_ENGINE settings: {', '.join(sorted(unknown))}")
    return {**DEFAULTS, **overrides}


def work_budget() -> WorkBudget:
    config = engine_settings()
    return WorkBudget(
        max_input_states=config['MAX_INPUT_STATES'],
        max_states=config['MAX_STATES'],
        time_budget_seconds=config['TIME_BUDGET_SECONDS'],
    )
