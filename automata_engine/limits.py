import logging
import time
from typing import Callable, NamedTuple, Optional

from .exceptions import SizeLimitExceeded

logger = logging.getLogger(__name__)


class WorkBudget(NamedTuple):
    """Caller-imposed bounds for subset construction and minimisation. ``None`` means unbounded."""
    max_input_states: Optional[int] = None
    max_states: Optional[int] = None
    time_budget_seconds: Optional[float] = None

    def start(self, operation: str, clock: Callable[[], float] = time.monotonic) -> 'BudgetMeter':
        return BudgetMeter(self, operation, clock)


UNLIMITED = WorkBudget()


class BudgetMeter:
    """Tracks one run of an algorithm against a :class:`WorkBudget`"""

    def __init__(self, budget: WorkBudget, operation: str, clock: Callable[[], float]):
        self.budget = budget
        self.operation = operation
        self._clock = clock
        self._started = clock()

    def check_input(self, state_count: int):
        limit = self.budget.max_input_states
        if limit is not None and state_count > limit:
            self._exceeded(f'{self.operation} accepts at most {limit} input states, got {state_count}',
                           limit, state_count)

    def check_states(self, state_count: int):
        limit = self.budget.max_states
        if limit is not None and state_count > limit:
            self._exceeded(f'{self.operation} produced more than {limit} states',
                           limit, state_count)

    def check_deadline(self):
        limit = self.budget.time_budget_seconds
        if limit is None:
            return
        elapsed = self._clock() - self._started
        if elapsed > limit:
            self._exceeded(f'{self.operation} ran past its {limit}s time budget', limit, elapsed)

    def _exceeded(self, message: str, limit, observed):
        logger.warning('Work budget exceeded: %s', message)
        raise SizeLimitExceeded(message, limit=limit, observed=observed)
