import logging
from typing import Dict, FrozenSet, Hashable, Iterator, NamedTuple, Optional, Sequence, Tuple

from .automaton import Automaton
from .exceptions import InvalidSymbol

logger = logging.getLogger(__name__)

INITIAL = 'initial'
TRANSITION = 'transition'
REJECT = 'reject'
ACCEPT = 'accept'


class Step(NamedTuple):
    """One entry of an execution trace"""
    index: int
    symbol: Optional[Hashable]  # None for the initial step and the final verdict
    active_states: Tuple
    kind: str

    def to_dict(self) -> Dict:
        return {
            'step': self.index,
            'symbol': self.symbol,
            'active_states': list(self.active_states),
            'kind': self.kind,
        }


class SimulationResult(NamedTuple):
    """Verdict of a run together with the trace that explains it"""
    accepted: bool
    trace: Tuple[Step, ...]
    final_states: FrozenSet

    def to_dict(self) -> Dict:
        return {
            'accepted': self.accepted,
            'trace': [step.to_dict() for step in self.trace],
            'final_states': list(self.trace[-1].active_states),
        }


def simulate(automaton: Automaton, input_symbols: Sequence[Hashable]) -> SimulationResult:
    """
    Runs an input against a DFA or NFA, tracking every simultaneously active state.

    Args:
        automaton: The automaton to run
        input_symbols: The input, as a sequence of alphabet symbols. A string is
            consumed one character at a time.

    Returns:
        SimulationResult: ``accepted`` is True when at least one active state is final
        after the whole input. The run stops early, rejected, as soon as no state
        survives a symbol. ``trace`` always starts with an ``initial`` step and ends
        with an ``accept`` or ``reject`` step.

    Raises:
        InvalidSymbol: If the input contains a symbol outside the alphabet. This is
            reported for the first such symbol, before anything is simulated.
    """
    symbols = list(input_symbols)
    for position, symbol in enumerate(symbols):
        if not automaton.has_symbol(symbol):
            raise InvalidSymbol(symbol, position)

    trace = tuple(simulate_steps(automaton, symbols))
    verdict = trace[-1]
    result = SimulationResult(
        accepted=verdict.kind == ACCEPT,
        trace=trace,
        final_states=frozenset(verdict.active_states),
    )
    logger.debug('Simulated %d symbols: %s', len(symbols), verdict.kind)
    return result


def simulate_steps(automaton: Automaton, symbols: Sequence[Hashable]) -> Iterator[Step]:
    """
    Yields the execution trace of ``symbols`` one step at a time.

    The symbols must already belong to the alphabet; :func:`simulate` checks this.
    """
    active: FrozenSet[int] = frozenset({automaton.state_index(automaton.start_state)})
    yield Step(0, None, _names(automaton, active), INITIAL)

    for position, symbol in enumerate(symbols, start=1):
        symbol_idx = automaton.symbol_index(symbol)

        # Union of the successors of every surviving branch
        next_active = set()
        for state_idx in active:
            next_active.update(automaton.target_indices(state_idx, symbol_idx))

        if not next_active:
            yield Step(position, symbol, (), REJECT)
            return

        active = frozenset(next_active)
        yield Step(position, symbol, _names(automaton, active), TRANSITION)

    accepted = any(automaton.is_final(automaton.states[i]) for i in active)
    yield Step(len(symbols) + 1, None, _names(automaton, active), ACCEPT if accepted else REJECT)


def accepts(automaton: Automaton, input_symbols: Sequence[Hashable]) -> bool:
    """Returns True if the automaton accepts the input"""
    return simulate(automaton, input_symbols).accepted


def _names(automaton: Automaton, indices: FrozenSet[int]) -> Tuple:
    return tuple(automaton.states[i] for i in sorted(indices))
