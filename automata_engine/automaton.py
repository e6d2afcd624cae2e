"""
Immutable finite automaton model.

Every component of the engine works on :class:`Automaton` instances. All
structural validation happens in the constructor; instances are never mutated.

Transitions are kept as a mapping ``(state_index, symbol_index) -> frozenset``
of target indices.
"""
from types import MappingProxyType
from typing import Dict, FrozenSet, Hashable, Iterable, List, Mapping, Sequence, Tuple

from .exceptions import InvalidAutomatonStructure

Transition = Tuple[Hashable, Hashable, Hashable]

REQUIRED_KEYS = ('states', 'alphabet', 'transitions', 'startingState', 'acceptingStates')


class Automaton:
    """A DFA or NFA: states, alphabet, transition relation, start state and final states"""

    def __init__(self,
                 states: Iterable[Hashable],
                 alphabet: Iterable[Hashable],
                 transitions: Iterable[Transition],
                 start_state: Hashable,
                 final_states: Iterable[Hashable]):
        states = tuple(states)
        alphabet = tuple(alphabet)

        if not states:
            raise InvalidAutomatonStructure('An automaton needs at least one state')
        if not alphabet:
            raise InvalidAutomatonStructure('An automaton needs a non-empty alphabet')

        state_index = _index(states, 'state')
        symbol_index = _index(alphabet, 'symbol')

        if not _declared(state_index, start_state):
            raise InvalidAutomatonStructure(f"Start state '{start_state}' is not in the states list")

        finals = set()
        for state in final_states:
            if not _declared(state_index, state):
                raise InvalidAutomatonStructure(f"Final state '{state}' is not in the states list")
            finals.add(state)

        delta: Dict[Tuple[int, int], set] = {}
        for transition in transitions:
            if len(transition) != 3:
                raise InvalidAutomatonStructure(
                    f'Transition {transition!r} must be a (from, symbol, to) triple')
            source, symbol, target = transition
            if not _declared(state_index, source):
                raise InvalidAutomatonStructure(f"Transition {transition!r} starts in unknown state '{source}'")
            if not _declared(state_index, target):
                raise InvalidAutomatonStructure(f"Transition {transition!r} ends in unknown state '{target}'")
            if not _declared(symbol_index, symbol):
                raise InvalidAutomatonStructure(f"Transition {transition!r} uses unknown symbol '{symbol}'")
            key = (state_index[source], symbol_index[symbol])
            delta.setdefault(key, set()).add(state_index[target])

        self._states = states
        self._alphabet = alphabet
        self._state_index = MappingProxyType(state_index)
        self._symbol_index = MappingProxyType(symbol_index)
        self._delta = MappingProxyType({key: frozenset(targets) for key, targets in delta.items()})
        self._start_state = start_state
        self._final_states = frozenset(finals)

    @classmethod
    def build(cls, states, alphabet, transitions, start_state, final_states) -> 'Automaton':
        """
        Validates the given components and returns a new automaton.

        Raises:
            InvalidAutomatonStructure: If states or alphabet are empty, the start state or a
                final state is undeclared, or a transition references an undeclared state/symbol.
        """
        return cls(states, alphabet, transitions, start_state, final_states)

    @classmethod
    def from_dict(cls, fsa: Mapping) -> 'Automaton':
        """
        Builds an automaton from its JSON representation.

        Args:
            fsa: A dictionary with the following keys:
                - states: List of all states
                - alphabet: List of symbols in the alphabet
                - transitions: Either ``{state: {symbol: [targets]}}``, a list of
                  ``[from, symbol, to]`` triples or a list of ``{from, symbol, to}`` objects
                - startingState: The starting state
                - acceptingStates: List of accepting states

        Returns:
            Automaton: The validated automaton

        Raises:
            InvalidAutomatonStructure: If a key is missing, has the wrong type, or the
                described automaton is invalid.
        """
        if not isinstance(fsa, Mapping):
            raise InvalidAutomatonStructure('FSA must be a dictionary')

        for key in REQUIRED_KEYS:
            if key not in fsa:
                raise InvalidAutomatonStructure(f'Missing required key: {key}')

        for key in ('states', 'alphabet', 'acceptingStates'):
            if not isinstance(fsa[key], (list, tuple)):
                raise InvalidAutomatonStructure(f'{key} must be a list')

        return cls(fsa['states'], fsa['alphabet'], _transitions_from_json(fsa['transitions']),
                   fsa['startingState'], fsa['acceptingStates'])

    def to_dict(self) -> Dict:
        """Returns the nested-dictionary JSON form, ordered as the automaton was declared"""
        transitions = {}
        for state in self._states:
            transitions[state] = {}
            for symbol in self._alphabet:
                targets = self.targets(state, symbol)
                if targets:
                    transitions[state][symbol] = list(self.ordered(targets))

        return {
            'states': list(self._states),
            'alphabet': list(self._alphabet),
            'transitions': transitions,
            'startingState': self._start_state,
            'acceptingStates': list(self.ordered(self._final_states)),
        }

    @property
    def states(self) -> Tuple:
        return self._states

    @property
    def alphabet(self) -> Tuple:
        return self._alphabet

    @property
    def start_state(self) -> Hashable:
        return self._start_state

    @property
    def final_states(self) -> FrozenSet:
        return self._final_states

    @property
    def transition_count(self) -> int:
        return sum(len(targets) for targets in self._delta.values())

    def state_index(self, state: Hashable) -> int:
        return self._state_index[state]

    def symbol_index(self, symbol: Hashable) -> int:
        return self._symbol_index[symbol]

    def has_symbol(self, symbol: Hashable) -> bool:
        return _declared(self._symbol_index, symbol)

    def is_final(self, state: Hashable) -> bool:
        return state in self._final_states

    def target_indices(self, state_idx: int, symbol_idx: int) -> FrozenSet[int]:
        """Successor state indices of a state index on a symbol index (possibly empty)"""
        return self._delta.get((state_idx, symbol_idx), frozenset())

    def targets(self, state: Hashable, symbol: Hashable) -> FrozenSet:
        """All states reachable from ``state`` by consuming ``symbol``"""
        indices = self.target_indices(self._state_index[state], self._symbol_index[symbol])
        return frozenset(self._states[i] for i in indices)

    def transition_triples(self) -> List[Transition]:
        """Every transition as a ``(from, symbol, to)`` triple in declaration order"""
        triples = []
        for state_idx, state in enumerate(self._states):
            for symbol_idx, symbol in enumerate(self._alphabet):
                for target_idx in sorted(self.target_indices(state_idx, symbol_idx)):
                    triples.append((state, symbol, self._states[target_idx]))
        return triples

    def ordered(self, states: Iterable[Hashable]) -> Tuple:
        """Sorts a collection of this automaton's states by declaration order"""
        return tuple(sorted(states, key=self._state_index.__getitem__))

    def __eq__(self, other):
        return (isinstance(other, Automaton)
                and self._states == other._states
                and self._alphabet == other._alphabet
                and self._delta == other._delta
                and self._start_state == other._start_state
                and self._final_states == other._final_states)

    def __hash__(self):
        return hash((self._states, self._alphabet, self._start_state, self._final_states))

    def __repr__(self):
        return (f'Automaton(states={list(self._states)}, alphabet={list(self._alphabet)}, '
                f'start={self._start_state!r}, finals={list(self.ordered(self._final_states))}, '
                f'transitions={self.transition_count})')


def _index(items: Sequence[Hashable], kind: str) -> Dict[Hashable, int]:
    index = {}
    for position, item in enumerate(items):
        try:
            if item in index:
                raise InvalidAutomatonStructure(f"Duplicate {kind} '{item}'")
        except TypeError:
            raise InvalidAutomatonStructure(f'{kind.capitalize()} {item!r} is not hashable') from None
        index[item] = position
    return index


def _transitions_from_json(transitions) -> List[Transition]:
    """Flattens any of the supported JSON transition layouts into triples"""
    triples = []

    if isinstance(transitions, Mapping):
        for state, by_symbol in transitions.items():
            if not isinstance(by_symbol, Mapping):
                raise InvalidAutomatonStructure(f"Transitions of state '{state}' must be a dictionary")
            for symbol, targets in by_symbol.items():
                if isinstance(targets, str):
                    targets = [targets]
                if not isinstance(targets, (list, tuple)):
                    raise InvalidAutomatonStructure(
                        f"Targets of state '{state}' on '{symbol}' must be a list")
                triples.extend((state, symbol, target) for target in targets)
        return triples

    if isinstance(transitions, (list, tuple)):
        for item in transitions:
            if isinstance(item, Mapping):
                try:
                    triples.append((item['from'], item['symbol'], item['to']))
                except KeyError as e:
                    raise InvalidAutomatonStructure(f'Transition {item!r} is missing key {e}') from None
            elif isinstance(item, (list, tuple)):
                triples.append(tuple(item))
            else:
                raise InvalidAutomatonStructure(f'Unsupported transition entry {item!r}')
        return triples

    raise InvalidAutomatonStructure('transitions must be a dictionary or a list')


def _declared(index: Mapping, item) -> bool:
    try:
        return item in index
    except TypeError:
        return False
