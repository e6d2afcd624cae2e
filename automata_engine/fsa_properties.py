from typing import Dict, FrozenSet, List, Tuple
from collections import deque

from .automaton import Automaton

DFA = 'DFA'
NFA = 'NFA'

DESCRIPTIONS = {
    DFA: 'Deterministic Finite Automaton',
    NFA: 'Non-deterministic Finite Automaton',
}


def classify(automaton: Automaton) -> str:
    """
    Classifies an automaton as a DFA or an NFA.

    An automaton is a DFA only if every (state, symbol) pair has exactly one
    transition. A pair with several targets makes it an NFA, and so does a
    pair with no target at all: a deterministic but partial automaton is
    reported as an NFA.

    Args:
        automaton: The automaton to classify

    Returns:
        str: ``DFA`` or ``NFA``
    """
    if nondeterministic_pairs(automaton):
        return NFA
    if missing_transitions(automaton):
        return NFA
    return DFA


def is_deterministic(automaton: Automaton) -> bool:
    """
    Checks if the automaton never branches.

    Unlike :func:`classify` this allows missing transitions: it only checks
    that each (state, symbol) pair has at most one target.
    """
    return not nondeterministic_pairs(automaton)


def is_complete(automaton: Automaton) -> bool:
    """
    Checks if the automaton is complete.

    An automaton is complete if for each state and each symbol there is at least one transition.
    """
    return not missing_transitions(automaton)


def nondeterministic_pairs(automaton: Automaton) -> List[Tuple]:
    """Every (state, symbol) pair with more than one target, in declaration order"""
    pairs = []
    for state_idx, state in enumerate(automaton.states):
        for symbol_idx, symbol in enumerate(automaton.alphabet):
            if len(automaton.target_indices(state_idx, symbol_idx)) > 1:
                pairs.append((state, symbol))
    return pairs


def missing_transitions(automaton: Automaton) -> List[Tuple]:
    """Every (state, symbol) pair with no transition, in declaration order"""
    pairs = []
    for state_idx, state in enumerate(automaton.states):
        for symbol_idx, symbol in enumerate(automaton.alphabet):
            if not automaton.target_indices(state_idx, symbol_idx):
                pairs.append((state, symbol))
    return pairs


def reachable_states(automaton: Automaton) -> FrozenSet:
    """States reachable from the start state (the start state included)"""
    start = automaton.state_index(automaton.start_state)
    reachable = {start}
    queue = deque([start])

    while queue:
        current = queue.popleft()
        for symbol_idx in range(len(automaton.alphabet)):
            for target in automaton.target_indices(current, symbol_idx):
                if target not in reachable:
                    reachable.add(target)
                    queue.append(target)

    return frozenset(automaton.states[i] for i in reachable)


def is_connected(automaton: Automaton) -> bool:
    """
    Checks if the automaton is connected.

    An automaton is connected if all states are reachable from the starting state.
    """
    return len(reachable_states(automaton)) == len(automaton.states)


def dead_states(automaton: Automaton) -> FrozenSet:
    """States from which no final state can be reached"""
    # BFS backwards from the final states
    predecessors: Dict[int, set] = {}
    for state_idx in range(len(automaton.states)):
        for symbol_idx in range(len(automaton.alphabet)):
            for target in automaton.target_indices(state_idx, symbol_idx):
                predecessors.setdefault(target, set()).add(state_idx)

    alive = {automaton.state_index(state) for state in automaton.final_states}
    queue = deque(alive)

    while queue:
        current = queue.popleft()
        for predecessor in predecessors.get(current, ()):
            if predecessor not in alive:
                alive.add(predecessor)
                queue.append(predecessor)

    return frozenset(state for i, state in enumerate(automaton.states) if i not in alive)


def check_all_properties(automaton: Automaton) -> Dict:
    """
    Check all automaton properties at once.

    Returns:
        Dict: JSON-ready summary:
        {
            'type': 'DFA' | 'NFA',
            'deterministic': bool,
            'complete': bool,
            'connected': bool,
            'unreachable_states': [...],
            'dead_states': [...],
            'nondeterministic_pairs': [[state, symbol], ...],
            'missing_transitions': [[state, symbol], ...],
            'states_count': int,
            'alphabet_size': int,
            'transitions_count': int,
            'accepting_states_count': int
        }
    """
    branching = nondeterministic_pairs(automaton)
    missing = missing_transitions(automaton)
    reachable = reachable_states(automaton)

    if branching or missing:
        automaton_type = NFA
    else:
        automaton_type = DFA

    return {
        'type': automaton_type,
        'deterministic': not branching,
        'complete': not missing,
        'connected': len(reachable) == len(automaton.states),
        'unreachable_states': [state for state in automaton.states if state not in reachable],
        'dead_states': list(automaton.ordered(dead_states(automaton))),
        'nondeterministic_pairs': [list(pair) for pair in branching],
        'missing_transitions': [list(pair) for pair in missing],
        'states_count': len(automaton.states),
        'alphabet_size': len(automaton.alphabet),
        'transitions_count': automaton.transition_count,
        'accepting_states_count': len(automaton.final_states),
    }
