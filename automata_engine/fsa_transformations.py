import logging
from typing import Dict, FrozenSet, List, NamedTuple, Optional, Set, Tuple
from collections import deque

from .automaton import Automaton, Transition
from .exceptions import PreconditionViolation
from .fsa_properties import DFA, classify, is_deterministic, missing_transitions, nondeterministic_pairs
from .fsa_properties import reachable_states
from .limits import UNLIMITED, WorkBudget

logger = logging.getLogger(__name__)

DEAD_STATE = 'DEAD'


class SubsetConstruction(NamedTuple):
    """Result of NFA to DFA conversion"""
    dfa: Automaton
    subsets: Dict[str, FrozenSet]  # DFA state name -> NFA states it stands for


class Minimisation(NamedTuple):
    """Result of DFA minimisation"""
    dfa: Automaton
    blocks: Dict[str, FrozenSet]  # minimised state name -> merged original states


def nfa_to_dfa(nfa: Automaton, budget: Optional[WorkBudget] = None, complete: bool = False) -> SubsetConstruction:
    """
    Converts a non-deterministic finite automaton (NFA) to a deterministic finite automaton (DFA)
    using subset construction algorithm.

    Only subsets reachable from ``{start}`` are built, breadth-first. They are named
    ``Q0`` (the start subset), ``Q1``, ``Q2``... in the order they are discovered.
    When a subset has no successor on a symbol no transition is emitted, so the
    result may be partial unless ``complete`` is set.

    Args:
        nfa: The automaton to convert. Any automaton is accepted, a DFA converts to
            an isomorphic DFA.
        budget: Bounds on the input size, the number of produced states and the run time
        complete: Add a non-accepting sink state so that the result is total

    Returns:
        SubsetConstruction: The DFA and the NFA states behind each of its states

    Raises:
        SizeLimitExceeded: If the budget is exhausted
    """
    meter = (budget or UNLIMITED).start('Subset construction')
    meter.check_input(len(nfa.states))

    start_subset = frozenset({nfa.state_index(nfa.start_state)})
    names: Dict[FrozenSet[int], str] = {start_subset: 'Q0'}
    queue = deque([start_subset])
    transitions: List[Transition] = []

    while queue:
        meter.check_deadline()
        current = queue.popleft()

        for symbol_idx, symbol in enumerate(nfa.alphabet):
            moved = set()
            for state_idx in current:
                moved.update(nfa.target_indices(state_idx, symbol_idx))

            if not moved:
                continue

            target = frozenset(moved)
            if target not in names:
                names[target] = f'Q{len(names)}'
                meter.check_states(len(names))
                queue.append(target)

            transitions.append((names[current], symbol, names[target]))

    # dicts keep insertion order, which is the discovery order
    states = list(names.values())
    finals = [name for subset, name in names.items()
              if any(nfa.is_final(nfa.states[i]) for i in subset)]
    subsets = {name: frozenset(nfa.states[i] for i in subset) for subset, name in names.items()}

    if complete:
        dead_state = _add_dead_state(states, nfa.alphabet, transitions)
        if dead_state is not None:
            subsets[dead_state] = frozenset()
            meter.check_states(len(states))

    dfa = Automaton(states, nfa.alphabet, transitions, 'Q0', finals)
    logger.debug('Subset construction: %d NFA states -> %d DFA states',
                 len(nfa.states), len(dfa.states))
    return SubsetConstruction(dfa, subsets)


def complete_dfa(dfa: Automaton) -> Automaton:
    """
    Completes a DFA by adding a dead state and missing transitions if necessary.

    Args:
        dfa: A deterministic, possibly partial, automaton

    Returns:
        Automaton: A complete DFA accepting the same language. An automaton that is
        already complete is returned as is.

    Raises:
        PreconditionViolation: If the input has a (state, symbol) pair with several targets
    """
    if not is_deterministic(dfa):
        raise PreconditionViolation('Input must be a deterministic FSA (DFA)')

    if not missing_transitions(dfa):
        return dfa

    states = list(dfa.states)
    transitions = dfa.transition_triples()
    _add_dead_state(states, dfa.alphabet, transitions)
    return Automaton(states, dfa.alphabet, transitions, dfa.start_state, dfa.final_states)


def _add_dead_state(states: List, alphabet: Tuple, transitions: List[Transition]) -> Optional[str]:
    """
    Helper function to add a dead state to transitions if needed for completeness.

    ``states`` and ``transitions`` are extended in place.

    Returns:
        The name of the added dead state, or None if every pair already had a transition
    """
    defined: Set[Tuple] = {(source, symbol) for source, symbol, _ in transitions}
    missing = [(state, symbol) for state in states for symbol in alphabet if (state, symbol) not in defined]
    if not missing:
        return None

    # Find an unused name for the dead state
    dead_state = DEAD_STATE
    counter = 1
    while dead_state in states:
        dead_state = f'{DEAD_STATE}_{counter}'
        counter += 1

    states.append(dead_state)
    transitions.extend((state, symbol, dead_state) for state, symbol in missing)
    # Dead state transitions to itself
    transitions.extend((dead_state, symbol, dead_state) for symbol in alphabet)
    return dead_state


def minimise_dfa(dfa: Automaton, budget: Optional[WorkBudget] = None) -> Minimisation:
    """
    Minimises a complete DFA by partition refinement.

    States start split into final and non-final blocks. A worklist of splitter
    blocks is then processed: for each symbol, every block is split into the
    states that move into the splitter on that symbol and those that do not,
    until no block splits any further. Each remaining block becomes one state.

    Minimised states are named ``q0`` (the block of the start state), ``q1``...
    in breadth-first order from the start, followed by unreachable blocks in
    declaration order, so the output is reproducible.

    Args:
        dfa: The automaton to minimise
        budget: Bounds on the number of states and the run time

    Returns:
        Minimisation: The minimal DFA and the original states merged into each of its states

    Raises:
        PreconditionViolation: If ``dfa`` is not a complete DFA
        SizeLimitExceeded: If the budget is exhausted
    """
    if classify(dfa) != DFA:
        branching = nondeterministic_pairs(dfa)
        if branching:
            state, symbol = branching[0]
            raise PreconditionViolation(
                f"DFA minimisation requires a deterministic FSA: state '{state}' "
                f"has several transitions on '{symbol}'")
        state, symbol = missing_transitions(dfa)[0]
        raise PreconditionViolation(
            f"DFA minimisation requires a complete DFA: state '{state}' "
            f"has no transition on '{symbol}'")

    meter = (budget or UNLIMITED).start('DFA minimisation')
    meter.check_states(len(dfa.states))

    partition = _refine(dfa, meter)
    minimised = _quotient(dfa, partition)
    logger.debug('DFA minimisation: %d states -> %d states', len(dfa.states), len(minimised.dfa.states))
    return minimised


minimize = minimise_dfa


def _refine(dfa: Automaton, meter) -> List[FrozenSet[int]]:
    """Splits the states into blocks of equivalent states"""
    alphabet_size = len(dfa.alphabet)

    # reverse[symbol][target] = states moving to target on symbol
    reverse: List[Dict[int, Set[int]]] = [{} for _ in range(alphabet_size)]
    for state_idx in range(len(dfa.states)):
        for symbol_idx in range(alphabet_size):
            for target in dfa.target_indices(state_idx, symbol_idx):
                reverse[symbol_idx].setdefault(target, set()).add(state_idx)

    accepting = frozenset(dfa.state_index(state) for state in dfa.final_states)
    non_accepting = frozenset(range(len(dfa.states))) - accepting

    partition = [block for block in (accepting, non_accepting) if block]
    worklist = [min(partition, key=len)] if len(partition) == 2 else []

    while worklist:
        meter.check_deadline()
        splitter = worklist.pop()

        for symbol_idx in range(alphabet_size):
            involved = set()
            for state_idx in splitter:
                involved |= reverse[symbol_idx].get(state_idx, set())
            if not involved:
                continue

            new_partition = []
            for block in partition:
                inter = block & involved
                diff = block - involved
                if inter and diff:
                    new_partition.extend([inter, diff])
                    if block in worklist:
                        worklist.remove(block)
                        worklist.extend([inter, diff])
                    else:
                        worklist.append(inter if len(inter) <= len(diff) else diff)
                else:
                    new_partition.append(block)
            partition = new_partition

    return partition


def _quotient(dfa: Automaton, partition: List[FrozenSet[int]]) -> Minimisation:
    """Builds the automaton with one state per block"""
    block_of: Dict[int, int] = {}
    for block_idx, block in enumerate(partition):
        for state_idx in block:
            block_of[state_idx] = block_idx

    # Any member represents its block, take the first declared one
    representative = [min(block) for block in partition]
    alphabet_size = len(dfa.alphabet)

    def successor(block_idx: int, symbol_idx: int) -> int:
        target, = dfa.target_indices(representative[block_idx], symbol_idx)
        return block_of[target]

    start_block = block_of[dfa.state_index(dfa.start_state)]
    order = [start_block]
    seen = {start_block}
    queue = deque([start_block])
    while queue:
        current = queue.popleft()
        for symbol_idx in range(alphabet_size):
            target = successor(current, symbol_idx)
            if target not in seen:
                seen.add(target)
                order.append(target)
                queue.append(target)
    order.extend(sorted((i for i in range(len(partition)) if i not in seen), key=representative.__getitem__))

    names = {block_idx: f'q{position}' for position, block_idx in enumerate(order)}
    transitions = [(names[block_idx], symbol, names[successor(block_idx, symbol_idx)])
                   for block_idx in order
                   for symbol_idx, symbol in enumerate(dfa.alphabet)]
    finals = [names[block_idx] for block_idx in order if dfa.is_final(dfa.states[representative[block_idx]])]

    minimised = Automaton([names[block_idx] for block_idx in order], dfa.alphabet, transitions,
                          names[start_block], finals)
    blocks = {names[block_idx]: frozenset(dfa.states[i] for i in partition[block_idx]) for block_idx in order}
    return Minimisation(minimised, blocks)


def remove_unreachable_states(automaton: Automaton) -> Automaton:
    """Remove states that are unreachable from the start state."""
    reachable = reachable_states(automaton)
    if len(reachable) == len(automaton.states):
        return automaton

    return Automaton(
        [state for state in automaton.states if state in reachable],
        automaton.alphabet,
        [t for t in automaton.transition_triples() if t[0] in reachable],
        automaton.start_state,
        automaton.final_states & reachable,
    )
