import itertools

from automata_engine.automaton import Automaton


def make_dfa():
    # Accepts strings containing 00
    return Automaton.build(
        states=['q0', 'q1', 'q2'],
        alphabet=['0', '1'],
        transitions=[
            ('q0', '0', 'q1'), ('q0', '1', 'q0'),
            ('q1', '0', 'q2'), ('q1', '1', 'q0'),
            ('q2', '0', 'q2'), ('q2', '1', 'q2'),
        ],
        start_state='q0',
        final_states=['q2'],
    )


def make_nfa():
    # Same as make_dfa, except q0 may stay in q0 or move to q1 on 0
    return Automaton.build(
        states=['q0', 'q1', 'q2'],
        alphabet=['0', '1'],
        transitions=[
            ('q0', '0', 'q0'), ('q0', '0', 'q1'), ('q0', '1', 'q0'),
            ('q1', '0', 'q2'), ('q1', '1', 'q0'),
            ('q2', '0', 'q2'), ('q2', '1', 'q2'),
        ],
        start_state='q0',
        final_states=['q2'],
    )


def make_partial_nfa():
    # a*ab, with no transition at all out of s2
    return Automaton.build(
        states=['s0', 's1', 's2'],
        alphabet=['a', 'b'],
        transitions=[('s0', 'a', 's0'), ('s0', 'a', 's1'), ('s1', 'b', 's2')],
        start_state='s0',
        final_states=['s2'],
    )


def all_strings(alphabet, max_length):
    """Every string over ``alphabet`` up to ``max_length`` symbols, shortest first"""
    for length in range(max_length + 1):
        for symbols in itertools.product(alphabet, repeat=length):
            yield ''.join(symbols)
