from django.test import TestCase

from automata_engine.automaton import Automaton
from automata_engine.exceptions import PreconditionViolation, SizeLimitExceeded
from automata_engine.fsa_properties import DFA, classify
from automata_engine.fsa_simulation import accepts
from automata_engine.fsa_transformations import (
    complete_dfa,
    minimise_dfa,
    minimize,
    nfa_to_dfa,
    remove_unreachable_states,
)
from automata_engine.limits import WorkBudget
from automata_engine.tests.fixtures import all_strings, make_dfa, make_nfa, make_partial_nfa


def make_redundant_dfa():
    # Accepts every string of length >= 2; q1~q2 and q3~q4
    return Automaton.build(
        states=['q0', 'q1', 'q2', 'q3', 'q4'],
        alphabet=['0', '1'],
        transitions=[
            ('q0', '0', 'q1'), ('q0', '1', 'q2'),
            ('q1', '0', 'q3'), ('q1', '1', 'q4'),
            ('q2', '0', 'q4'), ('q2', '1', 'q3'),
            ('q3', '0', 'q3'), ('q3', '1', 'q4'),
            ('q4', '0', 'q4'), ('q4', '1', 'q3'),
        ],
        start_state='q0',
        final_states=['q3', 'q4'],
    )


class TestMinimiseDFA(TestCase):
    """Test cases for DFA minimization function"""

    def assert_same_language(self, first, second, max_length=6):
        for input_string in all_strings(first.alphabet, max_length):
            self.assertEqual(accepts(first, input_string), accepts(second, input_string),
                             f"Disagreement on string '{input_string}'")

    def test_equivalent_states_merged(self):
        dfa = make_redundant_dfa()
        minimisation = minimise_dfa(dfa)
        minimised = minimisation.dfa

        self.assertEqual(minimised.states, ('q0', 'q1', 'q2'))
        self.assertEqual(minimised.start_state, 'q0')
        self.assertEqual(minimised.final_states, frozenset({'q2'}))
        self.assertEqual(minimisation.blocks, {
            'q0': frozenset({'q0'}),
            'q1': frozenset({'q1', 'q2'}),
            'q2': frozenset({'q3', 'q4'}),
        })
        self.assertEqual(classify(minimised), DFA)
        self.assert_same_language(dfa, minimised)

    def test_minimisation_is_idempotent(self):
        once = minimise_dfa(make_redundant_dfa()).dfa
        twice = minimise_dfa(once).dfa
        self.assertEqual(len(twice.states), len(once.states))
        self.assertEqual(twice, once)
        self.assert_same_language(once, twice)

    def test_simple_dfa_minimization(self):
        """Strings ending with 'a': S0, S1 and S2 are all equivalent"""
        dfa = Automaton.from_dict({
            'states': ['S0', 'S1', 'S2', 'S3'],
            'alphabet': ['a', 'b'],
            'transitions': {
                'S0': {'a': ['S3'], 'b': ['S1']},
                'S1': {'a': ['S3'], 'b': ['S2']},
                'S2': {'a': ['S3'], 'b': ['S1']},
                'S3': {'a': ['S3'], 'b': ['S1']}
            },
            'startingState': 'S0',
            'acceptingStates': ['S3']
        })
        minimisation = minimise_dfa(dfa)
        self.assertEqual(len(minimisation.dfa.states), 2)
        self.assertEqual(minimisation.blocks['q0'], frozenset({'S0', 'S1', 'S2'}))
        self.assert_same_language(dfa, minimisation.dfa)

    def test_already_minimal(self):
        dfa = make_dfa()
        minimisation = minimise_dfa(dfa)
        self.assertEqual(len(minimisation.dfa.states), 3)
        self.assertEqual(minimisation.dfa.states, ('q0', 'q1', 'q2'))
        self.assertEqual(minimisation.blocks['q1'], frozenset({'q1'}))

    def test_single_block(self):
        dfa = Automaton.build(
            states=['a', 'b'],
            alphabet=['x'],
            transitions=[('a', 'x', 'b'), ('b', 'x', 'a')],
            start_state='a',
            final_states=['a', 'b'],
        )
        minimised = minimise_dfa(dfa).dfa
        self.assertEqual(minimised.states, ('q0',))
        self.assertEqual(minimised.final_states, frozenset({'q0'}))
        self.assertEqual(minimised.targets('q0', 'x'), frozenset({'q0'}))

    def test_no_accepting_states(self):
        dfa = Automaton.build(['a', 'b'], ['x'], [('a', 'x', 'b'), ('b', 'x', 'a')], 'a', [])
        minimised = minimise_dfa(dfa).dfa
        self.assertEqual(minimised.states, ('q0',))
        self.assertEqual(minimised.final_states, frozenset())

    def test_unreachable_blocks_named_last(self):
        dfa = Automaton.build(
            states=['u', 's'],
            alphabet=['x'],
            transitions=[('u', 'x', 'u'), ('s', 'x', 's')],
            start_state='s',
            final_states=['s'],
        )
        minimisation = minimise_dfa(dfa)
        self.assertEqual(minimisation.blocks, {'q0': frozenset({'s'}), 'q1': frozenset({'u'})})
        self.assertEqual(len(minimise_dfa(remove_unreachable_states(dfa)).dfa.states), 1)

    def test_nondeterministic_input_rejected(self):
        with self.assertRaisesRegex(PreconditionViolation, 'deterministic'):
            minimise_dfa(make_nfa())

    def test_partial_input_rejected(self):
        partial_dfa = nfa_to_dfa(make_partial_nfa()).dfa
        with self.assertRaisesRegex(PreconditionViolation, 'complete'):
            minimise_dfa(partial_dfa)

    def test_convert_then_minimise(self):
        nfa = make_nfa()
        minimised = minimise_dfa(nfa_to_dfa(nfa).dfa).dfa
        # Q2 and Q3 are both accepting sinks for "contains 00"
        self.assertEqual(len(minimised.states), 3)
        self.assert_same_language(nfa, minimised)

    def test_complete_then_minimise(self):
        nfa = make_partial_nfa()
        minimised = minimise_dfa(complete_dfa(nfa_to_dfa(nfa).dfa)).dfa
        self.assertEqual(classify(minimised), DFA)
        self.assert_same_language(nfa, minimised)

    def test_us_spelling_alias(self):
        self.assertIs(minimize, minimise_dfa)

    def test_size_limit(self):
        with self.assertRaises(SizeLimitExceeded):
            minimise_dfa(make_redundant_dfa(), budget=WorkBudget(max_states=4))

    def test_input_not_mutated(self):
        dfa = make_redundant_dfa()
        before = dfa.to_dict()
        minimise_dfa(dfa)
        self.assertEqual(dfa.to_dict(), before)


class TestRemoveUnreachableStates(TestCase):
    def test_unreachable_state_removed(self):
        dfa = Automaton.build(
            states=['s', 'u'],
            alphabet=['x'],
            transitions=[('s', 'x', 's'), ('u', 'x', 's')],
            start_state='s',
            final_states=['s', 'u'],
        )
        pruned = remove_unreachable_states(dfa)
        self.assertEqual(pruned.states, ('s',))
        self.assertEqual(pruned.final_states, frozenset({'s'}))
        self.assertEqual(pruned.transition_count, 1)

    def test_connected_automaton_returned_unchanged(self):
        dfa = make_dfa()
        self.assertIs(remove_unreachable_states(dfa), dfa)
