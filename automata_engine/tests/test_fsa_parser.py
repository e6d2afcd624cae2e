from django.test import TestCase

from automata_engine.automaton import Automaton
from automata_engine.exceptions import InvalidAutomatonStructure
from automata_engine.fsa_parser import format_automaton, parse_automaton


SAMPLE = """States: q0,q1,q2
Alphabet: 0,1
Transitions:
q0,0,q1
q0,1,q0
q1,0,q2
q1,1,q0
q2,0,q2
q2,1,q2
Start: q0
Final: q2
"""


class TestParseAutomaton(TestCase):
    def test_parse_sample(self):
        automaton = parse_automaton(SAMPLE)
        self.assertEqual(automaton.states, ('q0', 'q1', 'q2'))
        self.assertEqual(automaton.alphabet, ('0', '1'))
        self.assertEqual(automaton.start_state, 'q0')
        self.assertEqual(automaton.final_states, frozenset({'q2'}))
        self.assertEqual(automaton.transition_count, 6)
        self.assertEqual(automaton.targets('q1', '0'), frozenset({'q2'}))

    def test_whitespace_blank_lines_and_header_case(self):
        text = """
        states:  a , b
        ALPHABET: x

        transitions: a, x, b
          b,x,a

        start: a
        final: b,
        """
        automaton = parse_automaton(text)
        self.assertEqual(automaton.states, ('a', 'b'))
        self.assertEqual(automaton.targets('a', 'x'), frozenset({'b'}))
        self.assertEqual(automaton.targets('b', 'x'), frozenset({'a'}))
        self.assertEqual(automaton.final_states, frozenset({'b'}))

    def test_empty_final_section(self):
        automaton = parse_automaton(SAMPLE.replace('Final: q2', 'Final:'))
        self.assertEqual(automaton.final_states, frozenset())

    def test_nondeterministic_transitions_kept(self):
        automaton = parse_automaton(SAMPLE.replace('q0,1,q0', 'q0,0,q0'))
        self.assertEqual(automaton.targets('q0', '0'), frozenset({'q0', 'q1'}))

    def test_missing_sections(self):
        for header in ('States:', 'Alphabet:', 'Transitions:', 'Start:', 'Final:'):
            lines = [line for line in SAMPLE.splitlines() if not line.startswith(header)]
            with self.subTest(header=header):
                with self.assertRaises(InvalidAutomatonStructure):
                    parse_automaton('\n'.join(lines))

    def test_repeated_section(self):
        with self.assertRaisesRegex(InvalidAutomatonStructure, 'repeated'):
            parse_automaton(SAMPLE + 'Start: q1\n')

    def test_empty_start(self):
        with self.assertRaisesRegex(InvalidAutomatonStructure, 'Start'):
            parse_automaton(SAMPLE.replace('Start: q0', 'Start:'))

    def test_malformed_transition_line(self):
        with self.assertRaisesRegex(InvalidAutomatonStructure, 'Line 5'):
            parse_automaton(SAMPLE.replace('q0,1,q0', 'q0,1'))

    def test_content_outside_sections(self):
        with self.assertRaisesRegex(InvalidAutomatonStructure, 'unexpected content'):
            parse_automaton('q0,0,q1\n' + SAMPLE)

    def test_unknown_state_in_transition(self):
        with self.assertRaisesRegex(InvalidAutomatonStructure, 'unknown state'):
            parse_automaton(SAMPLE.replace('q2,1,q2', 'q2,1,q3'))

    def test_non_string_input(self):
        with self.assertRaises(InvalidAutomatonStructure):
            parse_automaton(None)


class TestFormatAutomaton(TestCase):
    def test_format_matches_input_format(self):
        automaton = parse_automaton(SAMPLE)
        self.assertEqual(format_automaton(automaton), SAMPLE.strip())

    def test_formatted_text_parses_back(self):
        automaton = Automaton.build(
            states=['s0', 's1', 's2'],
            alphabet=['a', 'b'],
            transitions=[('s0', 'a', 's0'), ('s0', 'a', 's1'), ('s1', 'b', 's2')],
            start_state='s0',
            final_states=[],
        )
        self.assertEqual(parse_automaton(format_automaton(automaton)), automaton)
