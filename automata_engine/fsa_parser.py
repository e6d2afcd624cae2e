"""
Text adapter for the block format automata are typed in::

    States: q0,q1,q2
    Alphabet: 0,1
    Transitions:
    q0,0,q1
    q1,1,q2
    Start: q0
    Final: q2
"""
import logging
from typing import Dict, List, Optional, Tuple

from .automaton import Automaton
from .exceptions import InvalidAutomatonStructure

logger = logging.getLogger(__name__)

SECTIONS = ('states', 'alphabet', 'transitions', 'start', 'final')


def parse_automaton(text: str) -> Automaton:
    """
    Parses an automaton written in the block format.

    Header names are case-insensitive, blank lines are ignored and every
    section must appear exactly once. ``Final:`` may be left empty for an
    automaton with no accepting states.

    Args:
        text: The automaton description

    Returns:
        Automaton: The validated automaton

    Raises:
        InvalidAutomatonStructure: If a section is missing, repeated or malformed,
            or if the described automaton is structurally invalid.
    """
    if not isinstance(text, str):
        raise InvalidAutomatonStructure('Automaton text must be a string')

    sections: Dict[str, str] = {}
    transitions: List[Tuple[str, str, str]] = []
    in_transitions = False

    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue

        header, value = _split_header(line)
        if header is None:
            if not in_transitions:
                raise InvalidAutomatonStructure(f"Line {line_number}: unexpected content '{line}'")
            transitions.append(_parse_transition(line, line_number))
            continue

        if header in sections:
            raise InvalidAutomatonStructure(f"Line {line_number}: section '{header.capitalize()}' is repeated")
        sections[header] = value
        in_transitions = header == 'transitions'

        # Allow the first transition on the header line itself
        if in_transitions and value:
            transitions.append(_parse_transition(value, line_number))

    for section in SECTIONS:
        if section not in sections:
            raise InvalidAutomatonStructure(f"Missing section '{section.capitalize()}:'")

    start = sections['start']
    if not start:
        raise InvalidAutomatonStructure("Section 'Start:' must name a state")

    automaton = Automaton.build(
        states=_split_list(sections['states']),
        alphabet=_split_list(sections['alphabet']),
        transitions=transitions,
        start_state=start,
        final_states=_split_list(sections['final']),
    )
    logger.debug('Parsed automaton with %d states and %d transitions',
                 len(automaton.states), automaton.transition_count)
    return automaton


def format_automaton(automaton: Automaton) -> str:
    """Writes an automaton back in the block format accepted by :func:`parse_automaton`"""
    lines = [
        f"States: {','.join(str(state) for state in automaton.states)}",
        f"Alphabet: {','.join(str(symbol) for symbol in automaton.alphabet)}",
        'Transitions:',
    ]
    lines.extend(f'{source},{symbol},{target}' for source, symbol, target in automaton.transition_triples())
    lines.append(f'Start: {automaton.start_state}')
    lines.append(f"Final: {','.join(str(state) for state in automaton.ordered(automaton.final_states))}")
    return '\n'.join(lines)


def _split_header(line: str) -> Tuple[Optional[str], str]:
    if ':' not in line:
        return None, line
    name, value = line.split(':', 1)
    name = name.strip().lower()
    if name not in SECTIONS:
        return None, line
    return name, value.strip()


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(',') if item.strip()]


def _parse_transition(line: str, line_number: int) -> Tuple[str, str, str]:
    parts = [part.strip() for part in line.split(',')]
    if len(parts) != 3 or not all(parts):
        raise InvalidAutomatonStructure(
            f"Line {line_number}: transition '{line}' must have the form from,symbol,to")
    return parts[0], parts[1], parts[2]
