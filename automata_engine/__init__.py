from .automaton import Automaton
from .exceptions import (
    AutomatonError,
    InvalidAutomatonStructure,
    InvalidSymbol,
    PreconditionViolation,
    SizeLimitExceeded,
)
from .fsa_parser import format_automaton, parse_automaton
from .fsa_properties import DFA, NFA, classify
from .fsa_simulation import SimulationResult, Step, accepts, simulate
from .fsa_transformations import complete_dfa, minimise_dfa, minimize, nfa_to_dfa
from .limits import WorkBudget
