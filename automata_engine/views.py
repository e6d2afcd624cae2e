import json
import logging
from functools import wraps

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from .automaton import Automaton
from .conf import engine_settings, work_budget
from .exceptions import (
    AutomatonError,
    InvalidAutomatonStructure,
    InvalidSymbol,
    PreconditionViolation,
    SizeLimitExceeded,
)
from .fsa_parser import parse_automaton
from .fsa_properties import DESCRIPTIONS, DFA, check_all_properties, classify
from .fsa_simulation import simulate
from .fsa_transformations import minimise_dfa, nfa_to_dfa

logger = logging.getLogger(__name__)

STATUS_CODES = {
    InvalidAutomatonStructure: 400,
    InvalidSymbol: 400,
    PreconditionViolation: 422,
    SizeLimitExceeded: 413,
}


class BadRequest(Exception):
    pass


def _parse_body(request) -> dict:
    try:
        data = json.loads(request.body)
    except ValueError:
        raise BadRequest('Invalid JSON body') from None
    if not isinstance(data, dict):
        raise BadRequest('Request body must be a JSON object')
    return data


def _load_automaton(data: dict) -> Automaton:
    """Builds the automaton of a request, given either as JSON (``fsa``) or in the text format"""
    fsa = data.get('fsa')
    if isinstance(fsa, str):
        return parse_automaton(fsa)
    if fsa:
        return Automaton.from_dict(fsa)
    if isinstance(data.get('text'), str):
        return parse_automaton(data['text'])
    raise BadRequest('Missing FSA definition')


def _statistics(automaton: Automaton) -> dict:
    return {
        'states_count': len(automaton.states),
        'alphabet_size': len(automaton.alphabet),
        'transitions_count': automaton.transition_count,
        'accepting_states_count': len(automaton.final_states),
        'type': classify(automaton),
    }


def _state_sets(automaton: Automaton, mapping: dict) -> dict:
    return {name: list(automaton.ordered(states)) for name, states in mapping.items()}


def _error_response(error: AutomatonError) -> JsonResponse:
    payload = {'error': str(error), 'error_type': error.error_type}
    if isinstance(error, InvalidSymbol):
        payload['symbol'] = error.symbol
        payload['position'] = error.position
    return JsonResponse(payload, status=STATUS_CODES.get(type(error), 400))


def api_view(view):
    """Maps the errors raised while handling a JSON API request to error responses"""

    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except BadRequest as e:
            return JsonResponse({'error': str(e), 'error_type': 'bad_request'}, status=400)
        except AutomatonError as e:
            return _error_response(e)
        except Exception as e:
            logger.exception('Unexpected error in %s', view.__name__)
            return JsonResponse({'error': f'Server error: {str(e)}'}, status=500)

    return csrf_exempt(require_POST(wrapper))


@api_view
def parse_automaton_text(request):
    """
    Parses an automaton written in the text block format.

    Expects a POST request with a JSON body containing:
    - text: The automaton description

    Returns a JSON response with the automaton in its JSON form.
    """
    data = _parse_body(request)
    text = data.get('text')
    if not isinstance(text, str):
        raise BadRequest('Missing automaton text')

    automaton = parse_automaton(text)
    return JsonResponse({
        'automaton': automaton.to_dict(),
        'type': classify(automaton),
    })


@api_view
def simulate_fsa(request):
    """
    Runs an input string against a DFA or NFA.

    Expects a POST request with a JSON body containing:
    - fsa: The FSA definition (JSON object or text block)
    - input: The input, a string or a list of symbols

    Returns a JSON response with the verdict and the execution trace.
    """
    data = _parse_body(request)
    automaton = _load_automaton(data)
    input_symbols = data.get('input', '')
    if not isinstance(input_symbols, (str, list)):
        raise BadRequest('input must be a string or a list of symbols')

    result = simulate(automaton, input_symbols)
    response = result.to_dict()
    response['type'] = classify(automaton)
    return JsonResponse(response)


@api_view
def check_fsa_type(request):
    """
    Classifies an FSA as a DFA or an NFA and reports its structural properties.
    """
    data = _parse_body(request)
    automaton = _load_automaton(data)
    properties = check_all_properties(automaton)

    return JsonResponse({
        'type': properties['type'],
        'description': DESCRIPTIONS[properties['type']],
        'properties': properties,
    })


@api_view
def convert_nfa_to_dfa(request):
    """
    Converts an NFA to an equivalent DFA.

    Expects a POST request with a JSON body containing:
    - fsa: The FSA definition
    - complete: Optional, add a sink state so the DFA is total. Defaults to the
      COMPLETE_CONVERTED_DFA setting.
    """
    data = _parse_body(request)
    automaton = _load_automaton(data)
    complete = data.get('complete', engine_settings()['COMPLETE_CONVERTED_DFA'])
    if not isinstance(complete, bool):
        raise BadRequest('complete must be a boolean')

    original_type = classify(automaton)
    conversion = nfa_to_dfa(automaton, budget=work_budget(), complete=complete)

    if original_type == DFA:
        message = 'Input was already a DFA, returned equivalent DFA'
    else:
        message = 'NFA successfully converted to DFA'

    return JsonResponse({
        'success': True,
        'original_fsa': automaton.to_dict(),
        'converted_dfa': conversion.dfa.to_dict(),
        'subsets': _state_sets(automaton, conversion.subsets),
        'statistics': {
            'original': _statistics(automaton),
            'converted': _statistics(conversion.dfa),
        },
        'message': message,
    })


@api_view
def min_dfa(request):
    """
    Minimises a complete DFA.

    Returns a JSON response with the minimal DFA and the original states merged
    into each of its states.
    """
    data = _parse_body(request)
    automaton = _load_automaton(data)
    minimisation = minimise_dfa(automaton, budget=work_budget())
    removed = len(automaton.states) - len(minimisation.dfa.states)

    return JsonResponse({
        'success': True,
        'original_fsa': automaton.to_dict(),
        'minimised_dfa': minimisation.dfa.to_dict(),
        'blocks': _state_sets(automaton, minimisation.blocks),
        'statistics': {
            'original': _statistics(automaton),
            'minimised': _statistics(minimisation.dfa),
            'states_removed': removed,
        },
        'message': 'DFA was already minimal' if removed == 0 else f'Merged away {removed} state(s)',
    })
