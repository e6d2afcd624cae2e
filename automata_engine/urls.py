from django.urls import path
from . import views

urlpatterns = [
    # Text block format -> JSON automaton
    path('api/parse/', views.parse_automaton_text, name='parse_automaton'),

    # Run an input string, DFA or NFA alike
    path('api/simulate/', views.simulate_fsa, name='simulate_fsa'),

    # DFA / NFA classification and structural properties
    path('api/classify/', views.check_fsa_type, name='classify_fsa'),

    # FSA Transformation endpoints
    path('api/nfa-to-dfa/', views.convert_nfa_to_dfa, name='nfa_to_dfa'),
    path('api/minimise-dfa/', views.min_dfa, name='minimise_dfa'),
]
