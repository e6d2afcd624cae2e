from django.apps import AppConfig


class AutomataEngineConfig(AppConfig):
    name = 'automata_engine'
    verbose_name = 'Finite automaton engine'
