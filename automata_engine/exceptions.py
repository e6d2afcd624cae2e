from typing import Optional


class AutomatonError(ValueError):
    """Base class for every error raised by the automaton engine"""

    error_type = 'automaton_error'


class InvalidAutomatonStructure(AutomatonError):
    """The automaton definition is malformed (dangling references, missing sections...)"""

    error_type = 'invalid_automaton_structure'


class InvalidSymbol(AutomatonError):
    """An input string contains a symbol that is not in the automaton's alphabet"""

    error_type = 'invalid_symbol'

    def __init__(self, symbol, position: int):
        self.symbol = symbol
        self.position = position
        super().__init__(f"Symbol '{symbol}' at position {position} is not in the alphabet")


class PreconditionViolation(AutomatonError):
    """An operation was called on an automaton it does not support"""

    error_type = 'precondition_violation'


class SizeLimitExceeded(AutomatonError):
    """A conversion or minimisation went past its configured work budget"""

    error_type = 'size_limit_exceeded'

    def __init__(self, message: str, limit: Optional[float] = None, observed: Optional[float] = None):
        self.limit = limit
        self.observed = observed
        super().__init__(message)
