class ChartowordError(Exception):
    """Base class for errors raised by chartoword."""


class ConfigurationError(ChartowordError, ValueError):
    """Invalid options, detected before any lattice is expanded."""


class SymbolTableError(ChartowordError):
    """An intern table that does not describe a bijection between
       label sequences and the ids 0..n-1."""


class LatticeFormatError(ChartowordError):
    def __init__(self, message: str, line_number: int):
        self.line_number = line_number
        super().__init__(f"line {line_number}: {message}")
