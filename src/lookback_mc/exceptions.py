"""
exceptions.py
-------------
Typed failures raised while building a priced instrument.

Every error is detected eagerly, at construction time, and is terminal for
that construction attempt. All of them subclass ``ValueError`` as well, so
code written against plain ``ValueError`` keeps catching them.
"""


class LookbackError(Exception):
    """Base class for all engine errors."""


class InvalidParameterError(LookbackError, ValueError):
    """A market or simulation parameter is outside its admissible range."""


class InvalidOptionKindError(LookbackError, ValueError):
    """The option kind token is neither ``call`` nor ``put``."""


class InvalidDomainError(LookbackError, ValueError):
    """The valuation/maturity pair spans less than one simulated day."""
