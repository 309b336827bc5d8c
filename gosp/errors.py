from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from gosp.reader.source import Location


class GospError(Exception):
    """ Base class for all Gosp errors"""

    def __init__(self, message: str, location: Optional[Location] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self) -> str:
        if self.location is None:
            return self.message
        return f"{self.location}: {self.message}"


class GospLexError(GospError):
    """ Raised when the lexer cannot produce a token"""


class GospSyntaxError(GospError):
    """ Raised when there is a syntax error"""


class GospNameError(GospSyntaxError):
    """ Raised when a name is unknown, reserved or already defined"""


class GospTypeError(GospError):
    """ Raised when the types of arguments passed to a function are incorrect"""


class GospArityError(GospTypeError):
    """ Raised when the number of arguments passed to a function is incorrect"""


class GospRuntimeError(GospError):
    """ Raised when a checked expression still fails during evaluation"""
