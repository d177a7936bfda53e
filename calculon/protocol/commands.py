"""
Protocol Command and Response Definitions

This module defines the data structures for protocol commands, responses
and protocol errors.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

from ..state.numeric import format_number


class CommandType(Enum):
    """Enumeration of supported command types."""
    ADD = auto()
    SUBTRACT = auto()
    POWER = auto()
    SHOW = auto()
    EMPTY = auto()
    UNKNOWN = auto()


# Number of arguments each recognized command takes
ARITY = {
    CommandType.ADD: 1,
    CommandType.SUBTRACT: 1,
    CommandType.POWER: 1,
    CommandType.SHOW: 0,
}


class ProtocolError(ValueError):
    """Base class for errors raised while parsing a request line."""


class OperandError(ProtocolError):
    """Raised when a command operand is not a valid number."""

    def __init__(self, command: str, token: str):
        super().__init__(f"{command}: invalid operand {token!r}")
        self.command = command
        self.token = token


@dataclass
class Command:
    """
    Represents a parsed protocol command.

    Attributes:
        type: The type of command
        name: The command token as sent by the client
        args: Raw argument tokens following the name
        operand: Parsed numeric operand (unary commands only)
        raw: The original line with the terminator stripped
    """
    type: CommandType
    name: str = ""
    args: List[str] = field(default_factory=list)
    operand: Optional[float] = None
    raw: str = ""

    @property
    def is_valid(self) -> bool:
        """Check if a recognized command has the right number of arguments."""
        expected = ARITY.get(self.type)
        if expected is None:
            return False
        return len(self.args) == expected

    @property
    def arity_message(self) -> str:
        """Diagnostic logged when the argument count is wrong."""
        if ARITY.get(self.type) == 0:
            return f"{self.name} command requires exactly zero arguments."
        return f"{self.name} command requires exactly one argument."


class ResponseKind(Enum):
    """Enumeration of response line templates."""
    GREETING = "{text}"
    ADDED = "X += {operand} = {value}"
    SUBTRACTED = "X -= {operand} = {value}"
    POWERED = "X ^= {operand} = {value}"
    SHOWN = "X = {value}"
    UNKNOWN_COMMAND = "Unknown command: {text}"


@dataclass
class Response:
    """
    Represents a single protocol response line.

    Attributes:
        kind: Which template the line uses
        value: Result value of X (arithmetic and SHOW responses)
        operand: Operand echoed back (arithmetic responses)
        text: Free text (greeting, unknown command token)
    """
    kind: ResponseKind
    value: Optional[float] = None
    operand: Optional[float] = None
    text: str = ""

    @classmethod
    def greeting(cls, text: str) -> "Response":
        """Create the help line sent when a session starts."""
        return cls(kind=ResponseKind.GREETING, text=text)

    @classmethod
    def added(cls, operand: float, value: float) -> "Response":
        """Create the response for ADD."""
        return cls(kind=ResponseKind.ADDED, operand=operand, value=value)

    @classmethod
    def subtracted(cls, operand: float, value: float) -> "Response":
        """Create the response for SUBTRACT."""
        return cls(kind=ResponseKind.SUBTRACTED, operand=operand, value=value)

    @classmethod
    def powered(cls, operand: float, value: float) -> "Response":
        """Create the response for POWER."""
        return cls(kind=ResponseKind.POWERED, operand=operand, value=value)

    @classmethod
    def shown(cls, value: float) -> "Response":
        """Create the response for SHOW."""
        return cls(kind=ResponseKind.SHOWN, value=value)

    @classmethod
    def unknown_command(cls, token: str) -> "Response":
        """Create the response for an unrecognized command name."""
        return cls(kind=ResponseKind.UNKNOWN_COMMAND, text=token)

    def render(self) -> str:
        """Render the line body (without terminator)."""
        return self.kind.value.format(
            text=self.text,
            operand=format_number(self.operand) if self.operand is not None else "",
            value=format_number(self.value) if self.value is not None else "",
        )
