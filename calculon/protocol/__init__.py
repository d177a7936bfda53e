"""Protocol module for Calculon."""

from .commands import (
    Command,
    CommandType,
    OperandError,
    ProtocolError,
    Response,
    ResponseKind,
)
from .parser import ProtocolParser

__all__ = [
    "Command",
    "CommandType",
    "OperandError",
    "ProtocolError",
    "Response",
    "ResponseKind",
    "ProtocolParser",
]
