"""
Protocol Parser Module

This module handles parsing of request lines into Command objects and
formatting of Response objects into wire lines.
"""

import re

from .commands import ARITY, Command, CommandType, OperandError, Response
from ..state.numeric import parse_float

# Line terminator for every server-sent line
LINE_END = "\r\n"

# Unicode White_Space characters. str.split() also splits on the
# \x1c-\x1f information separators, which are not whitespace here.
_WHITESPACE = re.compile(
    r"[\t\n\x0b\x0c\r \x85\xa0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000]+"
)


class ProtocolParser:
    """
    Parser for the Calculon text protocol.

    Protocol Format:
        Request:  <COMMAND> [OPERAND]\\n
        Response: <LINE>\\r\\n

    Commands (names are case-sensitive):
        ADD <float>       -> X += <float> = <X>
        SUBTRACT <float>  -> X -= <float> = <X>
        POWER <float>     -> X ^= <float> = <X>
        SHOW              -> X = <X>
        anything else     -> Unknown command: <name>

    Blank lines are skipped. A recognized command with the wrong number
    of arguments is returned with is_valid False; an operand that is not
    a number raises OperandError.
    """

    COMMANDS = {
        "ADD": CommandType.ADD,
        "SUBTRACT": CommandType.SUBTRACT,
        "POWER": CommandType.POWER,
        "SHOW": CommandType.SHOW,
    }

    def parse_request(self, data: str) -> Command:
        """
        Parse a raw request line into a Command object.

        Args:
            data: Raw request line (may include trailing newline)

        Returns:
            Command object. type is EMPTY for blank lines and UNKNOWN
            for unrecognized command names.

        Raises:
            OperandError: If the argument count is right but the operand
                does not parse as a float.

        Examples:
            >>> parser = ProtocolParser()
            >>> cmd = parser.parse_request("ADD 1.5")
            >>> cmd.type == CommandType.ADD
            True
            >>> cmd.operand
            1.5
        """
        raw = data.rstrip("\r\n")
        parts = [part for part in _WHITESPACE.split(raw) if part]
        if not parts:
            return Command(type=CommandType.EMPTY, raw=raw)

        name, args = parts[0], parts[1:]
        command_type = self.COMMANDS.get(name, CommandType.UNKNOWN)
        command = Command(type=command_type, name=name, args=args, raw=raw)

        # Arity is checked before the operand is parsed
        if command.is_valid and ARITY[command_type] == 1:
            try:
                command.operand = parse_float(args[0])
            except ValueError as exc:
                raise OperandError(name, args[0]) from exc

        return command

    def format_response(self, response: Response) -> str:
        """
        Format a Response object into a protocol line.

        Examples:
            >>> parser = ProtocolParser()
            >>> parser.format_response(Response.added(5.0, 5.0))
            'X += 5 = 5\\r\\n'
            >>> parser.format_response(Response.unknown_command("FOO"))
            'Unknown command: FOO\\r\\n'
        """
        return response.render() + LINE_END
