"""
Async TCP Server Module

This module implements the asynchronous TCP server for Calculon: the
connection acceptor and the per-connection command session.

Key asyncio pieces:
- asyncio.start_server(): accept loop, one task per connection
- StreamReader.readline(): read one request line
- StreamWriter.write() / drain(): send a response line
- writer.close() / wait_closed(): connection cleanup
"""

import asyncio
import logging
from asyncio import StreamReader, StreamWriter
from typing import Optional, Set

from ..config.settings import settings
from ..protocol.commands import CommandType, OperandError, Response
from ..protocol.parser import ProtocolParser
from ..state.cell import StateCell

logger = logging.getLogger(__name__)


class CalculonServer:
    """
    Asynchronous TCP server exposing one shared value to many clients.

    Each client connection is handled in its own coroutine. All sessions
    share a single StateCell; every cell operation is atomic, and the
    cell's lock is never held across socket I/O.

    Session lifecycle:
    - Greeting line listing the supported commands
    - One response line per command, in request order
    - Ends on peer close, I/O error, invalid UTF-8, or an operand that
      is not a number

    Usage:
        server = CalculonServer(host='127.0.0.1', port=4673)
        await server.start()  # Runs forever

    Attributes:
        host: Server bind address
        port: Server port number
        cell: The StateCell shared by all connections
        parser: The ProtocolParser for parsing commands
    """

    def __init__(
            self,
            host: str = None,
            port: int = None,
            cell: StateCell = None,
    ):
        """
        Initialize the server.

        Args:
            host: Bind address (default from settings)
            port: Port number (default from settings)
            cell: StateCell instance (creates new one if not provided)
        """
        self.host = host if host is not None else settings.HOST
        self.port = port if port is not None else settings.PORT
        self.cell = cell if cell is not None else StateCell()
        self.parser = ProtocolParser()

        # Server state
        self._server: Optional[asyncio.Server] = None
        self._running = False
        self._connection_count = 0
        self._active_connections = 0
        self._total_requests = 0
        self._sessions: Set[asyncio.Task] = set()

    async def handle_client(
            self,
            reader: StreamReader,
            writer: StreamWriter
    ) -> None:
        """
        Run one command session.

        Sends the greeting, then reads lines until the client disconnects
        or an unrecoverable error occurs. Errors end only this session.

        Args:
            reader: StreamReader for reading from the client
            writer: StreamWriter for writing to the client
        """
        addr = writer.get_extra_info('peername')
        session = asyncio.current_task()
        self._sessions.add(session)
        self._connection_count += 1
        self._active_connections += 1
        logger.debug(f"Client connected: {addr}")

        try:
            await self._send(writer, Response.greeting(settings.GREETING))

            while True:
                data = await reader.readline()
                if not data:
                    logger.debug(f"Client disconnected: {addr}")
                    break

                line = data.decode('utf-8')
                logger.debug(f"Received line from {addr}: {line.rstrip()!r}")

                command = self.parser.parse_request(line)

                if command.type == CommandType.EMPTY:
                    continue

                if command.type == CommandType.UNKNOWN:
                    response = Response.unknown_command(command.name)
                elif not command.is_valid:
                    logger.warning(command.arity_message)
                    continue
                else:
                    self._total_requests += 1
                    response = self._execute_command(command)

                await self._send(writer, response)

        except OperandError as exc:
            logger.warning(f"Closing session {addr}: {exc}")
        except UnicodeDecodeError:
            logger.debug(f"Closing session {addr}: invalid UTF-8 input")
        except ValueError as exc:
            # StreamReader limit exceeded
            logger.debug(f"Closing session {addr}: {exc}")
        except ConnectionError:
            logger.debug(f"Connection reset by client: {addr}")
        except Exception as exc:
            logger.exception(f"Error handling client {addr}: {exc}")
        finally:
            self._active_connections -= 1
            self._sessions.discard(session)
            writer.close()
            try:
                await writer.wait_closed()
            except (ConnectionError, OSError) as exc:
                logger.debug(f"Error closing connection {addr}: {exc}")

    async def _send(self, writer: StreamWriter, response: Response) -> None:
        """Write one response line and wait for the buffer to drain."""
        writer.write(self.parser.format_response(response).encode('utf-8'))
        await writer.drain()

    def _execute_command(self, command) -> Response:
        """
        Apply a valid command to the shared cell.

        Args:
            command: The Command object to execute

        Returns:
            Response object with the result
        """
        if command.type == CommandType.ADD:
            return Response.added(command.operand, self.cell.add(command.operand))

        if command.type == CommandType.SUBTRACT:
            return Response.subtracted(command.operand, self.cell.subtract(command.operand))

        if command.type == CommandType.POWER:
            return Response.powered(command.operand, self.cell.power(command.operand))

        if command.type == CommandType.SHOW:
            return Response.shown(self.cell.show())

        raise NotImplementedError(f"No handler for command type {command.type.name}")

    async def start(self) -> None:
        """
        Bind the listening socket and accept connections forever.

        A failure to bind (OSError) propagates to the caller. Failures on
        individual connections never stop the accept loop.

        Example:
            server = CalculonServer(port=4673)
            asyncio.run(server.start())
        """
        if self._running:
            return

        self._server = await asyncio.start_server(
            self.handle_client,
            self.host,
            self.port,
            limit=settings.READ_BUFFER_SIZE,
        )
        self._running = True

        addrs = ', '.join(str(sock.getsockname()) for sock in self._server.sockets or [])
        logger.info(f"Serving on {addrs}")

        try:
            async with self._server:
                await self._server.serve_forever()
        except asyncio.CancelledError:
            logger.debug("Server start cancelled")
        finally:
            self._running = False

    async def stop(self) -> None:
        """
        Stop accepting connections and end all open sessions.

        Open sessions are cancelled before waiting on the listener:
        Server.wait_closed() blocks while any connection is open (3.12+).
        """
        server, self._server = self._server, None
        if server is None:
            return

        server.close()
        if hasattr(server, "close_clients"):  # Python 3.13+
            server.close_clients()

        sessions = list(self._sessions)
        for task in sessions:
            task.cancel()
        if sessions:
            logger.info(f"Closing {len(sessions)} open session(s)")
            await asyncio.gather(*sessions, return_exceptions=True)

        try:
            await server.wait_closed()
        finally:
            self._running = False

    def is_running(self) -> bool:
        """Check if the server is currently running."""
        return self._running

    def get_stats(self) -> dict:
        """
        Get server statistics.

        Returns:
            Dictionary with connection counts, request counts, and cell
            statistics.
        """
        return {
            "running": self._running,
            "host": self.host,
            "port": self.port,
            "total_connections": self._connection_count,
            "active_connections": self._active_connections,
            "total_requests": self._total_requests,
            "cell_stats": self.cell.get_stats(),
        }


async def run_server(host: str = None, port: int = None) -> None:
    """
    Convenience function to create and run the server.

    Usage:
        asyncio.run(run_server(port=4673))
    """
    server = CalculonServer(host=host, port=port)

    try:
        await server.start()
    except asyncio.CancelledError:
        logger.info("Server shutdown requested")
    finally:
        await server.stop()
