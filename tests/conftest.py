"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import asyncio
import socket
import pytest
import pytest_asyncio
from contextlib import closing
from typing import AsyncGenerator, Optional

from calculon.network.tcp_server import CalculonServer
from calculon.protocol.parser import ProtocolParser
from calculon.state.cell import StateCell


def find_free_port() -> int:
    """Find an available port for testing."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(('', 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


# ============================================================================
# State Fixtures
# ============================================================================

@pytest.fixture
def cell() -> StateCell:
    """Create a fresh StateCell starting at 0.0."""
    return StateCell()


# ============================================================================
# Protocol Fixtures
# ============================================================================

@pytest.fixture
def parser() -> ProtocolParser:
    """Create a ProtocolParser instance."""
    return ProtocolParser()


# ============================================================================
# Server Fixtures
# ============================================================================

@pytest.fixture
def server_port() -> int:
    """Get a free port for server testing."""
    return find_free_port()


@pytest_asyncio.fixture
async def server(server_port: int, cell: StateCell) -> AsyncGenerator[CalculonServer, None]:
    """
    Create and start a server instance for testing.

    The server shares the `cell` fixture, so tests can inspect the
    value directly as well as through SHOW.
    """
    srv = CalculonServer(host='127.0.0.1', port=server_port, cell=cell)

    server_task = asyncio.create_task(srv.start())

    # Wait for server to be ready
    await asyncio.sleep(0.1)

    yield srv

    await srv.stop()
    server_task.cancel()
    try:
        await server_task
    except asyncio.CancelledError:
        pass


# ============================================================================
# Client Fixtures
# ============================================================================

class AsyncClient:
    """
    Helper class for testing server interactions.

    Connecting consumes the greeting line and keeps it in `greeting`.

    Usage:
        async with AsyncClient('127.0.0.1', 4673) as client:
            response = await client.send_command("ADD 5")
            assert response == "X += 5 = 5"
    """

    def __init__(self, host: str, port: int, timeout: float = 2.0):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None
        self.greeting: Optional[str] = None

    async def connect(self) -> None:
        """Establish connection to server and read the greeting."""
        self.reader, self.writer = await asyncio.open_connection(
            self.host, self.port
        )
        self.greeting = await self.read_line()

    async def disconnect(self) -> None:
        """Close connection to server."""
        if self.writer:
            self.writer.close()
            try:
                await self.writer.wait_closed()
            except (ConnectionError, OSError):
                pass

    async def send_line(self, line: str) -> None:
        """Send one line without waiting for a response."""
        if not line.endswith('\n'):
            line += '\n'
        self.writer.write(line.encode())
        await self.writer.drain()

    async def read_line(self) -> str:
        """Read one response line, with the CRLF terminator stripped."""
        data = await asyncio.wait_for(self.reader.readline(), timeout=self.timeout)
        return data.decode().rstrip('\r\n')

    async def read_raw(self) -> bytes:
        """Read one response line as raw bytes (b'' once the server closed)."""
        return await asyncio.wait_for(self.reader.readline(), timeout=self.timeout)

    async def send_command(self, command: str) -> str:
        """
        Send a command and receive the response.

        Args:
            command: Command string (newline will be added if missing)

        Returns:
            Response line without the trailing CRLF
        """
        await self.send_line(command)
        return await self.read_line()

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()


@pytest.fixture
def client_factory(server_port: int):
    """
    Factory fixture to create test clients.

    Usage:
        async def test_something(server, client_factory):
            async with client_factory() as client:
                response = await client.send_command("SHOW")
    """
    def factory() -> AsyncClient:
        return AsyncClient('127.0.0.1', server_port)
    return factory


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
