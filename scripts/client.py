#!/usr/bin/env python3
"""
Interactive Test Client for Calculon

A simple command-line client for manually testing the Calculon server.

Usage:
    python scripts/client.py                  # Connect to 127.0.0.1:4673
    python scripts/client.py --host 1.2.3.4   # Connect to specific host
    python scripts/client.py --port 8080      # Connect to specific port

Commands:
    ADD <number>        - X += number
    SUBTRACT <number>   - X -= number
    POWER <number>      - X ^= number
    SHOW                - Display X
    help                - Show this help
    exit                - Exit client
"""

import argparse
import socket
import sys

# Enable command history with arrow keys (works on Unix systems)
try:
    import readline  # noqa: F401
except ImportError:
    pass  # readline not available on Windows by default


class CalculonClient:
    """Simple TCP client for Calculon."""

    def __init__(self, host: str, port: int, timeout: float = 5.0):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.socket = None
        self.greeting = None
        self._buffer = b''

    def connect(self) -> bool:
        """Connect to the server and read the greeting line."""
        try:
            self.socket = socket.create_connection((self.host, self.port), self.timeout)
            self._buffer = b''
            self.greeting = self._read_line()
            return True
        except OSError as e:
            print(f"Connection error: {e}")
            self.socket = None
            return False

    def disconnect(self):
        """Disconnect from the server."""
        if self.socket:
            try:
                self.socket.close()
            except OSError:
                pass
            self.socket = None

    def _read_line(self) -> str:
        """Read one CRLF-terminated line from the server."""
        while b'\n' not in self._buffer:
            chunk = self.socket.recv(4096)
            if not chunk:
                raise ConnectionError("Connection closed by server")
            self._buffer += chunk
        line, _, self._buffer = self._buffer.partition(b'\n')
        return line.decode('utf-8').rstrip('\r')

    def send_command(self, command: str) -> str:
        """
        Send a command and receive its response line.

        A command with the wrong number of arguments gets no response;
        the read then times out and a message saying so is returned.
        """
        if not self.socket:
            return "ERROR: Not connected"

        try:
            self.socket.sendall(f"{command}\n".encode('utf-8'))
            return self._read_line()
        except socket.timeout:
            return "(no response)"
        except ConnectionError as e:
            self.disconnect()
            return f"ERROR: {e}"
        except OSError as e:
            return f"ERROR: {e}"

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()


def print_help():
    """Print help message."""
    print("""
Calculon Commands:
------------------
  ADD <number>        X += number
  SUBTRACT <number>   X -= number
  POWER <number>      X ^= number
  SHOW                Display the current value of X

Client Commands:
----------------
  help                Show this help message
  exit                Exit the client
  reconnect           Reconnect to the server
  status              Show connection status

Notes:
------
  Command names are case-sensitive.
  A non-numeric operand makes the server close the connection.
""")


def main():
    parser = argparse.ArgumentParser(
        description="Interactive test client for Calculon"
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Server host (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=4673,
        help="Server port (default: 4673)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=2.0,
        help="Socket timeout in seconds (default: 2.0)"
    )

    args = parser.parse_args()

    print("Calculon Client")
    print("===============")
    print(f"Connecting to {args.host}:{args.port}...")

    client = CalculonClient(args.host, args.port, args.timeout)

    if not client.connect():
        print("Failed to connect. Is the server running?")
        print(f"  Try: python -m calculon.server --port {args.port}")
        sys.exit(1)

    print(f"Connected! Server says: {client.greeting}")
    print("Type 'help' for commands.\n")

    try:
        while True:
            try:
                command = input(">>> ").strip()

                if not command:
                    continue

                lower_cmd = command.lower()

                if lower_cmd == "help":
                    print_help()
                    continue

                if lower_cmd in ("exit", "quit"):
                    print("Goodbye!")
                    break

                if lower_cmd == "reconnect":
                    client.disconnect()
                    if client.connect():
                        print("Reconnected!")
                    else:
                        print("Reconnection failed.")
                    continue

                if lower_cmd == "status":
                    status = "Connected" if client.socket else "Disconnected"
                    print(f"Status: {status}")
                    print(f"Server: {args.host}:{args.port}")
                    continue

                print(client.send_command(command))

            except EOFError:
                print("\nGoodbye!")
                break

    except KeyboardInterrupt:
        print("\n\nInterrupted. Goodbye!")
    finally:
        client.disconnect()


if __name__ == "__main__":
    main()
