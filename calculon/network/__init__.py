"""Network module for Calculon."""

from .tcp_server import CalculonServer, run_server

__all__ = ["CalculonServer", "run_server"]
