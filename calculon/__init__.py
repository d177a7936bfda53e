"""
Calculon: Shared Accumulator Server

A small TCP server built with Python asyncio that lets any number of
clients read and modify one shared floating-point value (X) using a
line-oriented text protocol.
"""

__version__ = "1.0.0"
