"""
Shared State Cell Module

This module implements the single shared value (X) that every client
session reads and modifies.

All operations run inside one critical section guarded by a lock, so
no two mutations interleave and no read observes a half-applied update.
The lock is a threading.Lock rather than an asyncio.Lock: the critical
sections never await, which makes the cell usable from plain threads as
well as from event loop tasks.
"""

import threading
from typing import Any, Dict

from ..config.settings import settings
from .numeric import ieee_pow


class StateCell:
    """
    Thread-safe holder for one floating-point value.

    Operations:
    - add: X += operand
    - subtract: X -= operand
    - power: X ^= exponent (IEEE-754 pow semantics)
    - show: read X

    No operation ever fails. NaN and infinities are stored and returned
    unchanged; the cell performs no validation.

    Attributes:
        initial_value: Value the cell starts from (and resets to)
    """

    def __init__(self, initial_value: float = None):
        """
        Initialize the cell.

        Args:
            initial_value: Starting value (default from settings.INITIAL_VALUE)
        """
        self.initial_value = float(
            initial_value if initial_value is not None else settings.INITIAL_VALUE
        )
        self._value = self.initial_value
        self._lock = threading.Lock()
        self._op_counts = {"add": 0, "subtract": 0, "power": 0, "show": 0}

    def add(self, operand: float) -> float:
        """Add operand to X and return the new value."""
        with self._lock:
            self._value = self._value + operand
            self._op_counts["add"] += 1
            return self._value

    def subtract(self, operand: float) -> float:
        """Subtract operand from X and return the new value."""
        with self._lock:
            self._value = self._value - operand
            self._op_counts["subtract"] += 1
            return self._value

    def power(self, exponent: float) -> float:
        """
        Raise X to exponent and return the new value.

        Follows IEEE pow: a negative base with a non-integer exponent
        yields NaN, zero to a negative power yields infinity.
        """
        with self._lock:
            self._value = ieee_pow(self._value, exponent)
            self._op_counts["power"] += 1
            return self._value

    def show(self) -> float:
        """Return the current value without modifying it."""
        with self._lock:
            self._op_counts["show"] += 1
            return self._value

    @property
    def value(self) -> float:
        """Current value (not counted as a SHOW)."""
        with self._lock:
            return self._value

    def reset(self, value: float = None) -> None:
        """Set X back to the initial value (or to value) and clear counters."""
        with self._lock:
            self._value = float(value if value is not None else self.initial_value)
            for name in self._op_counts:
                self._op_counts[name] = 0

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the cell.

        Returns:
            Dictionary containing:
            - value: Current value of X
            - operations: Per-operation call counts
            - total_operations: Sum of all operation counts
        """
        with self._lock:
            counts = dict(self._op_counts)
            return {
                "value": self._value,
                "operations": counts,
                "total_operations": sum(counts.values()),
            }
