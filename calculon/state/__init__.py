"""Shared state module for Calculon."""

from .cell import StateCell
from .numeric import format_number, ieee_pow, parse_float

__all__ = ["StateCell", "format_number", "ieee_pow", "parse_float"]
