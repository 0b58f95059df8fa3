"""Interpreter for a small model language: scanner, parser to reverse Polish notation, and executor."""

__version__ = "0.1.0"