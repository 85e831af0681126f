"""
Test package for the chess puzzle generator.

This package contains unit tests for notation validation, engine management,
puzzle selection and the command-line interface.
"""

# Import test modules for easier discovery
from . import test_engine
from . import test_notation
from . import test_selector

__all__ = [
    "test_engine",
    "test_notation",
    "test_selector",
]
