"""
steprunner - fast discovery and execution of unittest-style tests.

This package provides tools to:
- Decide which test classes can be run without the framework's life cycle
- Find their test methods, once per signature across the class hierarchy
- Turn each method into an instantiate-then-call unit
- Fall back to the framework for everything else
"""

__version__ = "0.1.0"

from steprunner.reflection import expect

__all__ = ["expect"]
