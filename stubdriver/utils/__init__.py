"""
Utility functions and classes.

This package provides identifier generation, file loading and diagram
validation helpers.
"""

from stubdriver.utils.identifiers import generate_id

__all__ = ['generate_id']
