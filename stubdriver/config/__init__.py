"""
Configuration components.

This package provides settings management and logging setup.
"""

from stubdriver.config.settings import Settings
from stubdriver.config.logging_config import setup_logging

__all__ = ['Settings', 'setup_logging']
