"""
Utilities Package
Gas pricing and logging setup
"""

from .gas_calculator import GasCalculator
from .logging_setup import configure_logging

__all__ = [
    'GasCalculator',
    'configure_logging'
]
