"""
Utility modules for core functionality.

Modules:
- decorators: Timing helpers (timer, timed)
- params_processor: Building processing options from request parameters
"""

from .decorators import timed, timer
from .params_processor import merge_params, prepare_options

__all__ = [
    "timer",
    "timed",
    "merge_params",
    "prepare_options",
]
