"""
Utility modules for the menu monitor application.
"""

from .time_format import format_local_time

__all__ = ['format_local_time']
