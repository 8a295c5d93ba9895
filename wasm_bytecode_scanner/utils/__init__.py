"""
Utility functions.
"""

from .string_utils import escape_name, hex_preview

__all__ = ['escape_name', 'hex_preview']
