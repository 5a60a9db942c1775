"""
personnel-guard: field-level data security and atomic state transitions
for officer personnel records.
"""

from .defaults import LIBRARY_VERSION

__version__ = LIBRARY_VERSION
