"""
Interfaces package for the type aliases and protocols shared by the core and
runtime packages.
"""

from .protocols import ActiveStateStore

__all__ = ["ActiveStateStore"]
