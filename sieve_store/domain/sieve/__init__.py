"""Sieve repository service exports"""

from .service import SieveRepository

__all__ = ["SieveRepository"]
