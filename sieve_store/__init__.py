"""Per-user sieve script storage with quotas and a single active script."""

__version__ = "0.1.0"
