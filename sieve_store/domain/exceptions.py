"""Sieve repository error hierarchy.

Every error raised by :class:`~sieve_store.domain.sieve.SieveRepository`
derives from :class:`SieveRepositoryError`; the transaction is always rolled
back before one of these reaches the caller.
"""


class SieveRepositoryError(Exception):
    """Base class for sieve repository errors."""


class InvalidArgumentError(SieveRepositoryError, ValueError):
    """Raised when an owner or script name is empty or reserved."""


class ScriptNotFoundError(SieveRepositoryError):
    """Raised when the requested script, or the active script, does not exist."""


class QuotaNotFoundError(SieveRepositoryError):
    """Raised when no quota entry is stored for the requested key."""


class QuotaExceededError(SieveRepositoryError):
    """Raised when a write would exceed the owner's effective quota."""


class DuplicateScriptError(SieveRepositoryError):
    """Raised when a rename target already exists for the owner."""


class ScriptIsActiveError(SieveRepositoryError):
    """Raised when attempting to delete the owner's active script."""


class StorageError(SieveRepositoryError):
    """Raised when the underlying store fails; the underlying error is the ``__cause__``."""
