"""Domain models for sieve quotas."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class QuotaSize:
    """A storage limit in bytes; ``value is None`` means unlimited."""

    value: Optional[int] = None

    def __post_init__(self) -> None:
        if self.value is not None and self.value < 0:
            raise ValueError(f"Quota size must be non-negative, got {self.value}")

    @classmethod
    def size(cls, value: int) -> "QuotaSize":
        return cls(value)

    @classmethod
    def unlimited(cls) -> "QuotaSize":
        return cls(None)

    @property
    def is_unlimited(self) -> bool:
        return self.value is None

    def as_int(self) -> int:
        if self.value is None:
            raise ValueError("Unlimited quota has no numeric value")
        return self.value

    def is_exceeded_by(self, total: int) -> bool:
        return self.value is not None and total > self.value

    def __str__(self) -> str:
        return "unlimited" if self.value is None else str(self.value)


@dataclass(frozen=True, slots=True)
class QuotaKey:
    """Identifies a quota entry: one owner, or the repository-wide default."""

    owner: Optional[str] = None

    @classmethod
    def for_owner(cls, owner: str) -> "QuotaKey":
        if not owner:
            raise ValueError("Quota owner must be a non-empty string")
        return cls(owner)

    @property
    def is_default(self) -> bool:
        return self.owner is None

    def __str__(self) -> str:
        return "<default>" if self.owner is None else self.owner


DEFAULT_QUOTA_KEY = QuotaKey()


@dataclass(slots=True)
class QuotaEntry:
    key: QuotaKey
    limit: QuotaSize
