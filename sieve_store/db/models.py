"""SQLAlchemy ORM models."""
from sqlalchemy import BigInteger, Boolean, Column, DateTime, Index, String, Text, text

from sieve_store.db.session import Base


class SieveScript(Base):
    __tablename__ = "sieve_scripts"
    __table_args__ = (
        # At most one active script per owner.
        Index(
            "uq_sieve_scripts_single_active",
            "owner",
            unique=True,
            sqlite_where=text("is_active"),
            postgresql_where=text("is_active"),
        ),
    )

    owner = Column(String(100), primary_key=True)
    name = Column(String(255), primary_key=True)
    content = Column(Text, nullable=False)
    size = Column(BigInteger, nullable=False)
    is_active = Column(Boolean, nullable=False, default=False)
    activated_at = Column(DateTime(timezone=True))


class SieveQuota(Base):
    __tablename__ = "sieve_quotas"

    # Owner identifier, or "" for the default quota.
    owner = Column(String(100), primary_key=True)
    # NULL means unlimited.
    limit_bytes = Column(BigInteger, nullable=True)
