"""Infrastructure adapters (database engine, SQLAlchemy repositories)."""
