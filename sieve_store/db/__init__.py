"""ORM models and the historical session import path."""
