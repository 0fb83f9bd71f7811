"""Alert service: a REST resource backed by a transactional PostgreSQL store."""

__version__ = "0.1.0"
