"""Database engine, session management and migrations."""
