"""sqlbridge: one query contract over SQLite, PostgreSQL and MySQL, with LLM-drafted SQL."""

__version__ = "0.1.0"
