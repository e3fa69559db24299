"""Resource catalogue API: FastAPI over a single SQLite table."""

__version__ = "0.1.0"
