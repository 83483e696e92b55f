"""Alert API - stores monitoring webhook alerts in a relational database."""

__version__ = "0.1.0"
