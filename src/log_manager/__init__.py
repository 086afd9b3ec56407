# src/log_manager/__init__.py

"""Local task / schedule / timer store backing the log-manager desktop app."""

__version__ = "0.1.0"
