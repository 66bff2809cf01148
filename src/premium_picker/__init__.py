"""Option chain normalization and put-selling suggestions."""

__version__ = "0.1.0"
