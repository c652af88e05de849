"""Meeting slot search and booking service for outbound calling agents."""

__version__ = "0.1.0"
