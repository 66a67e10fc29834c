"""Natural-language command interpreter for a productivity assistant."""

__version__ = "0.1.0"
