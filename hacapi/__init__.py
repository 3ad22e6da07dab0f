"""REST facade over the Home Access Center student portal."""

__version__ = "0.3.0"
