"""Python License Validator - check dependency licenses against an allow-list."""

__version__ = "0.1.0"
