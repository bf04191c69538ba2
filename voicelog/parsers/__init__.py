"""Domain-specific activity parsers."""

from . import feeding, diaper, sleep, weight, pumping

__all__ = ["feeding", "diaper", "sleep", "weight", "pumping"]
