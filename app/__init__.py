"""CLI and evaluation entry points for the voice log parser."""
