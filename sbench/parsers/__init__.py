"""Output parsers for external benchmark tools."""
from .output_parsers import parse_ping_output

__all__ = [
    "parse_ping_output",
]
