"""Text command parsing helpers."""

from voicemover.commands.duration import format_ms, parse_delay_ms
from voicemover.commands.tokenizer import tokenize_args

__all__ = [
    "format_ms",
    "parse_delay_ms",
    "tokenize_args",
]
