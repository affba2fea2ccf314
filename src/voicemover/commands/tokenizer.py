from __future__ import annotations

from typing import Optional
import re


# Quoted runs first, then channel mentions, then bare words.
_TOKEN_PATTERN = re.compile(r"\"([^\"]+)\"|'([^']+)'|(<#\d+>)|(\S+)")


def tokenize_args(text: Optional[str]) -> list[str]:
    """Split command text into tokens, keeping quoted names together."""

    if not text:
        return []

    tokens = []
    for match in _TOKEN_PATTERN.finditer(str(text)):
        double_quoted, single_quoted, mention, bare = match.groups()
        if double_quoted is not None:
            tokens.append(double_quoted)
        elif single_quoted is not None:
            tokens.append(single_quoted)
        elif mention is not None:
            tokens.append(mention)
        else:
            tokens.append(bare)
    return tokens
