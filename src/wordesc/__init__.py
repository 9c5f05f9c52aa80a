"""
wordesc - Shell-safe quoting for arbitrary byte strings.

Renders file names and arguments in the least obtrusive form a POSIX shell
reads back as the exact same bytes.
"""

from __future__ import annotations

__version__ = "0.1.0"

from wordesc.core.quote import analyze, join, quote, quote_into, quote_into_n

__all__ = ["analyze", "join", "quote", "quote_into", "quote_into_n", "__version__"]
