"""RugGuard — rugpull heuristics detector for enriched EVM transaction traces."""

__version__ = "1.0.0"
