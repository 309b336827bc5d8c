"""Gosp Language Server and REPL integration package.

This package provides:
- A pygls-based Language Server for the Gosp language.
- An indexer that parses (but never evaluates) documents for the server.
- A simple TCP REPL server with per-session interpreter states.
"""

__all__ = [
    "server",
    "indexer",
    "repl_server",
]
