"""Top-level leaderboard package.

Subpackages: ``source`` (table discovery), ``compute`` (role inference and
normalization), ``report`` (rendering and message assembly), ``api`` (HTTP)
and ``cli``.
"""

__all__ = ["api", "compute", "report", "source", "cli"]
