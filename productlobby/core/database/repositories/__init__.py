"""
Database repository layer using SQLModel.

This package contains all repository classes organized by business domain.
Each module provides async data access operations for its corresponding
SQLModel entity models.

Modules:
- base: BaseRepository interface and QueryBuilder utilities
- users: user and brand lookups
- campaigns: campaign search, signal score bookkeeping and cascading deletes
- lobbies: lobbies, pledges and the aggregate counts the calculators use
- comments: comments and contribution events
- polls: creator polls, options and votes
- surveys: surveys, questions, responses and answers
- teams: team members and watchlists
- bundle: RepoBundle for dependency injection
"""

from .bundle import RepoBundle, build_repos_from_session

__all__ = ["RepoBundle", "build_repos_from_session"]
