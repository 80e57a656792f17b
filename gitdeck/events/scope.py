"""Refresh scopes.

A RefreshScope names the observers a selective refresh targets. Delivery
order is fixed by REFRESH_ORDER, not by flag values: later scopes read state
that earlier ones refresh (commits, revisions and branches assume the view
is current).
"""

from __future__ import annotations

from enum import Flag, auto

__all__ = ["REFRESH_ORDER", "RefreshScope"]


class RefreshScope(Flag):
    """Independently addressable refresh targets."""

    NONE = 0
    VIEW = auto()
    REPOS = auto()
    COMMITS = auto()
    REVISIONS = auto()
    BRANCHES = auto()
    ALL = VIEW | REPOS | COMMITS | REVISIONS | BRANCHES

    def __str__(self) -> str:
        if self is RefreshScope.ALL:
            return "all"
        return "|".join(s.name.lower() for s in REFRESH_ORDER if s in self) or "none"


REFRESH_ORDER: tuple[RefreshScope, ...] = (
    RefreshScope.VIEW,
    RefreshScope.REPOS,
    RefreshScope.COMMITS,
    RefreshScope.REVISIONS,
    RefreshScope.BRANCHES,
)
