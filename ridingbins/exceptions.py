"""
Exceptions raised by riding bin layouts.
"""

from __future__ import annotations


class RidingBinError(ValueError):
    """Base class for errors raised while laying out riding bins."""


class UnsupportedScope(RidingBinError):
    """
    The requested boundary scope has no reference layout.

    Parameters
    ----------
    scope : str
        Human readable description of the requested scope,
        e.g. ``"provincial:ON"``.
    """

    def __init__(self, scope: str, message: str | None = None) -> None:
        self.scope = scope
        if message is None:
            message = f"No riding bin layout available for scope '{scope}'"
        super().__init__(message)


class NoMatchingRidings(RidingBinError):
    """None of the supplied rows matched a riding of the selected scope."""

    def __init__(self, n_rows: int, scope: str) -> None:
        self.n_rows = n_rows
        self.scope = scope
        super().__init__(
            f"None of the {n_rows} supplied rows matched a riding code "
            f"of scope '{scope}'"
        )
