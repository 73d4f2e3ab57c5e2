"""Custom exception hierarchy for call-boundary.

Only conditions detected by the library itself are raised as
:class:`BoundaryError` subclasses.  Exceptions raised by user hooks or
by the wrapped work are **never** wrapped; they escape
:meth:`~call_boundary.core.boundary.Boundary.enter` as the exact
original object so identity checks keep working.

Hierarchy
---------
BoundaryError
├── CannotEnterError
├── ConfigurationError
└── MissingDependencyError
"""

from __future__ import annotations


class BoundaryError(Exception):
    """Base exception for all call-boundary errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance for the caller."""


# --- Entry -----------------------------------------------------------------

class CannotEnterError(BoundaryError):
    """Raised when ``enter`` is called while the enter-hook is still running.

    The enter-hook has not produced its result yet, so a nested call has
    nothing valid to hand to its work.  The outer execution is left
    untouched.
    """


# --- Construction ----------------------------------------------------------

class ConfigurationError(BoundaryError):
    """Raised when a boundary is constructed with invalid options."""


# --- Optional tooling ------------------------------------------------------

class MissingDependencyError(BoundaryError):
    """Raised when an optional runtime dependency is not available."""
