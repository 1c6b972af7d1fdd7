"""Exceptions raised by assignment operations."""

from __future__ import annotations

import typing as t


class AssignmentError(Exception):
    """Base for every error an assignment operation raises on purpose."""

    pass


class ValidationError(AssignmentError):
    """Input was rejected before anything was written."""

    pass


class NotFoundError(AssignmentError):
    """A referenced item, assignment or user does not exist."""

    def __init__(self, kind: str, key: t.Any, message: str | None = None):
        self.kind = kind
        self.key = key
        super().__init__(message or f"{kind} {key} not found")


class StorageError(AssignmentError):
    """The database refused an operation. The caller may retry the whole call."""

    pass
