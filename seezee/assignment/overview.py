"""Completion statistics across every user and assignment."""

from __future__ import annotations

import collections
import datetime
import typing as t

import sqlalchemy as sqla
from sqlalchemy.orm import Session

from seezee.core import di, TimestampProvider
from seezee.lib import sql
from seezee.model import CompletionOverview, CompletionStatus, LeaderboardEntry, OverdueEntry, RoleCompletionRate, \
    StatusTotals, UserID, UserRole
from seezee.storage.table import assignments, completions, users

from . import catalog
from .errors import ValidationError

LEADERBOARD_SIZE = 10
OVERDUE_LIST_SIZE = 20


def percent(part: int, whole: int) -> int:
    """part/whole as a whole percentage, halves rounded up."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def days_overdue(due_at: datetime.datetime, now: datetime.datetime) -> int:
    return (now - due_at) // datetime.timedelta(days=1)


@di.inject
def completion_overview(
    now: datetime.datetime | None = None,
    *,
    session: Session = di.Provide["storage.persistent.session"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> CompletionOverview:
    """Totals by status, overdue work, per-role rates and a leaderboard.

    Only completions count: an assignment nobody has acted on yet contributes
    nothing. Roles are each user's current role.

    Raises:
        ValidationError: now is naive
    """
    now = now or utcnow()
    if now.tzinfo is None:
        raise ValidationError("now must be timezone-aware")
    stmt = (
        sqla
        .select(
            completions.completion_id,
            completions.user_id,
            completions.status,
            assignments.item_id,
            assignments.due_at,
            users.name,
            users.role,
        )
        .join(assignments, assignments.assignment_id == completions.assignment_id)
        .join(users, users.user_id == completions.user_id)
        .order_by(completions.create_time, completions.completion_id)
    )
    with sql.begin(session):
        rows = session.execute(stmt).mappings().all()
        overdue_rows = [r for r in rows if _is_overdue(r, now)]
        items = catalog.summarize({r["item_id"] for r in overdue_rows}, session=session)

    by_status = collections.Counter(r["status"] for r in rows)
    completed = by_status[CompletionStatus.Complete]
    totals = StatusTotals(
        assigned=len(rows),
        not_started=by_status[CompletionStatus.NotStarted],
        in_progress=by_status[CompletionStatus.InProgress],
        completed=completed,
        completion_rate=percent(completed, len(rows)),
    )

    overdue = sorted(
        (
            OverdueEntry(
                completion_id=r["completion_id"],
                user_id=r["user_id"],
                name=r["name"],
                item=items[r["item_id"]],
                due_at=r["due_at"],
                status=r["status"],
                days_overdue=days_overdue(r["due_at"], now),
            )
            for r in overdue_rows
            if r["item_id"] in items
        ),
        key=lambda e: e.days_overdue,
        reverse=True,
    )

    return CompletionOverview(
        totals=totals,
        overdue_count=len(overdue_rows),
        overdue=overdue[:OVERDUE_LIST_SIZE],
        roles=_role_rates(rows),
        leaderboard=_leaderboard(rows)[:LEADERBOARD_SIZE],
    )


def _is_overdue(row: t.Mapping[str, t.Any], now: datetime.datetime) -> bool:
    return row["due_at"] is not None and row["due_at"] < now and row["status"] is not CompletionStatus.Complete


def _role_rates(rows: t.Sequence[t.Mapping[str, t.Any]]) -> list[RoleCompletionRate]:
    total: collections.Counter[UserRole] = collections.Counter()
    done: collections.Counter[UserRole] = collections.Counter()
    for r in rows:
        total[r["role"]] += 1
        if r["status"] is CompletionStatus.Complete:
            done[r["role"]] += 1
    return [
        RoleCompletionRate(role=role, total=total[role], completed=done[role], completion_rate=percent(done[role], total[role]))
        for role in UserRole
        if total[role]
    ]


def _leaderboard(rows: t.Sequence[t.Mapping[str, t.Any]]) -> list[LeaderboardEntry]:
    entries: dict[UserID, LeaderboardEntry] = {}
    for r in rows:
        entry = entries.setdefault(
            r["user_id"],
            LeaderboardEntry(user_id=r["user_id"], name=r["name"], role=r["role"], total=0, completed=0, completion_rate=0),
        )
        entry.total += 1
        if r["status"] is CompletionStatus.Complete:
            entry.completed += 1
    for entry in entries.values():
        entry.completion_rate = percent(entry.completed, entry.total)
    return sorted(entries.values(), key=lambda e: e.completed, reverse=True)
