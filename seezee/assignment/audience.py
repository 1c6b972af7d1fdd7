"""Audience parsing and write-time resolution.

An audience is either a list of users or a list of roles, never a mix. At
write time role targets stay role tags: a role assignment is one row, and it
reaches whoever holds the role when assignments are read.
"""

from __future__ import annotations

import typing as t

import pydantic as p

from seezee.model import AudienceSpec, AudienceTarget, RoleAudience, UserAudience

from .errors import ValidationError

_adapter: p.TypeAdapter[AudienceSpec] = p.TypeAdapter(AudienceSpec)


def describe_errors(e: p.ValidationError) -> str:
    parts: list[str] = []
    for err in e.errors():
        loc = ".".join(str(part) for part in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


def parse_audience(data: AudienceSpec | t.Mapping[str, t.Any]) -> AudienceSpec:
    """Build an audience from `{"type": "user", "user_ids": [...]}` or `{"type": "role", "roles": [...]}`.

    Raises:
        ValidationError: unknown audience type, unknown role tag, malformed
            user ID, or an empty target list
    """
    if isinstance(data, (UserAudience, RoleAudience)):
        audience = data
    else:
        try:
            audience = _adapter.validate_python(data)
        except p.ValidationError as e:
            raise ValidationError(f"invalid audience: {describe_errors(e)}") from e

    match audience:
        case UserAudience(user_ids=[]):
            raise ValidationError("a user audience needs at least one user")
        case RoleAudience(roles=[]):
            raise ValidationError("a role audience needs at least one role")
    return audience


def resolve_audience(audience: AudienceSpec | t.Mapping[str, t.Any]) -> tuple[AudienceTarget, ...]:
    """The distinct targets of an audience, in first-seen order.

    Targets keep the audience's kind: user IDs for a user audience, role tags
    for a role audience.
    """
    audience = parse_audience(audience)
    match audience:
        case UserAudience():
            return tuple(dict.fromkeys(audience.user_ids))
        case RoleAudience():
            return tuple(dict.fromkeys(audience.roles))
