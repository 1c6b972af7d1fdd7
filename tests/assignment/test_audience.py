"""Tests for audience parsing and resolution."""

from __future__ import annotations

import pytest

from seezee.assignment import parse_audience, resolve_audience, ValidationError
from seezee.model import RoleAudience, UserAudience, UserID, UserRole


class TestParseAudience(object):
    def test_user_audience(self) -> None:
        u = UserID()
        audience = parse_audience({"type": "user", "user_ids": [str(u)]})

        assert isinstance(audience, UserAudience)
        assert audience.user_ids == [u]

    def test_role_audience(self) -> None:
        audience = parse_audience({"type": "role", "roles": ["ADMIN", "STAFF"]})

        assert isinstance(audience, RoleAudience)
        assert audience.roles == [UserRole.Admin, UserRole.Staff]

    def test_accepts_built_audience(self) -> None:
        built = RoleAudience(roles=[UserRole.Dev])

        assert parse_audience(built) is built

    @pytest.mark.parametrize(
        "data",
        [
            {"type": "user", "user_ids": []},
            {"type": "role", "roles": []},
        ],
    )
    def test_empty_targets_rejected(self, data: dict[str, list[str]]) -> None:
        with pytest.raises(ValidationError, match="at least one"):
            parse_audience(data)

    @pytest.mark.parametrize(
        "data",
        [
            {"type": "team", "user_ids": []},
            {"type": "role", "roles": ["JANITOR"]},
            {"type": "user", "user_ids": ["not-a-user-id"]},
            {"roles": ["DEV"]},
        ],
    )
    def test_malformed_audience_rejected(self, data: dict[str, object]) -> None:
        with pytest.raises(ValidationError, match="invalid audience"):
            parse_audience(data)  # pyright: ignore[reportArgumentType]


class TestResolveAudience(object):
    def test_users_deduplicated_in_order(self) -> None:
        u1, u2 = UserID(), UserID()

        targets = resolve_audience({"type": "user", "user_ids": [str(u2), str(u1), str(u2)]})

        assert targets == (u2, u1)

    def test_roles_stay_roles(self) -> None:
        targets = resolve_audience(RoleAudience(roles=[UserRole.Dev, UserRole.Designer, UserRole.Dev]))

        assert targets == (UserRole.Dev, UserRole.Designer)
        assert all(isinstance(t, UserRole) for t in targets)
