import typing as t

import pydantic as p

from .base import BaseModel
from .enum import AudienceType
from .id import UserID
from .user import UserRole


class UserAudience(BaseModel):
    type: t.Literal["user"] = "user"
    user_ids: list[UserID]

    @property
    def audience_type(self) -> AudienceType:
        return AudienceType.User


class RoleAudience(BaseModel):
    type: t.Literal["role"] = "role"
    roles: list[UserRole]

    @property
    def audience_type(self) -> AudienceType:
        return AudienceType.Role


AudienceSpec = t.Annotated[UserAudience | RoleAudience, p.Field(discriminator="type")]

# a resolved target is a concrete user or a role tag, never both
AudienceTarget = UserID | UserRole
