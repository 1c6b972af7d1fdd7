import enum
import types
import typing as t

from pydantic import EmailStr

from .base import BaseModel, WithTimestamps
from .id import UserID


class UserRole(enum.Enum):
    CEO = "CEO"
    Admin = "ADMIN"
    CFO = "CFO"
    Frontend = "FRONTEND"
    Backend = "BACKEND"
    Outreach = "OUTREACH"
    Designer = "DESIGNER"
    Dev = "DEV"
    Intern = "INTERN"
    Partner = "PARTNER"
    Client = "CLIENT"
    Staff = "STAFF"


class RoleStyle(BaseModel):
    # color is a click/ANSI color name
    color: str
    icon: str


ROLE_STYLES: t.Mapping[UserRole, RoleStyle] = types.MappingProxyType({
    UserRole.CEO: RoleStyle(color="yellow", icon="crown"),
    UserRole.Admin: RoleStyle(color="blue", icon="shield"),
    UserRole.CFO: RoleStyle(color="red", icon="shield"),
    UserRole.Frontend: RoleStyle(color="magenta", icon="palette"),
    UserRole.Backend: RoleStyle(color="green", icon="code"),
    UserRole.Outreach: RoleStyle(color="bright_red", icon="megaphone"),
    UserRole.Designer: RoleStyle(color="bright_magenta", icon="palette"),
    UserRole.Dev: RoleStyle(color="cyan", icon="code"),
    UserRole.Intern: RoleStyle(color="bright_yellow", icon="user"),
    UserRole.Partner: RoleStyle(color="bright_blue", icon="handshake"),
    UserRole.Client: RoleStyle(color="bright_cyan", icon="user-check"),
    UserRole.Staff: RoleStyle(color="bright_green", icon="user"),
})


class User(WithTimestamps):
    user_id: UserID
    email: EmailStr
    name: str
    role: UserRole
