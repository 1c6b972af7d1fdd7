import enum


class DeploymentEnvironment(enum.Enum):
    Production = "production"
    Development = "development"
    Staging = "staging"
    Sandbox = "sandbox"
    Test = "test"
    Local = "local"


class ItemKind(enum.Enum):
    Resource = "resource"
    Tool = "tool"
    Task = "task"


class AudienceType(enum.Enum):
    User = "user"
    Role = "role"
