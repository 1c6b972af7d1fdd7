import typing as t

from pydantic_settings import BaseSettings as PydanticBaseSettings

from seezee.model import BaseModel


class BaseSettings(PydanticBaseSettings, BaseModel):  # pyright: ignore [reportIncompatibleVariableOverride]
    """A node of the settings tree.

    Accepts a plain dict positionally, which is how dependency-injector hands
    a Configuration subtree to model_validate-less factories.
    """

    def __init__(self, cf: dict[str, t.Any] | None = None, **kwargs: t.Any):
        super().__init__(**{**(cf or {}), **kwargs})


class BaseSecrets(BaseSettings):
    """A node of the secrets tree; never logged, never dumped into settings."""
