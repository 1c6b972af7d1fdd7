from __future__ import annotations

import pydantic as p
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from seezee.model import BaseModel, DeploymentEnvironment

from .base import BaseSecrets
from .source import YAMLSecretsSource


class PostgresqlSecrets(BaseSecrets):
    username: p.Secret[str] | None = None
    password: p.Secret[str] | None = None


class Secrets(BaseSecrets, BaseModel):  # pyright: ignore [reportIncompatibleVariableOverride]
    """Credentials, kept apart from the settings tree.

    `SEEZEE_POSTGRESQL__PASSWORD` in the environment wins over the same key in
    secrets.yaml.
    """

    model_config = SettingsConfigDict(env_prefix="SEEZEE_", env_nested_delimiter="__")

    root: p.AnyUrl
    env: DeploymentEnvironment

    postgresql: PostgresqlSecrets | None = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings, YAMLSecretsSource(settings_cls)
