from __future__ import annotations

import datetime
import os
from pathlib import Path

import pydantic as p
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Object, Provider, Resource, Singleton

import seezee
from seezee.model import BaseModel, DeploymentEnvironment

from .. import di
from ..config import Secrets, Settings
from ..provider import LoggingProvider, TimestampProvider
from .storage import StorageContainer


class BootConfiguration(BaseModel):
    debug: bool
    env: DeploymentEnvironment
    config_root: p.AnyUrl
    secrets_path: p.AnyUrl | None = None
    override: tuple[str, ...]


class SeeZeeContainer(DeclarativeContainer):
    config: Configuration = Configuration()
    secrets: Configuration = Configuration()

    debug: Provider[bool] = Singleton(bool)
    env: Provider[DeploymentEnvironment] = Singleton(DeploymentEnvironment)
    root: Object[di.NotReady | Path] = Object(di.NotReady())

    logging: Provider[LoggingProvider] = Resource(LoggingProvider, config=config.logging, debug=debug)
    storage: Provider[StorageContainer] = Container(
        StorageContainer, config=config.storage, secrets=secrets, debug=debug, logging=logging, root=root
    )

    utcnow: Provider[TimestampProvider] = Object(lambda: datetime.datetime.now(datetime.UTC))

    _boot_config: Provider[BootConfiguration | di.NotReady] = Object(di.NotReady())

    @staticmethod
    def boot(
        ct: SeeZeeContainer,
        /,
        debug: bool,
        env: DeploymentEnvironment,
        config_root: p.FileUrl,
        secrets_path: p.AnyUrl | None = None,
        override: tuple[str, ...] | None = None,
    ):
        """Load settings and secrets into the container and wire it."""
        if config_root.scheme != "file":
            raise ValueError(f"unsupported scheme for config root: {config_root.scheme}")
        ps = Settings(env=env, root=config_root, override=override or ())
        ct.config.from_pydantic(ps)
        ct.debug.override(debug)
        ct.env.override(env)
        ct.root.override(Path(os.path.dirname(seezee.__file__)).parent)
        wired = di.wire(ct)

        logger = ct.logging().get_logger()
        logger.trace("wired modules", extra={"modules": wired})

        for ov in ps.override:
            k, v = ov.split("=", 1)
            logger.info("overriding configuration parameter", extra={"key": k, "value": v})

        secrets = Secrets(env=env, root=secrets_path or config_root)
        ct.secrets.from_pydantic(secrets)

        logger.debug(
            "configuration finished",
            extra={
                "config": str(config_root),
                "env": env.value,
            },
        )
        ct._boot_config.override(
            BootConfiguration(
                debug=debug, env=env, config_root=config_root, secrets_path=secrets_path, override=override or ()
            )
        )
