"""Typed shape of config/logging.yaml.

The dump of LoggingSettings goes straight into logging.config.dictConfig,
which is why the factory keys are modelled as aliases.
"""

import typing as t

import pydantic as p

from .base import BaseSettings

LogLevel = t.Literal["NOTSET", "TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class FormatterSettings(BaseSettings):
    factory: t.Literal["seezee.lib.logging.ExtraFormatter"] = p.Field(alias="()")
    # resolved by dictConfig, e.g. ext://colorlog.ColoredFormatter
    base: str
    format: str | None = None
    datefmt: str | None = None
    log_colors: dict[str, str] = {}
    no_color: bool = False
    indent: bool | None = None


class HandlerSettings(BaseSettings):
    handler_class: t.Literal["colorlog.StreamHandler"] = p.Field(alias="class")
    formatter: str
    level: LogLevel = "NOTSET"
    stream: p.AnyUrl

    @p.field_serializer("stream")
    def serialize_stream(self, v: p.AnyUrl) -> str:
        return str(v)


class LoggerSettings(BaseSettings):
    level: LogLevel = "NOTSET"
    propagate: bool = True
    handlers: list[str] | None = None


class RootLoggerSettings(BaseSettings):
    handlers: list[str]
    level: LogLevel = "WARNING"


class LoggingSettings(BaseSettings):
    version: t.Literal[1]
    disable_existing_loggers: bool = False
    formatters: dict[str, FormatterSettings]
    handlers: dict[str, HandlerSettings]
    root: RootLoggerSettings
    loggers: dict[str, LoggerSettings] = {}
