from __future__ import annotations

import datetime
import enum
import pathlib
import typing as t

import click
import pydantic as p
from click import *  # noqa: F401, F403 # pyright: ignore [reportWildcardImportFromLibrary]

# This module is a thin wrapper around Click, which is why we import `click.*`
# into our namespace, alongside the parameter types our commands share.

E = t.TypeVar("E", bound=enum.Enum)


class EnumType(click.ParamType, t.Generic[E]):
    """An enum member, given by value or name in any case (`dev`, `DEV`, `Dev`)"""

    def __init__(self, enum_type: type[E]):
        self.enum_type = enum_type
        self.name = enum_type.__name__

    def lookup(self, value: str) -> E | None:
        folded = value.strip().casefold()
        for member in self.enum_type:
            if folded in (str(member.value).casefold(), member.name.casefold()):
                return member
        return None

    def convert(self, value: t.Any, param: click.Parameter | None, ctx: click.Context | None) -> E | None:
        if value is None or isinstance(value, self.enum_type):
            return value
        if (member := self.lookup(str(value))) is None:
            choices = ", ".join(str(m.value) for m in self.enum_type)
            self.fail(f"{value!r} is not a {self.name}, expected one of {choices}", param, ctx)
        return member

    def get_metavar(self, param: click.Parameter, *args: t.Any) -> str:
        return self.name.upper()


class RequiredXOROption(click.Option):
    """An option that is required unless one of `required_xor` is given, and
    forbidden if one is."""

    def __init__(self, *args: t.Any, required_xor: t.Sequence[str], **kwargs: t.Any):
        if not required_xor:
            raise ValueError("required_xor names no other options")
        self.required_xor = frozenset(required_xor)
        others = ", ".join(sorted(self.required_xor))
        kwargs["help"] = f"{kwargs.get('help', '')} (exclusive with {others})".strip()
        super().__init__(*args, **kwargs)

    def handle_parse_result(self, ctx: click.Context, opts: t.Mapping[str, t.Any], args: list[str]) -> t.Any:
        given = self.required_xor.intersection(opts)
        if self.name in opts and given:
            raise click.UsageError(f"{self.name} cannot be combined with {', '.join(sorted(given))}", ctx)
        if self.name not in opts and not given:
            names = ", ".join(sorted(self.required_xor | {str(self.name)}))
            raise click.UsageError(f"one of {names} is required", ctx)
        return super().handle_parse_result(ctx, opts, args)


class URIParamType(click.ParamType):
    """A `file://` URI, given as a URI or a filesystem path

    Paths must exist; directories are refused unless `dir_ok`.
    """

    name = "PATH"

    def __init__(self, dir_ok: bool = False):
        self.dir_ok = dir_ok

    def convert(self, value: t.Any, param: click.Parameter | None, ctx: click.Context | None) -> p.FileUrl | None:
        if value is None or isinstance(value, p.FileUrl):
            return value
        text = str(value)
        if "://" in text:
            url = p.AnyUrl(text)
            if url.scheme != "file" or url.path is None:
                self.fail(f"{text}: only file:// URIs are supported", param, ctx)
            path = pathlib.Path(url.path)
        else:
            path = pathlib.Path(text)

        if not path.exists():
            self.fail(f"{path}: no such file or directory", param, ctx)
        if path.is_dir() and not self.dir_ok:
            self.fail(f"{path}: is a directory", param, ctx)
        return p.FileUrl(f"file://{path.absolute()}")


class KeyParamType(click.ParamType):
    """Accept a prefixed short-UUID key, e.g. `user$...`, as a typed ID"""

    def __init__(self, key_type: t.Callable[[str], t.Any], name: str):
        self.key_type = key_type
        self.name = name

    def convert(self, value: t.Any, param: click.Parameter | None, ctx: click.Context | None) -> t.Any:
        if value is None:
            return None
        try:
            return self.key_type(value.strip() if isinstance(value, str) else value)
        except ValueError as e:
            self.fail(str(e), param, ctx)

    def __repr__(self) -> str:
        return self.name.upper()


class UTCDateTime(click.DateTime):
    """click.DateTime, with naive input read as UTC"""

    name = "utc-datetime"

    def convert(self, value: t.Any, param: click.Parameter | None, ctx: click.Context | None) -> t.Any:
        dt = super().convert(value, param, ctx)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=datetime.UTC)
        return dt
