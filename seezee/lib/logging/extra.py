import logging
import sys
import textwrap
import typing as t

import pygments
from pygments.formatters import Terminal256Formatter
from pygments.lexers.data import JsonLexer  # pyright: ignore [reportMissingTypeStubs]
from pygments.style import Style

from seezee.lib import json

from .style import LogStyle

# attributes every LogRecord carries, so whatever else is on one came from extra=
RecordKeys = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {"message", "asctime"}


class ExtraEncoder(json.JSONEncoder):
    def default(self, o: t.Any) -> json.JSONValue:
        if isinstance(o, bytes):
            return f"<{len(o)} bytes>"
        try:
            return super().default(o)
        except TypeError:
            return repr(o)


class ExtraFormatter(logging.Formatter):
    """Wraps a base formatter and appends the record's extras as JSON.

    The JSON tail is highlighted with pygments when stderr is a terminal and
    the base formatter has color enabled.
    """

    def __init__(
        self,
        base: type[logging.Formatter],
        format: str | None = None,
        datefmt: str | None = None,
        indent: bool | None = None,
        pyg_style: type[Style] = LogStyle,
        **kwargs: t.Any,
    ):
        self.base = base(format, datefmt=datefmt, **kwargs)
        self.pyg_style = pyg_style
        self.indent = 4 if indent else None
        self.color = sys.stderr.isatty() and not kwargs.get("no_color", False)

    def format(self, record: logging.LogRecord) -> str:
        extra = {k: v for k, v in record.__dict__.items() if k not in RecordKeys and not k.startswith("_")}

        msg = record.getMessage()
        if "\n" in msg:
            # continuation lines line up under the first
            head = self.base.format(record).split(msg, 1)[0]
            first, rest = msg.split("\n", 1)
            record.msg = f"{first}\n{textwrap.indent(rest, ' ' * len(_strip_ansi(head)))}"
            record.args = None
        message = self.base.format(record)
        if not extra:
            return message

        js = json.dumps(extra, cls=ExtraEncoder, sort_keys=True, indent=self.indent)
        if self.color:
            js = pygments.highlight(js, JsonLexer(), Terminal256Formatter(style=self.pyg_style)).strip()  # pyright: ignore [reportUnknownMemberType]
        return f"{message} {js}"

    def __getattr__(self, name: str) -> t.Any:
        return getattr(self.base, name)


def _strip_ansi(s: str) -> str:
    out: list[str] = []
    escaped = False
    for c in s:
        if c == "\x1b":
            escaped = True
        elif escaped:
            escaped = c != "m"
        else:
            out.append(c)
    return "".join(out)
