"""JSON with the types this project stores and logs.

Used as the engine's JSON serializer for the activity metadata column, and by
the log formatter for `extra=` payloads.
"""

from __future__ import annotations

import datetime
import enum
import functools
import json as pyjson
import pathlib
import typing as t

import pydantic as p

JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]


class JSONEncoder(pyjson.JSONEncoder):
    def default(self, o: t.Any) -> JSONValue:
        match o:
            case p.BaseModel():
                return o.model_dump(mode="json")
            case enum.Enum():
                return o.value
            case datetime.datetime() | datetime.date():
                return o.isoformat()
            case datetime.timedelta():
                return o.total_seconds()
            case set() | frozenset():
                return list(o)
            case pathlib.Path():
                return str(o)
            case _:
                return super().default(o)


dumps = functools.partial(pyjson.dumps, cls=JSONEncoder)
loads = pyjson.loads
