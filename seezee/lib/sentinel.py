from __future__ import annotations

import typing as t


class Sentinel(object):
    """A falsy singleton per subclass, compared with isinstance()."""

    _instances: t.ClassVar[dict[type, Sentinel]] = {}

    def __new__(cls) -> t.Self:
        if cls not in Sentinel._instances:
            Sentinel._instances[cls] = super().__new__(cls)
        return t.cast(t.Self, Sentinel._instances[cls])

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


class NotReady(Sentinel):
    """A container value that boot() has not filled in yet."""


class NotSet(Sentinel):
    """An update argument that was left out, as opposed to one given as None."""
