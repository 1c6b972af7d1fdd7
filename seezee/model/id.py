"""Prefixed short-UUID identifiers.

Every ID renders as `<prefix>$<22 shortuuid characters>`, e.g.
`resource$mhDVb4H3Yc7ZQ2dPfkW9Ta`. The prefix names the entity, which is how an
item ID alone tells which catalog table it lives in. Storage keeps only the
22-character key, except for item references, which keep the whole string.
"""

from __future__ import annotations

import typing as t

import annotated_types as ant
import pydantic as p
import pydantic_core.core_schema as core_schema
import shortuuid

KeyLength: t.Final = 22


class ShortUUIDKey(str):
    prefix: t.ClassVar[str]
    separator: t.ClassVar[str] = "$"

    @p.validate_call
    def __init_subclass__(cls, prefix: t.Annotated[str, ant.MinLen(4), ant.Predicate(str.isalpha)]):
        super().__init_subclass__()
        cls.prefix = prefix

    def __new__(cls, s: str | None = None, /, key: str | None = None) -> t.Self:
        """A new random ID, or s checked and typed.

        key, when given, is a bare shortuuid as it comes back from storage and
        is prefixed without being checked.
        """
        if key is None and s is None:
            key = shortuuid.uuid()
        if key is not None:
            return super().__new__(cls, f"{cls.prefix}{cls.separator}{key}")

        assert s is not None
        if not cls.has_prefix(s):
            raise ValueError(f"invalid {cls.__name__}: expected {cls.prefix}{cls.separator}...")
        tail = s[len(cls.prefix) + len(cls.separator) :]
        if len(tail) != KeyLength or not set(tail) <= set(shortuuid.get_alphabet()):
            raise ValueError(f"invalid {cls.__name__}: {s!r} does not end in a {KeyLength}-character shortuuid")
        return super().__new__(cls, s)

    @classmethod
    def has_prefix(cls, s: str) -> bool:
        return s.startswith(cls.prefix + cls.separator)

    @property
    def key(self) -> str:
        return self[len(self.prefix) + len(self.separator) :]

    @classmethod
    def __get_pydantic_core_schema__(cls, src: t.Any, handler: p.GetCoreSchemaHandler) -> core_schema.CoreSchema:
        # instances pass through; strings go through __new__, whose ValueError pydantic reports
        from_str = core_schema.no_info_after_validator_function(cls, core_schema.str_schema())
        return core_schema.json_or_python_schema(
            json_schema=from_str,
            python_schema=core_schema.union_schema([core_schema.is_instance_schema(cls), from_str]),
            serialization=core_schema.plain_serializer_function_ser_schema(str.__str__),
        )

    @classmethod
    def __get_pydantic_json_schema__(cls, src: t.Any, handler: p.GetJsonSchemaHandler) -> p.json_schema.JsonSchemaValue:
        return {"type": "string", "pattern": f"^{cls.prefix}\\{cls.separator}"}

    def __hash__(self) -> int:
        return str.__hash__(self)

    def __str__(self) -> str:
        return str.__str__(self)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.key}>"


# fmt: off
class UserID(ShortUUIDKey, prefix="user"): ...
class LearningResourceID(ShortUUIDKey, prefix="resource"): ...
class ToolID(ShortUUIDKey, prefix="tool"): ...
class TaskID(ShortUUIDKey, prefix="task"): ...
class AssignmentID(ShortUUIDKey, prefix="assignment"): ...
class CompletionID(ShortUUIDKey, prefix="completion"): ...
class ActivityID(ShortUUIDKey, prefix="activity"): ...
class OnboardingPathID(ShortUUIDKey, prefix="onboarding"): ...
# fmt: on

ItemID = LearningResourceID | ToolID | TaskID
