import datetime
import enum
import typing as t

from sqlalchemy.engine import Dialect
from sqlalchemy.sql.type_api import TypeDecorator
from sqlalchemy.types import DateTime, Enum, String

from seezee.model import ItemID, parse_item_id
from seezee.model.id import ShortUUIDKey


class ShortUUIDKeyType(TypeDecorator[ShortUUIDKey]):
    impl = String
    cache_ok = True

    def __init__(self, key_type: type[ShortUUIDKey]):
        self.key_type = key_type
        super().__init__(22)  # length of shortuuid

    def process_bind_param(self, value: ShortUUIDKey | None, dialect: Dialect) -> str | None:
        if value is not None:
            return value.key
        return value

    def process_result_value(self, value: str | None, dialect: Dialect) -> ShortUUIDKey | None:
        if value is not None:
            value = self.key_type(key=value)
        return value


class ItemIDType(TypeDecorator[ItemID]):
    """Stores an item ID with its prefix, which names the item's kind."""

    impl = String
    cache_ok = True

    def __init__(self):
        super().__init__(32)  # longest prefix + separator + shortuuid

    def process_bind_param(self, value: ItemID | str | None, dialect: Dialect) -> str | None:
        if value is not None:
            return str(parse_item_id(value))
        return value

    def process_result_value(self, value: str | None, dialect: Dialect) -> ItemID | None:
        if value is not None:
            return parse_item_id(value)
        return value


class TZDateTime(TypeDecorator[datetime.datetime]):
    """Timezone-aware timestamps on every dialect.

    PostgreSQL stores timestamptz natively. SQLite has no zone support, so
    values are written as naive UTC and marked UTC again on the way out.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime.datetime | None, dialect: Dialect) -> datetime.datetime | None:
        if value is None:
            return value
        if value.tzinfo is None:
            raise ValueError(f"refusing to store naive datetime {value!r}")
        value = value.astimezone(datetime.UTC)
        if dialect.name == "sqlite":
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value: datetime.datetime | None, dialect: Dialect) -> datetime.datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=datetime.UTC)
        return value


def value_enum(en: type[enum.Enum]) -> Enum:
    """Store an enum by its values in a plain VARCHAR column."""
    return Enum(en, values_callable=_enum_values, native_enum=False, validate_strings=True)


def _enum_values(en: type[enum.Enum]) -> list[t.Any]:
    return [e.value for e in en]
