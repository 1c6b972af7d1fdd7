import datetime
import typing as t

import pydantic as p


class BaseModel(p.BaseModel):
    """Project-wide pydantic base.

    Dumps use field aliases unless the caller says otherwise, so a settings
    tree comes back out with the keys logging.config.dictConfig expects
    ("()", "class") and can be handed to it directly.
    """

    def model_dump(self, *, by_alias: bool = True, **kwargs: t.Any) -> dict[str, t.Any]:  # pyright: ignore [reportIncompatibleMethodOverride]
        return super().model_dump(by_alias=by_alias, **kwargs)


class WithCtime(BaseModel):
    create_time: datetime.datetime


class WithMtime(BaseModel):
    update_time: datetime.datetime


class WithTimestamps(WithCtime, WithMtime): ...
