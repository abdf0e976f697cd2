from __future__ import annotations

from types import MappingProxyType
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, PlainSerializer


class FrozenModel(BaseModel):
    """Immutable record; sequences are held as tuples."""

    model_config = ConfigDict(frozen=True)


# read-only views over str-keyed dicts; serialized back to plain dicts
VersionMap = Annotated[
    dict[str, str | None],
    AfterValidator(MappingProxyType),
    PlainSerializer(dict, return_type=dict[str, str | None]),
]
DurationMap = Annotated[
    dict[str, float],
    AfterValidator(MappingProxyType),
    PlainSerializer(dict, return_type=dict[str, float]),
]
